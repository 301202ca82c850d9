"""Render module for wealth planner output display."""

from render.renderers import (
    BaseRenderer,
    SummaryRenderer,
    TrajectoryRenderer,
    PhaseTablesRenderer,
    OptimalAgeRenderer,
    parse_age_range,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'SummaryRenderer',
    'TrajectoryRenderer',
    'PhaseTablesRenderer',
    'OptimalAgeRenderer',
    'parse_age_range',
    'RENDERER_REGISTRY',
]
