"""Renderer classes for displaying wealth simulation results.

This module contains renderer classes that handle the presentation logic
for the different outputs of the planner. Each renderer takes the unified
WealthSimulationResult structure and extracts the fields it needs.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from model.FinancialInputs import FinancialInputs
from model.SimulationData import WealthSimulationResult, YearlySimulationData
from model.field_metadata import get_description, get_short_name, wrap_header


# Trajectory columns shown in tables: (field name, column width)
TRAJECTORY_COLUMNS = [
    ("phase", 14),
    ("free_capital", 14),
    ("debt_payment", 12),
    ("savings_withdrawal", 12),
    ("investment_sale", 12),
    ("debt", 14),
    ("savings", 14),
    ("investments", 16),
    ("total_wealth", 16),
    ("wealth_growth_pct", 10),
]

PHASE_TITLES = {
    'debt': "PHASE 1: DEBT ELIMINATION",
    'emergency': "PHASE 2: EMERGENCY FUND",
    'retirement': "PHASE 3: INVESTING FOR RETIREMENT",
    'postRetirement': "RETIREMENT",
}


def format_multiline_headers(columns: List[tuple], age_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        age_width: Width of the Age column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        lines = wrap_header(header, width)
        wrapped_headers.append((lines, width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad all headers to have the same number of lines (pad at top)
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {'Age':<{age_width}}"
        else:
            header_line = f"  {'':<{age_width}}"

        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * age_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def format_row(row: YearlySimulationData, columns: List[tuple], age_width: int = 6) -> str:
    """Format one trajectory row using the given (field, width) columns."""
    line = f"  {row.age:<{age_width}}"
    for field_name, width in columns:
        value = getattr(row, field_name)
        if isinstance(value, str):
            line += f" {value:>{width}}"
        else:
            line += f" {value:>{width},.2f}"
    return line


def parse_age_range(age_range: str, data: WealthSimulationResult) -> tuple:
    """Parse an age range string into start and end ages.

    Args:
        age_range: String in format 'startAge-endAge', 'startAge-', or '-endAge'
        data: WealthSimulationResult to get default ages from

    Returns:
        Tuple of (start_age, end_age)
    """
    if '-' not in age_range:
        age = int(age_range)
        return (age, age)

    parts = age_range.split('-')
    start_age = int(parts[0]) if parts[0] else data.trajectory[0].age
    end_age = int(parts[1]) if parts[1] else data.trajectory[-1].age
    return (start_age, end_age)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data) -> None:
        """Render the data to output."""
        pass


class SummaryRenderer(BaseRenderer):
    """Renderer for the income, expense and outcome summary."""

    def __init__(self, inputs: FinancialInputs):
        """Initialize with the inputs the simulation was run with.

        Args:
            inputs: FinancialInputs used for the income and expense figures
        """
        self.inputs = inputs

    def render(self, data: WealthSimulationResult) -> None:
        inputs = self.inputs

        print()
        print("=" * 60)
        print(f"{'WEALTH PLAN SUMMARY':^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("INCOME")
        print("-" * 60)
        print(f"  {'Gross Salary (Monthly, EUR):':<40} {inputs.gross_salary_monthly:>15,.2f}")
        print(f"  {'Gross Salary (Monthly, local):':<40} {inputs.gross_salary_local:>15,.2f}")
        print(f"  {'Net Salary, tax-free years (Monthly):':<40} {inputs.net_salary_monthly(taxed=False):>15,.2f}")
        print(f"  {'Net Salary, taxed years (Monthly):':<40} {inputs.net_salary_monthly(taxed=True):>15,.2f}")
        print(f"  {'Tax Rate:':<40} {inputs.tax_rate:>15.1%}")

        print()
        print("-" * 60)
        print("EXPENSES")
        print("-" * 60)
        print(f"  {'Monthly Expenses:':<40} {inputs.monthly_expenses:>15,.2f}")
        print(f"  {'Annual Expenses:':<40} {inputs.annual_expenses:>15,.2f}")
        print(f"  {'Emergency Fund Target:':<40} {inputs.emergency_fund_target:>15,.2f}")

        print()
        print("-" * 60)
        print("MILESTONES")
        print("-" * 60)
        debt_free = data.milestones.debt_free_age
        fund_full = data.milestones.emergency_fund_age
        print(f"  {'Debt Free At Age:':<40} {debt_free if debt_free is not None else 'never':>15}")
        print(f"  {'Emergency Fund Complete At Age:':<40} {fund_full if fund_full is not None else 'never':>15}")
        print(f"  {'Retirement Age:':<40} {data.retirement_age:>15}")

        print()
        print("=" * 60)
        print(f"  {'Years Simulated:':<40} {data.total_years:>15}")
        print(f"  {'FINAL NET WORTH:':<40} {data.final_wealth:>15,.2f}")
        print("=" * 60)
        print()


class TrajectoryRenderer(BaseRenderer):
    """Renderer for the full year-by-year trajectory table."""

    def __init__(self, start_age: int = None, end_age: int = None):
        """Initialize with optional age range.

        Args:
            start_age: First age to display (defaults to the current age)
            end_age: Last age to display (defaults to the lifespan)
        """
        self.start_age = start_age
        self.end_age = end_age

    def render(self, data: WealthSimulationResult) -> None:
        print()
        print("=" * 140)
        print(f"{'WEALTH TRAJECTORY':^140}")
        print("=" * 140)
        print()

        columns = [(get_short_name(name), width) for name, width in TRAJECTORY_COLUMNS]
        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        start = self.start_age if self.start_age is not None else data.trajectory[0].age
        end = self.end_age if self.end_age is not None else data.trajectory[-1].age

        for row in data.trajectory:
            if row.age < start or row.age > end:
                continue
            print(format_row(row, TRAJECTORY_COLUMNS))
        print()
        print_column_legend(TRAJECTORY_COLUMNS)


def print_column_legend(columns: List[tuple]) -> None:
    """Print each column header with the description of its field."""
    print("  Columns:")
    for field_name, _ in columns:
        print(f"    {get_short_name(field_name) + ':':<22} {get_description(field_name)}")
    print()


class PhaseTablesRenderer(BaseRenderer):
    """Renderer showing one table per phase."""

    def render(self, data: WealthSimulationResult) -> None:
        columns = [(get_short_name(name), width) for name, width in TRAJECTORY_COLUMNS[1:]]
        for phase in PHASE_TITLES:
            rows = data.phases.bucket(phase)
            print()
            print("=" * 130)
            print(f"{PHASE_TITLES[phase]:^130}")
            print("=" * 130)
            if not rows:
                print("  (no years in this phase)")
                continue

            header_lines, sep_line = format_multiline_headers(columns)
            for line in header_lines:
                print(line)
            print(sep_line)
            for row in rows:
                print(format_row(row, TRAJECTORY_COLUMNS[1:]))
            print(f"  {len(rows)} year(s), ages {rows[0].age}-{rows[-1].age}")
        print()


class OptimalAgeRenderer(BaseRenderer):
    """Renderer for the optimal retirement age search result."""

    def render(self, data) -> None:
        print()
        print("=" * 60)
        print(f"{'OPTIMAL RETIREMENT AGE':^60}")
        print("=" * 60)
        if not data.feasible:
            print(f"  No sustainable retirement age between {data.min_age} and {data.max_age}.")
            print(f"  {'Candidates Tested:':<40} {data.candidates_tested:>15}")
            print("=" * 60)
            print()
            return

        print(f"  {'Earliest Sustainable Age:':<40} {data.age:>15}")
        print(f"  {'Final Net Worth:':<40} {data.final_wealth:>15,.2f}")
        print(f"  {'Candidates Tested:':<40} {data.candidates_tested:>15}")
        lowest: Optional[YearlySimulationData] = min(
            data.simulation.retirement_years(), key=lambda r: r.total_wealth, default=None
        )
        if lowest is not None:
            print(f"  {'Lowest Net Worth In Retirement:':<40} {lowest.total_wealth:>15,.2f}")
            print(f"  {'  reached at age:':<40} {lowest.age:>15}")
        print("=" * 60)
        print()


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'Trajectory': TrajectoryRenderer,
    'Phases': PhaseTablesRenderer,
    'OptimalAge': OptimalAgeRenderer,
}
