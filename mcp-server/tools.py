"""Wealth Planner Tools for MCP Server.

This module provides the tool implementations that wrap the wealth
simulation engine and expose its data through MCP.
"""

import os
import sys
import json
from typing import Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.optimal_retirement import find_optimal_retirement_age
from calc.result_cache import ResultCache, get_default_cache
from calc.wealth_simulator import WealthSimulator
from model.FinancialInputs import FinancialInputs
from model.SimulationData import WealthSimulationResult, YearlySimulationData


PHASE_NAMES = ('debt', 'emergency', 'retirement', 'postRetirement')


def _rounded_row(row: YearlySimulationData) -> dict:
    """Trajectory row with money values rounded to cents."""
    return {
        key: round(value, 2) if isinstance(value, float) else value
        for key, value in row.to_dict().items()
    }


class WealthPlannerTools:
    """Tools that wrap the wealth simulator for a single program."""

    def __init__(self, base_path: str, program_name: str, cache: Optional[ResultCache] = None):
        """Initialize with paths and run the program's simulation.

        Args:
            base_path: Path to the wealth-planner root directory
            program_name: Name of the program folder in input-parameters
            cache: Result cache shared between programs
        """
        self.base_path = base_path
        self.program_name = program_name
        self.spec = self._load_spec()
        self.inputs = FinancialInputs.from_spec(self.spec)
        self.inputs.validate()
        self.simulator = WealthSimulator(cache)
        self.result: WealthSimulationResult = self.simulator.simulate(self.inputs)

    def _load_spec(self) -> dict:
        """Load the program's spec.json."""
        spec_path = os.path.join(
            self.base_path, 'input-parameters', self.program_name, 'spec.json'
        )
        with open(spec_path, 'r') as f:
            return json.load(f)

    def _result_for(self, retirement_age: Optional[int]) -> WealthSimulationResult:
        if retirement_age is None or retirement_age == self.inputs.retirement_age:
            return self.result
        return self.simulator.simulate(self.inputs, retirement_age=retirement_age)

    def get_simulation_summary(self, retirement_age: Optional[int] = None) -> dict:
        """Get headline figures for the simulation."""
        result = self._result_for(retirement_age)
        inputs = self.inputs
        return {
            "current_age": inputs.current_age,
            "lifespan": inputs.lifespan,
            "retirement_age": result.retirement_age,
            "total_years": result.total_years,
            "income": {
                "gross_salary_monthly": round(inputs.gross_salary_monthly, 2),
                "gross_salary_monthly_local": round(inputs.gross_salary_local, 2),
                "net_salary_monthly_tax_free": round(inputs.net_salary_monthly(taxed=False), 2),
                "net_salary_monthly_taxed": round(inputs.net_salary_monthly(taxed=True), 2),
                "tax_rate": inputs.tax_rate,
            },
            "expenses": {
                "monthly": round(inputs.monthly_expenses, 2),
                "annual": round(inputs.annual_expenses, 2),
                "emergency_fund_target": round(inputs.emergency_fund_target, 2),
            },
            "milestones": result.milestones.to_dict(),
            "years_per_phase": {
                phase: len(result.phases.bucket(phase)) for phase in PHASE_NAMES
            },
            "final_wealth": round(result.final_wealth, 2),
        }

    def get_year(self, age: int, retirement_age: Optional[int] = None) -> dict:
        """Get the trajectory row for a specific age."""
        result = self._result_for(retirement_age)
        row = result.get_age(age)
        if row is None:
            return {"error": f"Age {age} is not in the simulated range ({self.inputs.current_age}-{self.inputs.lifespan})"}
        return _rounded_row(row)

    def get_phase_years(self, phase: str, retirement_age: Optional[int] = None) -> dict:
        """Get every trajectory row in one phase."""
        if phase not in PHASE_NAMES:
            return {"error": f"Unknown phase '{phase}'. Valid phases: {list(PHASE_NAMES)}"}
        rows = self._result_for(retirement_age).phases.bucket(phase)
        return {
            "phase": phase,
            "years": len(rows),
            "ages": [row.age for row in rows],
            "rows": [_rounded_row(row) for row in rows],
        }

    def find_optimal_retirement_age(self, min_age: Optional[int] = None,
                                    max_age: Optional[int] = None) -> dict:
        """Search for the earliest sustainable retirement age."""
        search = find_optimal_retirement_age(self.inputs, min_age, max_age, simulator=self.simulator)
        result = search.to_dict()
        if search.feasible:
            result["final_wealth"] = round(search.final_wealth, 2)
        return result


class MultiProgramTools:
    """Manager for multiple wealth planning programs.

    Discovers all available programs and caches their simulations,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None,
                 cache: Optional[ResultCache] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the wealth-planner root directory
            default_program: Default program to use when none specified
            cache: Result cache for all programs (the process-wide cache by default)
        """
        self.base_path = base_path
        self.cache = cache if cache is not None else get_default_cache()
        self.programs: Dict[str, WealthPlannerTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = WealthPlannerTools(self.base_path, name, self.cache)
                except Exception as e:
                    # Log but don't fail on individual program errors
                    print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None) -> WealthPlannerTools:
        """Get the specified program or the default."""
        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            programs_info[name] = {
                "current_age": tools.inputs.current_age,
                "lifespan": tools.inputs.lifespan,
                "retirement_age": tools.inputs.retirement_age,
                "final_wealth": round(tools.result.final_wealth, 2),
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk.

        Cached results stay valid because they are keyed by the inputs
        themselves; edited programs simply produce new keys.
        """
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs)
            }
        }

    def get_simulation_summary(self, program: Optional[str] = None,
                               retirement_age: Optional[int] = None) -> dict:
        result = self._get_program(program).get_simulation_summary(retirement_age)
        result["program"] = program or self.default_program
        return result

    def get_year(self, age: int, program: Optional[str] = None,
                 retirement_age: Optional[int] = None) -> dict:
        result = self._get_program(program).get_year(age, retirement_age)
        result["program"] = program or self.default_program
        return result

    def get_phase_years(self, phase: str, program: Optional[str] = None,
                        retirement_age: Optional[int] = None) -> dict:
        result = self._get_program(program).get_phase_years(phase, retirement_age)
        result["program"] = program or self.default_program
        return result

    def find_optimal_retirement_age(self, program: Optional[str] = None,
                                    min_age: Optional[int] = None,
                                    max_age: Optional[int] = None) -> dict:
        result = self._get_program(program).find_optimal_retirement_age(min_age, max_age)
        result["program"] = program or self.default_program
        return result

    def get_cache_stats(self) -> dict:
        """Snapshot of the shared result cache."""
        stats = self.cache.stats().to_dict()
        stats["hit_rate"] = round(stats["hit_rate"], 4)
        stats["max_entries"] = self.cache.max_entries
        return stats
