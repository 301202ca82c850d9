"""Result records produced by the wealth simulation.

A simulation run yields one YearlySimulationData per age from today to the
end of the planning horizon. WealthSimulationResult bundles that trajectory
with the same rows grouped by phase, the milestone ages and the final
wealth. Every record offers to_dict() so results can be exported as JSON.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple

from model.FinancialInputs import PhaseAllocation


@dataclass(frozen=True)
class SimulationYearParams:
    """Everything the year processor needs to advance a single year."""
    age: int
    current_age: int
    retirement_age: int
    lifespan: int

    # Ledger at the start of the year
    debt: float
    savings: float
    investments: float

    annual_expenses: float
    emergency_fund_target: float
    net_salary_monthly_untaxed: float
    net_salary_monthly_taxed: float
    tax_free_years: int
    investment_return_rate: float  # percent
    tax_rate: float

    debt_phase: PhaseAllocation
    emergency_phase: PhaseAllocation
    investment_phase: PhaseAllocation

    @property
    def years_from_start(self) -> int:
        return self.age - self.current_age


@dataclass(frozen=True)
class SimulationYearResult:
    """Ledger at the end of a simulated year and the flows that produced it."""
    age: int
    debt: float
    savings: float
    investments: float
    is_retired: bool
    phase: str  # phase that governed this year

    free_capital: float = 0.0
    gross_income: float = 0.0  # salary for the year, before tax
    net_income: float = 0.0  # salary for the year, after tax
    investment_gross_income: float = 0.0
    investment_net_income: float = 0.0

    # Retirement years only
    savings_withdrawal: float = 0.0
    investment_sale: float = 0.0
    safe_withdrawal: float = 0.0
    unfunded_shortfall: float = 0.0

    @property
    def total_wealth(self) -> float:
        return self.savings + self.investments


@dataclass(frozen=True)
class YearlySimulationData:
    """One row of the trajectory table."""
    age: int
    years_from_now: int
    phase: str
    is_retired: bool

    # Income and expenses
    gross_income: float = 0.0
    net_income: float = 0.0
    annual_expenses: float = 0.0
    investment_gross_income: float = 0.0
    investment_net_income: float = 0.0
    free_capital: float = 0.0

    # Changes against the previous year
    debt_payment: float = 0.0
    savings_contribution: float = 0.0
    investment_contribution: float = 0.0
    wealth_growth_pct: float = 0.0

    # Retirement draw-down
    savings_withdrawal: float = 0.0
    investment_sale: float = 0.0
    safe_withdrawal: float = 0.0
    unfunded_shortfall: float = 0.0

    # Balances (end of year)
    debt: float = 0.0
    savings: float = 0.0
    investments: float = 0.0
    total_wealth: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PhaseBuckets:
    """Trajectory rows grouped by the phase that governed each year."""
    debt: Tuple[YearlySimulationData, ...] = ()
    emergency: Tuple[YearlySimulationData, ...] = ()
    retirement: Tuple[YearlySimulationData, ...] = ()
    post_retirement: Tuple[YearlySimulationData, ...] = ()

    def bucket(self, phase: str) -> Tuple[YearlySimulationData, ...]:
        """Return the rows tagged with the given phase value."""
        if phase == 'postRetirement':
            return self.post_retirement
        if phase in ('debt', 'emergency', 'retirement'):
            return getattr(self, phase)
        raise ValueError(f"Unknown financial phase: {phase}")

    def to_dict(self) -> Dict[str, List[dict]]:
        return {
            'debt': [row.to_dict() for row in self.debt],
            'emergency': [row.to_dict() for row in self.emergency],
            'retirement': [row.to_dict() for row in self.retirement],
            'postRetirement': [row.to_dict() for row in self.post_retirement],
        }


@dataclass(frozen=True)
class Milestones:
    """Ages at which the first two phases were completed."""
    debt_free_age: Optional[int] = None
    emergency_fund_age: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WealthSimulationResult:
    """Complete output of one simulation run.

    Results are shared through the result cache, so every part of them is
    read-only: the records are frozen and the row sequences are tuples.
    """
    trajectory: Tuple[YearlySimulationData, ...]
    phases: PhaseBuckets
    milestones: Milestones
    final_wealth: float
    retirement_age: int
    total_years: int

    def get_age(self, age: int) -> Optional[YearlySimulationData]:
        """Get the trajectory row for a specific age."""
        for row in self.trajectory:
            if row.age == age:
                return row
        return None

    def working_years(self) -> List[YearlySimulationData]:
        return [row for row in self.trajectory if not row.is_retired]

    def retirement_years(self) -> List[YearlySimulationData]:
        return [row for row in self.trajectory if row.is_retired]

    def to_dict(self) -> dict:
        return {
            'trajectory': [row.to_dict() for row in self.trajectory],
            'phases': self.phases.to_dict(),
            'milestones': self.milestones.to_dict(),
            'final_wealth': self.final_wealth,
            'retirement_age': self.retirement_age,
            'total_years': self.total_years,
        }
