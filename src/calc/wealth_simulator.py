"""Wealth simulation across the whole planning horizon.

The simulator walks from the current age to the end of the lifespan one
year at a time, feeding each year's ending ledger into the next. Along
the way it builds the trajectory table, groups the rows by phase and
records when the debt and emergency-fund milestones were reached.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from calc.conversions import percentage_growth
from calc.phase import Phase
from calc.result_cache import ResultCache
from calc.year_processor import process_year
from model.FinancialInputs import FinancialInputs
from model.SimulationData import (
    Milestones,
    PhaseBuckets,
    SimulationYearParams,
    SimulationYearResult,
    WealthSimulationResult,
    YearlySimulationData,
)


logger = logging.getLogger(__name__)


class WealthSimulator:
    """Runs year-by-year simulations, optionally memoized by a ResultCache."""

    def __init__(self, cache: Optional[ResultCache] = None):
        """Initialize the simulator.

        Args:
            cache: Cache to consult before simulating and to fill afterwards.
                   When None every call runs the full simulation.
        """
        self.cache = cache

    def simulate(self, inputs: FinancialInputs, retirement_age: Optional[int] = None) -> WealthSimulationResult:
        """Simulate the trajectory for a set of inputs.

        Args:
            inputs: Validated-on-entry financial inputs
            retirement_age: Overrides inputs.retirement_age when given

        Returns:
            WealthSimulationResult covering every age from current_age to lifespan

        Raises:
            ValidationError: If the inputs are invalid
        """
        if retirement_age is not None:
            inputs = inputs.with_retirement_age(retirement_age)
        inputs.validate()

        if self.cache is not None:
            cached = self.cache.get(inputs)
            if cached is not None:
                return cached

        result = self._run(inputs)

        if self.cache is not None:
            self.cache.put(inputs, result)
        return result

    def _run(self, inputs: FinancialInputs) -> WealthSimulationResult:
        logger.debug("simulating ages %d-%d, retiring at %d",
                     inputs.current_age, inputs.lifespan, inputs.retirement_age)

        annual_expenses = inputs.annual_expenses
        emergency_fund_target = inputs.emergency_fund_target
        untaxed_monthly = inputs.net_salary_monthly(taxed=False)
        taxed_monthly = inputs.net_salary_monthly(taxed=True)

        debt = float(inputs.total_debt)
        savings = float(inputs.total_savings)
        investments = float(inputs.total_investments)

        year_results: List[SimulationYearResult] = []
        for age in range(inputs.current_age, inputs.lifespan + 1):
            year = process_year(SimulationYearParams(
                age=age,
                current_age=inputs.current_age,
                retirement_age=inputs.retirement_age,
                lifespan=inputs.lifespan,
                debt=debt,
                savings=savings,
                investments=investments,
                annual_expenses=annual_expenses,
                emergency_fund_target=emergency_fund_target,
                net_salary_monthly_untaxed=untaxed_monthly,
                net_salary_monthly_taxed=taxed_monthly,
                tax_free_years=inputs.tax_free_years,
                investment_return_rate=inputs.investment_return_rate,
                tax_rate=inputs.tax_rate,
                debt_phase=inputs.debt_phase,
                emergency_phase=inputs.emergency_phase,
                investment_phase=inputs.investment_phase,
            ))
            debt = year.debt
            savings = year.savings
            investments = year.investments
            year_results.append(year)

        trajectory = build_trajectory(year_results, annual_expenses)
        last = trajectory[-1]

        return WealthSimulationResult(
            trajectory=trajectory,
            phases=organize_by_phase(trajectory),
            milestones=find_milestones(trajectory, emergency_fund_target),
            final_wealth=last.savings + last.investments,
            retirement_age=inputs.retirement_age,
            total_years=len(trajectory),
        )


def build_trajectory(year_results: List[SimulationYearResult],
                     annual_expenses: float) -> Tuple[YearlySimulationData, ...]:
    """Turn raw year results into display rows with year-over-year changes."""
    trajectory: List[YearlySimulationData] = []
    first_age = year_results[0].age if year_results else 0
    previous: Optional[SimulationYearResult] = None

    for year in year_results:
        if previous is None:
            debt_paid = savings_change = investment_change = growth = 0.0
        else:
            debt_paid = max(0.0, previous.debt - year.debt)
            savings_change = year.savings - previous.savings
            investment_change = year.investments - previous.investments
            growth = percentage_growth(year.total_wealth, previous.total_wealth)

        trajectory.append(YearlySimulationData(
            age=year.age,
            years_from_now=year.age - first_age,
            phase=year.phase,
            is_retired=year.is_retired,
            gross_income=year.gross_income,
            net_income=year.net_income,
            annual_expenses=annual_expenses if previous is not None else 0.0,
            investment_gross_income=year.investment_gross_income,
            investment_net_income=year.investment_net_income,
            free_capital=year.free_capital,
            debt_payment=debt_paid,
            savings_contribution=savings_change,
            investment_contribution=investment_change,
            wealth_growth_pct=growth,
            savings_withdrawal=year.savings_withdrawal,
            investment_sale=year.investment_sale,
            safe_withdrawal=year.safe_withdrawal,
            unfunded_shortfall=year.unfunded_shortfall,
            debt=year.debt,
            savings=year.savings,
            investments=year.investments,
            total_wealth=year.total_wealth,
        ))
        previous = year

    return tuple(trajectory)


def organize_by_phase(trajectory: Sequence[YearlySimulationData]) -> PhaseBuckets:
    """Group rows by their phase tag, keeping trajectory order."""
    grouped = {phase.value: [] for phase in Phase}
    for row in trajectory:
        if row.phase not in grouped:
            raise ValueError(f"Unknown financial phase: {row.phase}")
        grouped[row.phase].append(row)
    return PhaseBuckets(
        debt=tuple(grouped[Phase.DEBT_ELIMINATION.value]),
        emergency=tuple(grouped[Phase.EMERGENCY_FUND.value]),
        retirement=tuple(grouped[Phase.RETIREMENT_PREP.value]),
        post_retirement=tuple(grouped[Phase.RETIRED.value]),
    )


def find_milestones(trajectory: Sequence[YearlySimulationData], emergency_fund_target: float) -> Milestones:
    """First ages (after today) at which debt is gone and the fund is full."""
    simulated = [row for row in trajectory if row.years_from_now > 0]
    return Milestones(
        debt_free_age=next((row.age for row in simulated if row.debt <= 0), None),
        emergency_fund_age=next(
            (row.age for row in simulated if row.savings >= emergency_fund_target), None
        ),
    )


def simulate(inputs: FinancialInputs, retirement_age: Optional[int] = None,
             cache: Optional[ResultCache] = None) -> WealthSimulationResult:
    """Convenience wrapper around WealthSimulator.simulate()."""
    return WealthSimulator(cache).simulate(inputs, retirement_age)
