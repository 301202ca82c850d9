"""Single-year state transition of the wealth simulation.

A year is either a working year (salary in, expenses out, free capital
split by the phase allocation) or a retirement year (expenses funded by
investment income, then by drawing down savings and investments). The very
first year of a trajectory is a snapshot of today's ledger with no flows.
"""

from calc.allocation import allocate, debt_payment
from calc.conversions import investment_gross_income, investment_net_income
from calc.phase import Phase, classify_phase
from calc.retirement import retirement_withdrawal
from calc.validators import (
    ValidationError,
    validate_fraction,
    validate_integer,
    validate_non_negative,
    validate_number,
)
from model.FinancialInputs import PhaseAllocation
from model.SimulationData import SimulationYearParams, SimulationYearResult


def _validate_params(params: SimulationYearParams) -> None:
    validate_integer(params.age, "age")
    validate_integer(params.current_age, "current_age")
    validate_integer(params.retirement_age, "retirement_age")
    validate_integer(params.lifespan, "lifespan")
    if params.age < params.current_age or params.age > params.lifespan:
        raise ValidationError(
            f"age must be between {params.current_age} and {params.lifespan}, got: {params.age}"
        )
    validate_non_negative(params.debt, "debt")
    validate_number(params.savings, "savings")
    validate_number(params.investments, "investments")
    validate_non_negative(params.annual_expenses, "annual_expenses")
    validate_non_negative(params.emergency_fund_target, "emergency_fund_target")
    validate_non_negative(params.net_salary_monthly_untaxed, "net_salary_monthly_untaxed")
    validate_non_negative(params.net_salary_monthly_taxed, "net_salary_monthly_taxed")
    validate_integer(params.tax_free_years, "tax_free_years", minimum=0)
    validate_number(params.investment_return_rate, "investment_return_rate")
    validate_fraction(params.tax_rate, "tax_rate")


def phase_allocation(phase: Phase, params: SimulationYearParams) -> PhaseAllocation:
    """Allocation percentages that apply during a working phase."""
    if phase == Phase.DEBT_ELIMINATION:
        return params.debt_phase
    if phase == Phase.EMERGENCY_FUND:
        return params.emergency_phase
    if phase == Phase.RETIREMENT_PREP:
        return params.investment_phase
    raise ValueError(f"No working allocation for phase: {phase.value}")


def process_year(params: SimulationYearParams) -> SimulationYearResult:
    """Advance the ledger by one year.

    Args:
        params: Starting ledger and the inputs that govern the year

    Returns:
        SimulationYearResult with the ending ledger and the year's flows

    Raises:
        ValidationError: If any parameter is out of range; nothing is computed
    """
    _validate_params(params)

    phase = classify_phase(params.age, params.retirement_age, params.debt,
                           params.savings, params.emergency_fund_target)

    if params.years_from_start == 0:
        return SimulationYearResult(
            age=params.age,
            debt=params.debt,
            savings=params.savings,
            investments=params.investments,
            is_retired=phase == Phase.RETIRED,
            phase=phase.value,
        )

    gross_return = investment_gross_income(params.investments, params.investment_return_rate)
    net_return = investment_net_income(gross_return, params.tax_rate)

    if phase == Phase.RETIRED:
        return _process_retirement_year(params, gross_return, net_return)
    return _process_working_year(params, phase, gross_return, net_return)


def _process_working_year(params: SimulationYearParams, phase: Phase,
                          gross_return: float, net_return: float) -> SimulationYearResult:
    taxed = params.years_from_start > params.tax_free_years
    net_monthly = params.net_salary_monthly_taxed if taxed else params.net_salary_monthly_untaxed

    gross_income = params.net_salary_monthly_untaxed * 12
    net_income = net_monthly * 12
    free_capital = net_income - params.annual_expenses + net_return

    amounts = allocate(free_capital, *phase_allocation(phase, params).fractions())
    paid = debt_payment(params.debt, amounts.debt)

    # Debt share that could not be used for repayment stays in savings
    unused_debt_share = amounts.debt - paid

    return SimulationYearResult(
        age=params.age,
        debt=max(0.0, params.debt - paid),
        savings=params.savings + amounts.savings + unused_debt_share,
        investments=params.investments + amounts.investment,
        is_retired=False,
        phase=phase.value,
        free_capital=free_capital,
        gross_income=gross_income,
        net_income=net_income,
        investment_gross_income=gross_return,
        investment_net_income=net_return,
    )


def _process_retirement_year(params: SimulationYearParams, gross_return: float,
                             net_return: float) -> SimulationYearResult:
    withdrawal = retirement_withdrawal(
        params.annual_expenses,
        net_return,
        params.savings,
        params.investments,
        params.lifespan - params.age,
    )

    savings = params.savings
    investments = params.investments

    if withdrawal.shortfall <= 0:
        # Income exceeds expenses; the surplus keeps growing the portfolio
        free_capital = -withdrawal.shortfall
        _, pct_savings, pct_investment = params.investment_phase.fractions()
        surplus = allocate(free_capital, 0.0, pct_savings, pct_investment)
        savings += surplus.savings
        investments += surplus.investment
    else:
        free_capital = -withdrawal.total
        savings -= withdrawal.savings_withdrawal
        investments -= withdrawal.investment_sale

    return SimulationYearResult(
        age=params.age,
        debt=params.debt,
        savings=savings,
        investments=investments,
        is_retired=True,
        phase=Phase.RETIRED.value,
        free_capital=free_capital,
        investment_gross_income=gross_return,
        investment_net_income=net_return,
        savings_withdrawal=withdrawal.savings_withdrawal,
        investment_sale=withdrawal.investment_sale,
        safe_withdrawal=withdrawal.safe_withdrawal,
        unfunded_shortfall=withdrawal.unfunded_shortfall,
    )
