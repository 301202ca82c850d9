"""Currency, tax, expense and investment-income helpers.

Salaries are quoted in USD and converted to EUR, the currency the
simulation runs in. The EUR figure can be shown in the local currency
(THB by default) through the second exchange rate.
"""

from typing import Iterable

from calc.validators import (
    validate_fraction,
    validate_non_negative,
    validate_number,
    validate_positive,
)


def usd_to_eur(usd_amount: float, eur_usd_rate: float) -> float:
    """Convert USD to EUR: 9000 USD / 1.17 = 7692.31 EUR."""
    validate_non_negative(usd_amount, "usd_amount")
    validate_positive(eur_usd_rate, "eur_usd_rate")
    return usd_amount / eur_usd_rate


def eur_to_local(eur_amount: float, local_eur_rate: float) -> float:
    """Convert EUR to the local currency: 1000 EUR * 37.75 = 37750 THB."""
    validate_non_negative(eur_amount, "eur_amount")
    validate_positive(local_eur_rate, "local_eur_rate")
    return eur_amount * local_eur_rate


def net_salary(gross_salary: float, tax_rate: float) -> float:
    """Salary after a flat tax rate is deducted."""
    validate_non_negative(gross_salary, "gross_salary")
    validate_fraction(tax_rate, "tax_rate")
    return gross_salary * (1 - tax_rate)


def monthly_expenses(categories: Iterable[float]) -> float:
    """Sum the monthly expense categories."""
    total = 0.0
    for i, amount in enumerate(categories):
        total += validate_non_negative(amount, f"expense[{i}]")
    return total


def annual_expenses(monthly: float) -> float:
    return validate_non_negative(monthly, "monthly_expenses") * 12


def emergency_fund_target(monthly: float, months: float = 6) -> float:
    """Savings buffer covering the given number of months of expenses."""
    validate_non_negative(monthly, "monthly_expenses")
    validate_non_negative(months, "emergency_fund_months")
    return monthly * months


def investment_gross_income(principal: float, annual_rate_percent: float) -> float:
    """Yearly return on an investment balance.

    The principal may be negative after a run of shortfall years, in which
    case the result is negative as well.
    """
    validate_number(principal, "principal")
    validate_number(annual_rate_percent, "annual_rate_percent")
    return principal * (annual_rate_percent / 100)


def investment_net_income(gross_income: float, tax_rate: float) -> float:
    validate_number(gross_income, "gross_income")
    validate_fraction(tax_rate, "tax_rate")
    return gross_income * (1 - tax_rate)


def percentage_growth(current: float, previous: float) -> float:
    """Change from previous to current as a percentage of previous.

    Returns 0 when previous is 0, since the change has no base.

    Example:
        percentage_growth(110000, 100000) -> 10.0
    """
    validate_number(current, "current")
    validate_number(previous, "previous")
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100
