"""Allocation of free capital between debt, savings and investments."""

from dataclasses import dataclass

from calc.validators import validate_fraction, validate_non_negative, validate_number


@dataclass(frozen=True)
class AllocationAmounts:
    """Share of a year's free capital directed to each bucket."""
    debt: float
    savings: float
    investment: float

    @property
    def total(self) -> float:
        return self.debt + self.savings + self.investment


def allocate(free_capital: float, pct_debt: float, pct_savings: float,
             pct_investment: float) -> AllocationAmounts:
    """Split free capital by the given fractions.

    The fractions are 0-1 values (0.8 for 80%). Free capital may be negative
    in a shortfall year, in which case every share is negative too. No
    rounding is applied.

    Example:
        allocate(10000, 0.8, 0.1, 0.1) -> debt 8000, savings 1000, investment 1000

    Raises:
        ValidationError: If any fraction is outside [0, 1] or not finite
    """
    validate_number(free_capital, "free_capital")
    validate_fraction(pct_debt, "pct_debt")
    validate_fraction(pct_savings, "pct_savings")
    validate_fraction(pct_investment, "pct_investment")

    return AllocationAmounts(
        debt=free_capital * pct_debt,
        savings=free_capital * pct_savings,
        investment=free_capital * pct_investment,
    )


def debt_payment(debt_remaining: float, available_payment: float) -> float:
    """Clamp a payment so it is never negative and never exceeds the debt.

    Example:
        debt_payment(5000, 8000) -> 5000

    Raises:
        ValidationError: If debt_remaining is negative or either value is not finite
    """
    validate_non_negative(debt_remaining, "debt_remaining")
    validate_number(available_payment, "available_payment")
    return min(max(available_payment, 0.0), debt_remaining)
