"""Retirement withdrawal calculations.

In retirement, living expenses are covered first by the net income of the
investment portfolio. The remaining shortfall is drawn from savings and
then from investments. A one-step lookahead rule caps the "safe" part of
that draw so that (years remaining - 1) years of expenses stay in reserve.
"""

from dataclasses import dataclass

from calc.validators import validate_integer, validate_non_negative, validate_number


@dataclass(frozen=True)
class RetirementWithdrawal:
    """How a retirement year's shortfall is funded."""
    shortfall: float
    safe_withdrawal: float
    savings_withdrawal: float
    investment_sale: float

    @property
    def total(self) -> float:
        return self.savings_withdrawal + self.investment_sale

    @property
    def unfunded_shortfall(self) -> float:
        """Part of the shortfall drawn from the reserve kept for future years."""
        return max(0.0, self.shortfall - self.safe_withdrawal)


def shortfall(expenses: float, investment_income: float) -> float:
    """Expenses not covered by investment income.

    Negative when the income exceeds the expenses.

    Example:
        shortfall(58584, 6000) -> 52584
    """
    validate_non_negative(expenses, "expenses")
    validate_number(investment_income, "investment_income")
    return expenses - investment_income


def max_withdrawal(expenses: float, investment_income: float, total_wealth: float,
                   years_remaining: int) -> float:
    """Largest draw that leaves the future-needs reserve intact.

    The reserve is (years_remaining - 1) * expenses. The result never
    exceeds the shortfall nor the total wealth, and is 0 when investment
    income already covers the expenses.

    Example:
        max_withdrawal(58584, 6000, 800000, 20) -> 0
    """
    gap = shortfall(expenses, investment_income)
    validate_non_negative(total_wealth, "total_wealth")
    years_remaining = validate_integer(years_remaining, "years_remaining", minimum=0)

    future_needs = max(0.0, (years_remaining - 1) * expenses)
    available_for_withdrawal = max(0.0, total_wealth - future_needs)

    if gap <= 0:
        return 0.0
    return min(gap, available_for_withdrawal)


def retirement_withdrawal(expenses: float, investment_income: float, savings: float,
                          investments: float, years_remaining: int) -> RetirementWithdrawal:
    """Fund a retirement year's shortfall from savings, then investments.

    The full shortfall is always drawn. Whatever cannot be taken from
    positive savings or investment balances is charged to savings, which
    then goes negative and marks the trajectory as exhausted.
    """
    validate_number(savings, "savings")
    validate_number(investments, "investments")
    gap = shortfall(expenses, investment_income)
    safe = max_withdrawal(expenses, investment_income, max(0.0, savings + investments), years_remaining)

    if gap <= 0:
        return RetirementWithdrawal(shortfall=gap, safe_withdrawal=0.0,
                                    savings_withdrawal=0.0, investment_sale=0.0)

    from_savings = min(max(savings, 0.0), gap)
    from_investments = min(max(investments, 0.0), gap - from_savings)
    overdraw = gap - from_savings - from_investments

    return RetirementWithdrawal(
        shortfall=gap,
        safe_withdrawal=safe,
        savings_withdrawal=from_savings + overdraw,
        investment_sale=from_investments,
    )
