"""Input record for the wealth simulation.

FinancialInputs is built once from a program's spec.json (camelCase keys,
as persisted by the planning application) and then flows unchanged
through the simulator, the optimal retirement age search and the result
cache. All records here are frozen.
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Tuple

from calc.conversions import (
    usd_to_eur,
    eur_to_local,
    net_salary,
    monthly_expenses,
    annual_expenses,
    emergency_fund_target,
)
from calc.validators import (
    ValidationError,
    validate_fraction,
    validate_integer,
    validate_non_negative,
    validate_positive,
    validate_range,
)


# Allowed deviation when checking that phase percentages sum to 100
ALLOCATION_TOLERANCE = 0.01

MIN_AGE = 18
MAX_AGE = 100
MAX_LIFESPAN = 120


@dataclass(frozen=True)
class MonthlyExpenses:
    """Monthly living costs by category, in EUR."""
    housing: float = 1400.0
    utilities: float = 200.0
    dining_groceries: float = 750.0
    hired_staff: float = 340.0
    transportation: float = 100.0
    health_insurance: float = 550.0
    pet_care: float = 120.0
    wellness: float = 605.0
    entertainment: float = 150.0
    weekend_trips: float = 167.0
    annual_holiday: float = 750.0
    discretionary: float = 350.0

    def categories(self) -> Tuple[float, ...]:
        return tuple(asdict(self).values())

    def total(self) -> float:
        return monthly_expenses(self.categories())


@dataclass(frozen=True)
class PhaseAllocation:
    """How free capital is split during a phase, as percentages (0-100)."""
    debt: float
    savings: float
    investments: float

    def total(self) -> float:
        return self.debt + self.savings + self.investments

    def fractions(self) -> Tuple[float, float, float]:
        """The same split as 0-1 fractions, ready for allocate()."""
        return (self.debt / 100, self.savings / 100, self.investments / 100)

    def validate(self, name: str) -> None:
        for part in ("debt", "savings", "investments"):
            validate_range(getattr(self, part), 0, 100, f"{name}.{part}")
        if abs(self.total() - 100) > ALLOCATION_TOLERANCE:
            raise ValidationError(f"{name} allocations must sum to 100%, got: {self.total()}")


# Mapping from spec.json keys to expense category field names
EXPENSE_SPEC_KEYS = {
    'housing': 'housing',
    'utilities': 'utilities',
    'diningGroceries': 'dining_groceries',
    'hiredStaff': 'hired_staff',
    'transportation': 'transportation',
    'healthInsurance': 'health_insurance',
    'petCare': 'pet_care',
    'wellness': 'wellness',
    'entertainment': 'entertainment',
    'weekendTrips': 'weekend_trips',
    'annualHoliday': 'annual_holiday',
    'discretionary': 'discretionary',
}


@dataclass(frozen=True)
class FinancialInputs:
    """Everything the simulation needs to project a trajectory.

    Income is a monthly gross salary in USD converted to EUR; expenses,
    balances and results are all in EUR. The flat tax rate applies to
    salary once the initial tax-free years have elapsed, and to investment
    income in every year.
    """
    # Income
    gross_usd: float = 9000.0
    eur_usd: float = 1.17
    thb_eur: float = 37.75
    tax_rate: float = 0.17
    tax_free_years: int = 2

    expenses: MonthlyExpenses = field(default_factory=MonthlyExpenses)

    # Starting ledger
    total_debt: float = 75000.0
    total_savings: float = 0.0
    total_investments: float = 0.0

    # Timeline
    current_age: int = 33
    lifespan: int = 90
    retirement_age: int = 65

    investment_return_rate: float = 6.0  # percent per year
    emergency_fund_months: float = 6.0

    # Phase allocations (percent)
    debt_phase: PhaseAllocation = field(default_factory=lambda: PhaseAllocation(80, 10, 10))
    emergency_phase: PhaseAllocation = field(default_factory=lambda: PhaseAllocation(0, 70, 30))
    investment_phase: PhaseAllocation = field(default_factory=lambda: PhaseAllocation(0, 20, 80))

    def validate(self) -> None:
        """Check every field, raising ValidationError on the first problem."""
        validate_non_negative(self.gross_usd, "gross_usd")
        validate_positive(self.eur_usd, "eur_usd")
        validate_positive(self.thb_eur, "thb_eur")
        validate_fraction(self.tax_rate, "tax_rate")
        validate_integer(self.tax_free_years, "tax_free_years", minimum=0)

        for name, amount in asdict(self.expenses).items():
            validate_non_negative(amount, f"expenses.{name}")

        validate_non_negative(self.total_debt, "total_debt")
        validate_non_negative(self.total_savings, "total_savings")
        validate_non_negative(self.total_investments, "total_investments")

        current_age = validate_integer(self.current_age, "current_age")
        lifespan = validate_integer(self.lifespan, "lifespan")
        validate_integer(self.retirement_age, "retirement_age", minimum=0)
        validate_range(current_age, MIN_AGE, MAX_AGE, "current_age")
        validate_range(lifespan, current_age, MAX_LIFESPAN, "lifespan")

        validate_range(self.investment_return_rate, -100, 100, "investment_return_rate")
        validate_non_negative(self.emergency_fund_months, "emergency_fund_months")

        self.debt_phase.validate("debt_phase")
        self.emergency_phase.validate("emergency_phase")
        self.investment_phase.validate("investment_phase")
        if self.investment_phase.debt != 0:
            raise ValidationError(
                f"investment_phase.debt must be 0 once debt is cleared, got: {self.investment_phase.debt}"
            )

    # Derived values

    @property
    def gross_salary_monthly(self) -> float:
        """Monthly gross salary in EUR."""
        return usd_to_eur(self.gross_usd, self.eur_usd)

    @property
    def gross_salary_local(self) -> float:
        """Monthly gross salary in the local currency."""
        return eur_to_local(self.gross_salary_monthly, self.thb_eur)

    def net_salary_monthly(self, taxed: bool) -> float:
        if not taxed:
            return self.gross_salary_monthly
        return net_salary(self.gross_salary_monthly, self.tax_rate)

    @property
    def monthly_expenses(self) -> float:
        return self.expenses.total()

    @property
    def annual_expenses(self) -> float:
        return annual_expenses(self.monthly_expenses)

    @property
    def emergency_fund_target(self) -> float:
        return emergency_fund_target(self.monthly_expenses, self.emergency_fund_months)

    @property
    def total_years(self) -> int:
        """Number of rows in a trajectory, today included."""
        return self.lifespan - self.current_age + 1

    def with_retirement_age(self, retirement_age: int) -> 'FinancialInputs':
        return replace(self, retirement_age=retirement_age)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_spec(cls, spec: dict) -> 'FinancialInputs':
        """Build inputs from a spec.json dictionary.

        Keys that are absent fall back to the reference scenario defaults.
        Values are passed through as given; call validate() to check them.
        """
        defaults = cls()
        expense_defaults = defaults.expenses

        expenses = MonthlyExpenses(**{
            attr: spec.get(key, getattr(expense_defaults, attr))
            for key, attr in EXPENSE_SPEC_KEYS.items()
        })

        def allocation(index: int, default: PhaseAllocation, has_debt: bool = True) -> PhaseAllocation:
            return PhaseAllocation(
                debt=spec.get(f'allocDebt{index}', default.debt) if has_debt else 0,
                savings=spec.get(f'allocSavings{index}', default.savings),
                investments=spec.get(f'allocInvestment{index}', default.investments),
            )

        return cls(
            gross_usd=spec.get('grossUsd', defaults.gross_usd),
            eur_usd=spec.get('eurUsd', defaults.eur_usd),
            thb_eur=spec.get('thbEur', defaults.thb_eur),
            tax_rate=spec.get('taxRate', defaults.tax_rate),
            tax_free_years=spec.get('taxFreeYears', defaults.tax_free_years),
            expenses=expenses,
            total_debt=spec.get('totalDebt', defaults.total_debt),
            total_savings=spec.get('totalSavings', defaults.total_savings),
            total_investments=spec.get('totalInvestments', defaults.total_investments),
            current_age=spec.get('currentAge', defaults.current_age),
            lifespan=spec.get('lifespan', defaults.lifespan),
            retirement_age=spec.get('retirementAge', defaults.retirement_age),
            investment_return_rate=spec.get('investmentReturnRate', defaults.investment_return_rate),
            emergency_fund_months=spec.get('emergencyFundMonths', defaults.emergency_fund_months),
            debt_phase=allocation(1, defaults.debt_phase),
            emergency_phase=allocation(2, defaults.emergency_phase),
            investment_phase=allocation(3, defaults.investment_phase, has_debt=False),
        )
