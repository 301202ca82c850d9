"""Tests for the currency, tax, expense and income helpers."""

import math
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.conversions import (
    usd_to_eur,
    eur_to_local,
    net_salary,
    monthly_expenses,
    annual_expenses,
    emergency_fund_target,
    investment_gross_income,
    investment_net_income,
    percentage_growth,
)
from calc.validators import (
    ValidationError,
    validate_fraction,
    validate_integer,
    validate_number,
)


def test_usd_to_eur_divides_by_rate():
    assert usd_to_eur(9000, 1.17) == pytest.approx(7692.31, abs=0.01)


def test_eur_to_local_multiplies_by_rate():
    assert eur_to_local(1000, 37.75) == pytest.approx(37750)


def test_currency_chain():
    """USD -> EUR -> THB goes through both rates."""
    assert eur_to_local(usd_to_eur(9000, 1.17), 37.75) == pytest.approx(9000 / 1.17 * 37.75)


@pytest.mark.parametrize("rate", [0, -1.17])
def test_conversion_rejects_non_positive_rate(rate):
    with pytest.raises(ValidationError):
        usd_to_eur(100, rate)
    with pytest.raises(ValidationError):
        eur_to_local(100, rate)


def test_conversion_rejects_negative_amount():
    with pytest.raises(ValidationError):
        usd_to_eur(-1, 1.17)


def test_net_salary():
    assert net_salary(7692.31, 0.17) == pytest.approx(6384.62, abs=0.01)
    assert net_salary(5000, 0) == 5000


def test_net_salary_rejects_tax_rate_above_one():
    with pytest.raises(ValidationError):
        net_salary(5000, 1.5)


def test_expense_helpers():
    assert monthly_expenses([1400, 200, 750]) == 2350
    assert annual_expenses(4882) == 58584
    assert emergency_fund_target(4882, 6) == 29292
    assert emergency_fund_target(4882) == 29292


def test_monthly_expenses_rejects_negative_category():
    with pytest.raises(ValidationError, match="expense\\[1\\]"):
        monthly_expenses([100, -5])


def test_investment_income():
    gross = investment_gross_income(100000, 6)
    assert gross == pytest.approx(6000)
    assert investment_net_income(gross, 0.17) == pytest.approx(4980)


def test_investment_income_on_negative_balance():
    """A negative balance produces a negative return rather than an error."""
    assert investment_gross_income(-1000, 10) == pytest.approx(-100)


def test_percentage_growth():
    assert percentage_growth(110000, 100000) == pytest.approx(10)
    assert percentage_growth(90000, 100000) == pytest.approx(-10)
    assert percentage_growth(100000, 100000) == 0


def test_percentage_growth_from_negative_base():
    """The change is divided by the base as-is, sign included."""
    assert percentage_growth(50000, -100000) == pytest.approx(-150)


def test_percentage_growth_zero_base():
    assert percentage_growth(5000, 0) == 0
    assert percentage_growth(-5000, 0) == 0


def test_percentage_growth_rejects_non_finite():
    with pytest.raises(ValidationError):
        percentage_growth(math.nan, 100)
    with pytest.raises(ValidationError):
        percentage_growth(100, math.inf)


class TestValidators:
    """Tests for the shared guard helpers."""

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "5", None, True])
    def test_validate_number_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_number(value, "value")

    def test_validate_number_returns_float(self):
        assert validate_number(5, "value") == 5.0
        assert isinstance(validate_number(5, "value"), float)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_fraction(2, "fraction")

    def test_validate_integer(self):
        assert validate_integer(65.0, "age") == 65
        with pytest.raises(ValidationError):
            validate_integer(65.5, "age")
        with pytest.raises(ValidationError):
            validate_integer(-1, "age", minimum=0)
