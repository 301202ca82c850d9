"""Tests for the allocation calculator."""

import math
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.allocation import allocate, debt_payment, AllocationAmounts
from calc.validators import ValidationError


def test_allocate_debt_phase_split():
    """10,000 at 80/10/10 gives 8,000 / 1,000 / 1,000."""
    result = allocate(10000, 0.8, 0.1, 0.1)

    assert isinstance(result, AllocationAmounts)
    assert result.debt == pytest.approx(8000)
    assert result.savings == pytest.approx(1000)
    assert result.investment == pytest.approx(1000)


def test_allocate_does_not_round():
    result = allocate(100.01, 1 / 3, 1 / 3, 1 / 3)
    assert result.debt == 100.01 / 3


@pytest.mark.parametrize("free_capital", [0, 1, 12345.67, -9876.54, 1e9])
@pytest.mark.parametrize("fractions", [
    (0.8, 0.1, 0.1),
    (0.0, 0.7, 0.3),
    (0.0, 0.2, 0.8),
    (1.0, 0.0, 0.0),
    (0.25, 0.25, 0.5),
])
def test_allocations_add_up_to_free_capital(free_capital, fractions):
    """Shares that sum to 100% always add back up to the free capital."""
    result = allocate(free_capital, *fractions)
    assert result.total == pytest.approx(free_capital)


def test_allocate_negative_free_capital():
    """A shortfall year produces negative shares."""
    result = allocate(-1000, 0.0, 0.7, 0.3)
    assert result.savings == pytest.approx(-700)
    assert result.investment == pytest.approx(-300)


@pytest.mark.parametrize("fractions", [
    (1.5, 0.0, 0.0),
    (-0.1, 0.6, 0.5),
    (0.5, math.nan, 0.5),
    (0.5, 0.5, math.inf),
])
def test_allocate_rejects_invalid_fractions(fractions):
    with pytest.raises(ValidationError):
        allocate(1000, *fractions)


def test_allocate_rejects_percentage_scale():
    """Percentages must already be normalized to fractions."""
    with pytest.raises(ValidationError):
        allocate(1000, 80, 10, 10)


class TestDebtPayment:
    """Tests for debt_payment clamping."""

    def test_payment_capped_at_debt(self):
        assert debt_payment(5000, 8000) == 5000

    def test_payment_below_debt(self):
        assert debt_payment(5000, 3000) == 3000

    def test_negative_payment_clamped_to_zero(self):
        assert debt_payment(5000, -200) == 0

    def test_zero_debt(self):
        assert debt_payment(0, 1000) == 0

    def test_negative_debt_rejected(self):
        with pytest.raises(ValidationError):
            debt_payment(-1, 1000)

    @pytest.mark.parametrize("debt", [0, 0.01, 100, 75000])
    @pytest.mark.parametrize("payment", [-1e6, -1, 0, 50, 100, 1e6])
    def test_payment_always_within_bounds(self, debt, payment):
        assert 0 <= debt_payment(debt, payment) <= debt
