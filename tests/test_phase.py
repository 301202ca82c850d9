"""Tests for phase classification."""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.phase import Phase, classify_phase


def test_retired_at_retirement_age():
    assert classify_phase(65, 65, 0, 0, 1000) == Phase.RETIRED


def test_retirement_takes_precedence_over_debt():
    assert classify_phase(70, 65, 5000, 0, 1000) == Phase.RETIRED


def test_debt_phase_while_debt_remains():
    assert classify_phase(40, 65, 0.01, 50000, 1000) == Phase.DEBT_ELIMINATION


def test_emergency_phase_until_target_reached():
    assert classify_phase(40, 65, 0, 999.99, 1000) == Phase.EMERGENCY_FUND


def test_retirement_prep_once_target_reached():
    assert classify_phase(40, 65, 0, 1000, 1000) == Phase.RETIREMENT_PREP


def test_phase_values_match_bucket_names():
    assert [p.value for p in Phase] == ['debt', 'emergency', 'retirement', 'postRetirement']
    assert Phase.RETIRED == 'postRetirement'
