"""Phase classification for a simulated year.

The phase is derived from the ledger every year rather than stored, so it
can never drift from the balances it describes.
"""

from enum import Enum


class Phase(str, Enum):
    """Financial phases, valued by the bucket name they are reported under."""
    DEBT_ELIMINATION = 'debt'
    EMERGENCY_FUND = 'emergency'
    RETIREMENT_PREP = 'retirement'
    RETIRED = 'postRetirement'


def classify_phase(age: int, retirement_age: int, debt: float, savings: float,
                   emergency_fund_target: float) -> Phase:
    """Decide which phase governs a year.

    Retirement wins over everything else; before retirement, outstanding
    debt comes first, then filling the emergency fund, then investing.
    """
    if age >= retirement_age:
        return Phase.RETIRED
    if debt > 0:
        return Phase.DEBT_ELIMINATION
    if savings < emergency_fund_target:
        return Phase.EMERGENCY_FUND
    return Phase.RETIREMENT_PREP
