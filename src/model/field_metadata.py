"""Field metadata for YearlySimulationData fields.

This module provides descriptions and short names for all trajectory
fields. Short names are used as column headers in the rendered tables and
in the MCP tool output.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Timeline
    "age": FieldInfo("Age", "Age at the end of the simulated year"),
    "years_from_now": FieldInfo("Years From Now", "Years elapsed since today (0 = today's snapshot)"),
    "phase": FieldInfo("Phase", "Phase that governed the year: debt, emergency, retirement or postRetirement"),
    "is_retired": FieldInfo("Retired", "True once the retirement age has been reached"),

    # Income and expenses
    "gross_income": FieldInfo("Gross Salary", "Salary for the year before tax"),
    "net_income": FieldInfo("Net Salary", "Salary for the year after tax (untaxed in the tax-free years)"),
    "annual_expenses": FieldInfo("Expenses", "Living expenses for the year"),
    "investment_gross_income": FieldInfo("Investment Return", "Return earned on the investment balance"),
    "investment_net_income": FieldInfo("Net Investment Return", "Investment return after tax"),
    "free_capital": FieldInfo("Free Capital", "Net income left after expenses (negative when drawing down)"),

    # Year-over-year changes
    "debt_payment": FieldInfo("Debt Payment", "Debt repaid during the year"),
    "savings_contribution": FieldInfo("Savings Change", "Change in the savings balance"),
    "investment_contribution": FieldInfo("Investment Change", "Change in the investment balance"),
    "wealth_growth_pct": FieldInfo("Net Worth Growth %", "Change in net worth as a percentage of last year's (0 when last year's was 0)"),

    # Retirement draw-down
    "savings_withdrawal": FieldInfo("Savings Withdrawal", "Amount drawn from savings to cover the shortfall"),
    "investment_sale": FieldInfo("Investment Sale", "Investments sold to cover the shortfall"),
    "safe_withdrawal": FieldInfo("Safe Withdrawal", "Largest draw that keeps the future-needs reserve intact"),
    "unfunded_shortfall": FieldInfo("Reserve Draw", "Part of the shortfall taken from the future-needs reserve"),

    # Balances
    "debt": FieldInfo("Debt", "Debt balance at the end of the year"),
    "savings": FieldInfo("Savings", "Savings balance at the end of the year"),
    "investments": FieldInfo("Investments", "Investment balance at the end of the year"),
    "total_wealth": FieldInfo("Net Worth", "Savings plus investments"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.

    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.

    Args:
        text: The header text to wrap
        max_width: Maximum width per line

    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]

    words = text.split()
    lines = []
    current_line = ""

    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines
