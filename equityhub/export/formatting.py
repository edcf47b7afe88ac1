"""Display formatting for amounts and percentages.

Rounding is half away from zero on the exact binary value, so an exact
tie such as ``0.125`` shows as ``0.13`` while ``1.005`` (stored just
below the tie) shows as ``1.00``.

"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


def _two_decimals(value: float, fmt: str) -> str:
    text = format(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP), fmt)
    if text == "-0.00":
        text = "0.00"
    return text


def format_currency(value: float, suffix: str = "") -> str:
    """Format an amount with two decimals and thousands separators.

    Only the integer digits are grouped; the sign is kept in front of
    the grouped magnitude. An amount that rounds to zero is shown
    without a minus sign.

    Args:
        value: Amount to format.
        suffix: Optional currency label appended after a space
            (e.g. "JPN").

    Returns:
        Formatted string, e.g. ``format_currency(1234567.891)`` ->
        ``"1,234,567.89"``.

    """
    text = _two_decimals(value, ",.2f")
    return f"{text} {suffix}" if suffix else text


def format_percent(value: float) -> str:
    """Format a percentage with two decimals, e.g. ``"66.67%"``."""
    return f"{_two_decimals(value, '.2f')}%"
