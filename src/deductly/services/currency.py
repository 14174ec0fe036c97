"""Currency and unit helpers.

Ledger records carry dollars with fractional cents. Aggregations that end up
on the T2125 form are done on ``Decimal`` (or integer cents for Part 3C) so
repeated additions never pick up binary floating-point drift.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENTS_PER_DOLLAR = 100
ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:  # noqa: ANN401
    """Coerce a raw numeric field into ``Decimal``.

    ``None``, empty strings and anything non-numeric become zero so that
    partially-filled records never break a calculation.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def round_money(value: Decimal) -> Decimal:
    """Round a dollar amount to cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def cents_to_display(cents: int) -> Decimal:
    """Convert cents to dollars with decimals for on-screen display (no rounding)."""
    return Decimal(int(cents)) / CENTS_PER_DOLLAR


def cents_to_dollars(cents: int) -> int:
    """Convert cents to whole dollars for the CRA export, rounding half-up."""
    dollars = Decimal(int(cents)) / CENTS_PER_DOLLAR
    return int(dollars.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def display_to_cents(amount: Any) -> int:  # noqa: ANN401
    """Convert a dollar amount into integer cents."""
    cents = to_decimal(amount) * CENTS_PER_DOLLAR
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp(value: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    """Clamp ``value`` into the closed range ``[lower, upper]``."""
    return max(lower, min(upper, value))


def format_currency(amount: Any) -> str:  # noqa: ANN401
    """Format a dollar amount with two decimals."""
    return f"{round_money(to_decimal(amount)):.2f}"


def format_percent(percent: Any) -> str:  # noqa: ANN401
    """Format a percentage with one decimal."""
    value = to_decimal(percent).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{value:.1f}"
