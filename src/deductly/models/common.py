"""Shared field types for ledger and report models."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import PlainSerializer

from deductly.services.currency import to_decimal

# Dollar amounts stay Decimal in Python and serialise as plain JSON numbers.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def coerce_decimal(v: Any) -> Decimal:  # noqa: ANN401
    """Convert a raw numeric field to Decimal, treating missing values as zero."""
    return to_decimal(v)


def coerce_optional_decimal(v: Any) -> Decimal | None:  # noqa: ANN401
    """Convert to Decimal but keep ``None`` so callers can tell it was absent."""
    if v is None or v == "":
        return None
    return to_decimal(v)


def coerce_text(v: Any) -> str:  # noqa: ANN401
    """Convert a nullable text field to a plain string."""
    if v is None:
        return ""
    return str(v)
