"""Entry validation applied before records reach the calculation engine.

The engine itself is lenient and never calls these; they guard the points where
a user creates or edits a record (the API ``/expenses/validate`` endpoint, the
CLI ``cca`` command and any host application).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from deductly.services.currency import ZERO

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")


class DeductlyError(Exception):
    """Base exception for Deductly errors."""


class LedgerValidationError(DeductlyError):
    """Raised when a ledger entry fails validation."""

    def __init__(self, field: str, message: str) -> None:
        """Keep the offending field name next to the message."""
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidAmountError(LedgerValidationError):
    """Raised when an amount is missing, non-numeric or not positive."""


class InvalidPercentageError(LedgerValidationError):
    """Raised when a percentage falls outside 0-100."""


class InvalidCCACostError(LedgerValidationError):
    """Raised when an asset's capital cost is not positive."""


def _parse_decimal(value: Any) -> Decimal | None:  # noqa: ANN401
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except ArithmeticError:
        return None
    return parsed if parsed.is_finite() else None


def validate_amount(value: Any, field: str = "amount") -> Decimal:  # noqa: ANN401
    """Return ``value`` as a positive Decimal or raise InvalidAmountError."""
    amount = _parse_decimal(value)
    if amount is None:
        raise InvalidAmountError(field, f"{field} must be a number")
    if amount <= ZERO:
        raise InvalidAmountError(field, f"{field} must be greater than zero")
    return amount


def validate_percentage(
    value: Any,  # noqa: ANN401
    field: str = "business_percentage",
) -> Decimal:
    """Return ``value`` as a Decimal in 0-100 or raise InvalidPercentageError."""
    percentage = _parse_decimal(value)
    if percentage is None:
        raise InvalidPercentageError(field, f"{field} must be a number")
    if percentage < ZERO or percentage > MAX_PERCENTAGE:
        raise InvalidPercentageError(field, f"{field} must be between 0 and 100")
    return percentage


def validate_cca_cost(
    value: Any,  # noqa: ANN401
    field: str = "cost_before_tax",
) -> Decimal:
    """Return the capital cost as a positive Decimal or raise InvalidCCACostError."""
    cost = _parse_decimal(value)
    if cost is None or cost <= ZERO:
        raise InvalidCCACostError(field, f"{field} must be greater than zero")
    return cost


def validate_expense_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """Validate a raw expense entry, returning it with parsed numbers."""
    validated = dict(entry)
    validated["amount"] = validate_amount(entry.get("amount"))
    if entry.get("business_percentage") is not None:
        validated["business_percentage"] = validate_percentage(
            entry["business_percentage"]
        )
    tax = entry.get("tax_amount", entry.get("tax_paid_hst"))
    if tax not in (None, "", 0):
        parsed_tax = _parse_decimal(tax)
        if parsed_tax is None or parsed_tax < ZERO:
            raise InvalidAmountError("tax_amount", "tax_amount must not be negative")
        validated["tax_amount"] = parsed_tax
    logger.debug("Validated expense entry %s", entry.get("id", "<new>"))
    return validated


def validate_asset_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """Validate a raw asset entry, returning it with parsed numbers."""
    validated = dict(entry)
    validated["cost_before_tax"] = validate_cca_cost(entry.get("cost_before_tax"))
    if entry.get("business_use_pct") is not None:
        validated["business_use_pct"] = validate_percentage(
            entry["business_use_pct"], field="business_use_pct"
        )
    logger.debug("Validated asset entry %s", entry.get("id", "<new>"))
    return validated
