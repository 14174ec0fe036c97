"""Tests for boundary validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from deductly.services.validation import (
    InvalidAmountError,
    InvalidCCACostError,
    InvalidPercentageError,
    LedgerValidationError,
    validate_amount,
    validate_asset_entry,
    validate_cca_cost,
    validate_expense_entry,
    validate_percentage,
)


class TestValidateAmount:
    """Test amount validation."""

    @pytest.mark.parametrize("value", [None, "", "abc", "0", -5, True, "NaN"])
    def test_rejects(self, value: object) -> None:
        """Missing, non-numeric and non-positive amounts are rejected."""
        with pytest.raises(InvalidAmountError):
            validate_amount(value)

    def test_accepts(self) -> None:
        """A positive amount parses to Decimal."""
        assert validate_amount("12.50") == Decimal("12.50")
        assert validate_amount(3) == Decimal("3")


class TestValidatePercentage:
    """Test percentage validation."""

    @pytest.mark.parametrize("value", ["-1", "100.01", "x", None])
    def test_rejects(self, value: object) -> None:
        """Percentages outside 0-100 are rejected."""
        with pytest.raises(InvalidPercentageError) as exc_info:
            validate_percentage(value)
        assert exc_info.value.field == "business_percentage"

    @pytest.mark.parametrize("value", ["0", "100", 55.5])
    def test_accepts(self, value: object) -> None:
        """Bounds are inclusive."""
        assert Decimal("0") <= validate_percentage(value) <= Decimal("100")


class TestValidateCCACost:
    """Test CCA cost validation."""

    def test_rejects_zero(self) -> None:
        """A zero cost is rejected."""
        with pytest.raises(InvalidCCACostError):
            validate_cca_cost(0)

    def test_accepts_positive(self) -> None:
        """A positive cost parses to Decimal."""
        assert validate_cca_cost("30000") == Decimal("30000")


class TestValidateEntries:
    """Test whole-entry validation."""

    def test_expense_entry(self) -> None:
        """Numbers are parsed and other fields kept."""
        entry = {
            "amount": "50",
            "business_percentage": "80",
            "category_code": "GAS_FUEL",
        }
        validated = validate_expense_entry(entry)
        assert validated["amount"] == Decimal("50")
        assert validated["business_percentage"] == Decimal("80")
        assert validated["category_code"] == "GAS_FUEL"

    def test_expense_entry_negative_tax(self) -> None:
        """Tax paid cannot be negative."""
        with pytest.raises(InvalidAmountError) as exc_info:
            validate_expense_entry({"amount": "50", "tax_amount": "-1"})
        assert exc_info.value.field == "tax_amount"

    def test_expense_entry_bad_percentage(self) -> None:
        """A bad business percentage fails the whole entry."""
        with pytest.raises(LedgerValidationError):
            validate_expense_entry({"amount": "50", "business_percentage": "150"})

    def test_asset_entry(self) -> None:
        """An asset needs a positive cost."""
        assert validate_asset_entry({"cost_before_tax": "100"})[
            "cost_before_tax"
        ] == Decimal("100")
        with pytest.raises(InvalidCCACostError):
            validate_asset_entry({"cost_before_tax": "0"})
        with pytest.raises(InvalidPercentageError) as exc_info:
            validate_asset_entry({"cost_before_tax": "100", "business_use_pct": "101"})
        assert exc_info.value.field == "business_use_pct"
