"""Tests for dashboard aggregates."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from deductly.models.ledger import Expense, IncomeEntry, MileageLog
from deductly.models.summary import PeriodFilter
from deductly.services.summary import (
    category_totals,
    mileage_totals,
    summary_totals,
    total_deductible,
    total_expenses,
    total_income,
)


class TestTotals:
    """Test the headline totals."""

    def test_summary_totals(
        self,
        sample_expenses: list[Expense],
        sample_income: list[IncomeEntry],
        sample_mileage: list[MileageLog],
    ) -> None:
        """Net income is income less deductible expenses."""
        totals = summary_totals(sample_expenses, sample_income, sample_mileage)
        assert totals.total_income == Decimal("1630.00")
        assert totals.total_expenses == Decimal("247.50")
        assert totals.total_deductible == Decimal("202.50")
        assert totals.net_income == Decimal("1427.50")
        assert totals.total_mileage == Decimal("1000")
        assert totals.business_mileage == Decimal("600")

    def test_empty_inputs(self) -> None:
        """Empty collections give zeros."""
        totals = summary_totals([], [], [])
        assert totals.total_income == 0
        assert totals.total_deductible == 0
        assert totals.net_income == 0

    def test_period_is_applied(self, sample_expenses: list[Expense]) -> None:
        """Only expenses in the period are summed."""
        march = PeriodFilter(year=2024, month=3)
        assert total_expenses(sample_expenses, march) == Decimal("120.00")
        assert total_deductible(sample_expenses, march) == Decimal("120.00")

    def test_total_amount_preferred_over_amount(self) -> None:
        """A tax-inclusive total is used for gross expenses when present."""
        expense = Expense(amount="100", tax_amount="13", total_amount="113")
        assert total_expenses([expense]) == Decimal("113")
        assert total_deductible([expense]) == Decimal("100")

    def test_precomputed_deductible_wins(self) -> None:
        """A stored non-zero deductible is used as is."""
        stored = Expense(amount="100", business_percentage="50", deductible_amount="40")
        zero = Expense(amount="100", business_percentage="50", deductible_amount="0")
        assert total_deductible([stored]) == Decimal("40")
        assert total_deductible([zero]) == Decimal("50")

    def test_null_amounts_count_as_zero(self) -> None:
        """Half-filled records never break a total."""
        income = [IncomeEntry(gross_amount=None), IncomeEntry(amount="10")]
        assert total_income(income) == Decimal("10")


class TestMileageTotals:
    """Test kilometre totals."""

    def test_odometer_fallback(self) -> None:
        """Distance comes from the odometer when not logged."""
        logs = [
            MileageLog(start_odometer="100", end_odometer="150", is_business=True),
            MileageLog(start_odometer="200", end_odometer="150"),
            MileageLog(distance_km="-5"),
        ]
        totals = mileage_totals(logs)
        assert totals.total == Decimal("50")
        assert totals.business == Decimal("50")


class TestCategoryTotals:
    """Test the per-category breakdown."""

    def test_sorted_by_deductible(self, sample_expenses: list[Expense]) -> None:
        """Largest deductible comes first."""
        totals = category_totals(sample_expenses)
        assert [t.category for t in totals] == [
            "GAS_FUEL",
            "PHONE_PLAN_DATA",
            "MEALS_CLIENT",
            "UBER_FEES",
            "PARKING_TOLLS",
        ]
        phone = totals[1]
        assert phone.category_label == "Phone & Data Plan"
        assert phone.total == Decimal("90.00")
        assert phone.deductible == Decimal("45.00")
        assert phone.count == 1

    def test_groups_and_labels(self) -> None:
        """Records sharing a category are grouped; unknown codes get a label."""
        expenses = [
            Expense(amount="10", category_code="CUSTOM_THING"),
            Expense(amount="5", category_code="CUSTOM_THING"),
            Expense(amount="1", category="fuel"),
        ]
        totals = category_totals(expenses)
        assert totals[0].category == "CUSTOM_THING"
        assert totals[0].category_label == "Custom Thing"
        assert totals[0].count == 2
        assert totals[0].deductible == Decimal("15")
        assert totals[1].category_label == "Gas & Oil"

    def test_ties_keep_first_seen_order(self) -> None:
        """Equal deductibles keep insertion order."""
        expenses = [
            Expense(date=dt.date(2024, 1, 1), amount="5", category_code="B_CODE"),
            Expense(date=dt.date(2024, 1, 2), amount="5", category_code="A_CODE"),
        ]
        assert [t.category for t in category_totals(expenses)] == ["B_CODE", "A_CODE"]
