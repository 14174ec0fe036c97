"""Tests for the deduction estimate."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from deductly.models.ledger import Asset, Expense, IncomeEntry, MileageLog
from deductly.models.summary import PeriodFilter
from deductly.models.tax import ProvinceCode, TaxBracket
from deductly.services.summary import total_income
from deductly.services.tax_estimator import (
    business_use_percent,
    calculate_tax_estimate,
    gst_hst_collected,
    gst_hst_itcs,
    gst_hst_owing,
    gst_hst_rate,
    marginal_rate,
    quarterly_tax_payment,
)


class TestCalculateTaxEstimate:
    """Test the deduction breakdown."""

    def test_components(
        self,
        sample_expenses: list[Expense],
        sample_income: list[IncomeEntry],
        sample_mileage: list[MileageLog],
        sample_asset: Asset,
    ) -> None:
        """Each component is computed from its categories."""
        estimate = calculate_tax_estimate(
            sample_expenses,
            total_income(sample_income),
            sample_mileage,
            [sample_asset],
        )
        assert estimate.meals_50_percent == Decimal("20.00")
        assert estimate.motor_vehicle_expenses == Decimal("92.50")
        assert estimate.home_office_deduction == 0
        assert estimate.cca_deduction == Decimal("4500")
        assert estimate.other_deductions == Decimal("70.00")
        assert estimate.total_deductions == Decimal("4682.50")
        assert estimate.business_use_percent == Decimal("60")
        assert estimate.marginal_rate == Decimal("0.20")
        assert estimate.estimated_tax_savings == Decimal("936.50")

    @pytest.mark.parametrize("home_office_percent", ["0", "0.15", "1"])
    def test_components_sum_to_total(
        self, sample_expenses: list[Expense], home_office_percent: str
    ) -> None:
        """The five components add up to the total exactly."""
        expenses = [
            *sample_expenses,
            Expense(amount="333.33", category_code="HOME_OFFICE"),
            Expense(amount="19.99", category_code="8523", business_percentage="33"),
            Expense(amount="7.77", category_code="UNMAPPED"),
        ]
        estimate = calculate_tax_estimate(
            expenses,
            Decimal("30000"),
            [],
            [],
            home_office_percent=Decimal(home_office_percent),
        )
        assert estimate.total_deductions == (
            estimate.meals_50_percent
            + estimate.motor_vehicle_expenses
            + estimate.home_office_deduction
            + estimate.cca_deduction
            + estimate.other_deductions
        )
        assert estimate.marginal_rate == Decimal("0.25")

    def test_empty(self) -> None:
        """No records gives an all-zero estimate."""
        estimate = calculate_tax_estimate([], Decimal("0"), [], [])
        assert estimate.total_deductions == 0
        assert estimate.estimated_tax_savings == 0
        assert estimate.business_use_percent == 0

    def test_period_limits_expenses(self, sample_expenses: list[Expense]) -> None:
        """Expenses outside the period are left out."""
        estimate = calculate_tax_estimate(
            sample_expenses,
            Decimal("0"),
            [],
            [],
            period=PeriodFilter(year=2024, month=3),
        )
        assert estimate.motor_vehicle_expenses == Decimal("80.00")
        assert estimate.meals_50_percent == Decimal("20.00")
        assert estimate.other_deductions == 0

    def test_custom_brackets(self) -> None:
        """Configured brackets replace the defaults."""
        estimate = calculate_tax_estimate(
            [Expense(amount="100", category_code="UBER_FEES")],
            Decimal("10001"),
            [],
            [],
            brackets=[TaxBracket(threshold=Decimal("10000"), rate=Decimal("0.5"))],
            default_rate=Decimal("0.1"),
        )
        assert estimate.estimated_tax_savings == Decimal("50.0")


class TestMarginalRate:
    """Test bracket selection."""

    @pytest.mark.parametrize(
        ("income", "expected"),
        [
            ("60000", "0.30"),
            ("50000.01", "0.30"),
            ("50000", "0.25"),
            ("25000.01", "0.25"),
            ("25000", "0.20"),
            ("0", "0.20"),
        ],
    )
    def test_thresholds_are_strict(self, income: str, expected: str) -> None:
        """A bracket applies only above its threshold."""
        assert marginal_rate(Decimal(income)) == Decimal(expected)


class TestBusinessUse:
    """Test the mileage business-use percentage."""

    def test_no_mileage(self) -> None:
        """No kilometres means zero business use."""
        assert business_use_percent([]) == 0

    def test_percentage(self) -> None:
        """Business share of all kilometres."""
        logs = [
            MileageLog(date=dt.date(2024, 1, 1), distance_km="75", is_business=True),
            MileageLog(date=dt.date(2024, 1, 2), distance_km="25"),
        ]
        assert business_use_percent(logs) == Decimal("75")


class TestGstHst:
    """Test GST/HST helpers."""

    def test_rates(self) -> None:
        """Harmonized provinces charge HST, others GST only."""
        assert gst_hst_rate(ProvinceCode.ON) == Decimal("0.13")
        assert gst_hst_rate("NS") == Decimal("0.15")
        assert gst_hst_rate(ProvinceCode.AB) == Decimal("0.05")

    def test_collected_and_owing(self) -> None:
        """Owing is collected less eligible input tax credits."""
        expenses = [
            Expense(amount="100", tax_amount="13", itc_eligible=True),
            Expense(amount="100", tax_amount="13", itc_eligible=False),
        ]
        assert gst_hst_collected(Decimal("1000")) == Decimal("130.00")
        assert gst_hst_itcs(expenses) == Decimal("13")
        assert gst_hst_owing(Decimal("1000"), expenses) == Decimal("117.00")

    def test_owing_never_negative(self) -> None:
        """Credits larger than collected tax give zero owing."""
        expenses = [Expense(amount="1000", tax_amount="130", itc_eligible=True)]
        assert gst_hst_owing(Decimal("100"), expenses) == 0

    def test_quarterly_payment(self) -> None:
        """A quarter of the tax on net income."""
        assert quarterly_tax_payment(Decimal("10000"), Decimal("2000")) == Decimal(
            "500"
        )
        assert quarterly_tax_payment(Decimal("100"), Decimal("200")) == 0
