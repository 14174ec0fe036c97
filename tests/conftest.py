"""Pytest configuration and fixtures."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from fastapi.testclient import TestClient

from deductly.core.config import Settings, get_settings
from deductly.core.dependencies import set_report_cache
from deductly.main import create_app
from deductly.models.ledger import (
    Asset,
    Expense,
    IncomeEntry,
    LedgerSnapshot,
    MileageLog,
    MileageSettings,
    Profile,
)

if TYPE_CHECKING:
    from collections.abc import Generator

    from fastapi import FastAPI


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        debug=True,
        audit_log_enabled=False,
        enable_report_cache=True,
        report_cache_ttl=60,
    )


@pytest.fixture
def app(test_settings: Settings, monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """Create test FastAPI app."""
    monkeypatch.setattr("deductly.main.get_settings", lambda: test_settings)
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client
    set_report_cache(None)


@pytest.fixture
def sample_profile() -> Profile:
    """A rideshare driver's business profile."""
    return Profile(
        legal_name="Jordan Lee",
        sin="123456789",
        business_name="Lee Rides",
        business_number="123456789RT0001",
        business_type="rideshare",
        mailing_address_line1="10 King St W",
        mailing_city="Toronto",
        province="ON",
        mailing_postal_code="M5H 1A1",
        fiscal_year_start=dt.date(2024, 1, 1),
        fiscal_year_end_date=dt.date(2024, 12, 31),
    )


@pytest.fixture
def sample_expenses() -> list[Expense]:
    """A mix of vehicle, meals, phone and platform expenses."""
    return [
        Expense(
            id="e1",
            date=dt.date(2024, 3, 5),
            merchant_name="Shell",
            amount=Decimal("80.00"),
            category_code="GAS_FUEL",
            business_percentage=Decimal("100"),
        ),
        Expense(
            id="e2",
            date=dt.date(2024, 3, 9),
            merchant_name="Tim Hortons",
            amount=Decimal("40.00"),
            category_code="MEALS_CLIENT",
        ),
        Expense(
            id="e3",
            date=dt.date(2024, 2, 1),
            merchant_name="Rogers",
            amount=Decimal("90.00"),
            category_code="PHONE_PLAN_DATA",
            business_percentage=Decimal("50"),
        ),
        Expense(
            id="e4",
            date=dt.date(2024, 4, 12),
            merchant_name="Green P",
            amount=Decimal("12.50"),
            category_code="PARKING_TOLLS",
        ),
        Expense(
            id="e5",
            date=dt.date(2024, 5, 20),
            merchant_name="Uber",
            amount=Decimal("25.00"),
            category_code="UBER_FEES",
        ),
    ]


@pytest.fixture
def sample_income() -> list[IncomeEntry]:
    """Two payouts, one of them with HST included."""
    return [
        IncomeEntry(
            id="i1",
            date=dt.date(2024, 3, 1),
            platform="uber",
            gross_amount=Decimal("1130.00"),
            gst_collected=Decimal("130.00"),
            includes_tax=True,
            tips=Decimal("50.00"),
        ),
        IncomeEntry(
            id="i2",
            date=dt.date(2024, 4, 1),
            platform="lyft",
            gross_amount=Decimal("500.00"),
            bonuses=Decimal("25.00"),
        ),
    ]


@pytest.fixture
def sample_mileage() -> list[MileageLog]:
    """Business and personal trips in 2024."""
    return [
        MileageLog(
            id="m1",
            date=dt.date(2024, 3, 1),
            distance_km=Decimal("600"),
            is_business=True,
        ),
        MileageLog(
            id="m2",
            date=dt.date(2024, 3, 2),
            start_odometer=Decimal("10000"),
            end_odometer=Decimal("10400"),
            is_business=False,
        ),
    ]


@pytest.fixture
def sample_asset() -> Asset:
    """A class 10 vehicle bought this year."""
    return Asset(
        id="a1",
        asset_name="2022 Toyota Camry",
        asset_class="10",
        cost_before_tax=Decimal("30000"),
        ucc_opening=Decimal("30000"),
        half_year_rule=True,
    )


@pytest.fixture
def sample_snapshot(
    sample_profile: Profile,
    sample_expenses: list[Expense],
    sample_income: list[IncomeEntry],
    sample_mileage: list[MileageLog],
    sample_asset: Asset,
) -> LedgerSnapshot:
    """A complete ledger snapshot for 2024."""
    return LedgerSnapshot(
        profile=sample_profile,
        expenses=sample_expenses,
        income=sample_income,
        mileage=sample_mileage,
        assets=[sample_asset],
        mileage_settings=MileageSettings(
            year=2024,
            jan1_odometer_km=Decimal("9000"),
            current_odometer_km=Decimal("10000"),
        ),
    )


@pytest.fixture
def sample_snapshot_json(sample_snapshot: LedgerSnapshot) -> dict[str, Any]:
    """The sample snapshot as the JSON a client would send."""
    return sample_snapshot.model_dump(mode="json")
