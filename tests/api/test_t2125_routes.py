"""Tests for the calculation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from deductly.core.dependencies import get_report_cache

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


class TestCategoriesEndpoint:
    """Test GET /api/v1/categories."""

    def test_routing_table(self, client: TestClient) -> None:
        """Every category is listed with its line metadata."""
        response = client.get("/api/v1/categories")
        assert response.status_code == 200
        data = response.json()
        meals = data["MEALS_CLIENT"]
        assert meals["line_item"] == "8523"
        assert meals["deductibility"] == 50.0
        assert meals["ita_reference"] == "ITA Section 67.1"
        assert data["GAS_FUEL"]["line_item"] == "9281"
        assert "HOME_OFFICE" not in data


class TestT2125Endpoint:
    """Test POST /api/v1/t2125."""

    def test_generate(
        self, client: TestClient, sample_snapshot_json: dict[str, Any]
    ) -> None:
        """The report is returned with CRA line keys."""
        response = client.post(
            "/api/v1/t2125", json={**sample_snapshot_json, "tax_year": 2024}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["taxYear"] == 2024
        assert data["identification"]["yourName"] == "Jordan Lee"
        assert data["part3a_businessIncome"]["line3A_grossSales"] == 1630.0
        assert data["part3c_income"]["line8299_grossBusinessIncome"] == 1575.0
        assert data["part4_expenses"]["line8523_mealsEntertainment"] == 20.0
        assert data["part4_expenses"]["line9368_totalExpenses"] == 4650.5
        assert data["chartA_motorVehicle"]["line16_allowableExpenses"] == 60.5
        assert data["part5_netIncome"]["line9946_yourNetIncome"] == -3075.5
        assert data["expenseDetails"][0]["lineNumber"] == "9225"
        assert data["hasWarning"] is False
        assert data["warningMessage"] is None

    def test_repeated_requests_hit_the_cache(
        self, client: TestClient, sample_snapshot_json: dict[str, Any]
    ) -> None:
        """An identical snapshot is served from the report cache."""
        body = {**sample_snapshot_json, "tax_year": 2024}
        first = client.post("/api/v1/t2125", json=body)
        second = client.post("/api/v1/t2125", json=body)
        assert first.json() == second.json()

        cache = get_report_cache()
        assert cache is not None
        info = cache.cache_info()
        assert info["hits"] == 1
        assert info["misses"] == 1

    def test_empty_ledger(self, client: TestClient) -> None:
        """An empty body still gives a complete report."""
        response = client.post("/api/v1/t2125", json={"tax_year": 2024})
        assert response.status_code == 200
        data = response.json()
        assert data["part4_expenses"]["line9368_totalExpenses"] == 0
        assert data["expenseDetails"] == []
        assert data["warnings"] == []

    def test_home_office_percent_from_request(self, client: TestClient) -> None:
        """The request can set the business share of home costs."""
        body = {
            "tax_year": 2024,
            "income": [{"gross_amount": 5000}],
            "expenses": [{"amount": 1000, "category_code": "HOME_OFFICE"}],
            "home_office_percent": 0.1,
        }
        data = client.post("/api/v1/t2125", json=body).json()
        assert data["part7_homeOffice"]["line7P_allowableClaim"] == 100.0
        assert data["part5_netIncome"]["line9946_yourNetIncome"] == 4900.0

    @pytest.mark.parametrize(
        "body",
        [{"tax_year": 1800}, {"home_office_percent": 2}],
    )
    def test_invalid_request(self, client: TestClient, body: dict[str, Any]) -> None:
        """Out-of-range options are rejected."""
        response = client.post("/api/v1/t2125", json=body)
        assert response.status_code == 422


class TestSummaryEndpoints:
    """Test the summary and estimate endpoints."""

    def test_summary_for_month(
        self, client: TestClient, sample_snapshot_json: dict[str, Any]
    ) -> None:
        """Totals and categories for one month."""
        body = {
            "expenses": sample_snapshot_json["expenses"],
            "income": sample_snapshot_json["income"],
            "mileage": sample_snapshot_json["mileage"],
            "period": {"year": 2024, "month": 3},
        }
        response = client.post("/api/v1/summary", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["total_income"] == 1130.0
        assert data["totals"]["total_deductible"] == 120.0
        assert data["totals"]["total_mileage"] == 1000.0
        assert [c["category"] for c in data["categories"]] == [
            "GAS_FUEL",
            "MEALS_CLIENT",
        ]

    def test_summary_rejects_bad_period(self, client: TestClient) -> None:
        """An inverted period is a request error."""
        body = {"period": {"start_date": "2024-02-01", "end_date": "2024-01-01"}}
        assert client.post("/api/v1/summary", json=body).status_code == 422

    def test_tax_estimate(
        self, client: TestClient, sample_snapshot_json: dict[str, Any]
    ) -> None:
        """The estimate uses the configured brackets."""
        response = client.post("/api/v1/tax-estimate", json=sample_snapshot_json)
        assert response.status_code == 200
        data = response.json()
        assert data["total_deductions"] == 4682.5
        assert data["cca_deduction"] == 4500.0
        assert data["estimated_tax_savings"] == 936.5
        assert data["business_use_percent"] == 60.0


class TestCCAEndpoint:
    """Test POST /api/v1/cca."""

    def test_cca(self, client: TestClient) -> None:
        """Half-year CCA on a new vehicle."""
        response = client.post(
            "/api/v1/cca",
            json={"cost_before_tax": 30000, "opening_ucc": 30000, "rate": 0.30},
        )
        assert response.status_code == 200
        assert response.json() == {
            "base": 15000.0,
            "cca_deduction": 4500.0,
            "closing_ucc": 25500.0,
        }

    def test_class_rate_default(self, client: TestClient) -> None:
        """Without a rate the class rate applies."""
        response = client.post(
            "/api/v1/cca",
            json={
                "cost_before_tax": 10000,
                "opening_ucc": 10000,
                "asset_class": "54",
                "half_year_rule": False,
            },
        )
        assert response.json()["cca_deduction"] == 3000.0

    def test_zero_cost_is_rejected(self, client: TestClient) -> None:
        """A zero cost is a validation error with the field name."""
        response = client.post(
            "/api/v1/cca", json={"cost_before_tax": 0, "opening_ucc": 0}
        )
        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "cost_before_tax"


class TestIncomeEndpoint:
    """Test POST /api/v1/income/part3c."""

    def test_part3c(self, client: TestClient) -> None:
        """Totals in cents, display and export projections."""
        body = {
            "income": [
                {"gross_amount": 5000, "gst_collected": 650, "includes_tax": True},
                {"gross_amount": 0, "tips": 500},
            ]
        }
        response = client.post("/api/v1/income/part3c", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["totals"]["sum_3a_cents"] == 500000
        assert data["display"]["line3C"] == 4350.0
        assert data["display"]["line8299"] == 4850.0
        assert data["export"]["line8299"] == 4850
        assert data["validation"] == {"is_valid": True, "warnings": []}

    def test_gst_warning(self, client: TestClient) -> None:
        """GST above gross sales is flagged."""
        body = {
            "income": [
                {"gross_amount": 1000, "gst_collected": 1500, "includes_tax": True}
            ]
        }
        data = client.post("/api/v1/income/part3c", json=body).json()
        assert data["display"]["hasWarning"] is True
        assert (
            data["display"]["warningMessage"]
            == "GST/HST exceeds gross sales—check entries."
        )


class TestExpenseValidationEndpoint:
    """Test POST /api/v1/expenses/validate."""

    def test_valid_expense(self, client: TestClient) -> None:
        """A valid entry comes back parsed."""
        response = client.post(
            "/api/v1/expenses/validate",
            json={"amount": "50", "category_code": "GAS_FUEL", "vendor": "Shell"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["expense"]["amount"] == 50.0
        assert data["expense"]["merchant_name"] == "Shell"

    @pytest.mark.parametrize(
        ("entry", "field"),
        [
            ({"amount": "-5"}, "amount"),
            ({"amount": "10", "business_percentage": 120}, "business_percentage"),
            ({"amount": "10", "tax_amount": -1}, "tax_amount"),
        ],
    )
    def test_invalid_expense(
        self, client: TestClient, entry: dict[str, Any], field: str
    ) -> None:
        """Invalid entries are rejected with the offending field."""
        response = client.post("/api/v1/expenses/validate", json=entry)
        assert response.status_code == 422
        assert response.json()["detail"]["field"] == field
