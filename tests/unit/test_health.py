"""Unit tests for health endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


def test_health_check(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "deductly"}


def test_readiness_check(client: TestClient) -> None:
    """Test readiness check endpoint."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["service"] == "deductly"
    assert data["dependencies"] == {"report_cache": "enabled"}


def test_root(client: TestClient) -> None:
    """Test the API root."""
    response = client.get("/api/v1/")
    assert response.status_code == 200
    assert response.json()["message"] == "Deductly T2125 API"
