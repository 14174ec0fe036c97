"""Health check endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from deductly.core.dependencies import ReportCacheDep, SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(settings: SettingsDep) -> dict[str, str]:
    """Check if the service is healthy."""
    return {"status": "healthy", "service": settings.app_name}


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(
    settings: SettingsDep, cache: ReportCacheDep
) -> dict[str, Any]:
    """Check if the service is ready to accept requests."""
    return {
        "status": "ready",
        "service": settings.app_name,
        "version": settings.app_version,
        "dependencies": {
            "report_cache": "enabled" if cache is not None else "disabled",
        },
    }
