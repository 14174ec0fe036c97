"""Dependency injection for FastAPI."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from deductly.core.caching import ReportCache
from deductly.core.config import Settings, get_settings
from deductly.models.report import T2125Data

# Global instance that will be initialized on startup
_report_cache: ReportCache[T2125Data] | None = None


def set_report_cache(cache: ReportCache[T2125Data] | None) -> None:
    """Set the global report cache instance."""
    global _report_cache  # noqa: PLW0603
    _report_cache = cache


def get_report_cache() -> ReportCache[T2125Data] | None:
    """Get the report cache, or None when caching is disabled."""
    return _report_cache


def create_report_cache(settings: Settings) -> ReportCache[T2125Data] | None:
    """Build the report cache described by ``settings``."""
    if not settings.enable_report_cache:
        return None
    return ReportCache(
        maxsize=settings.report_cache_max_size, ttl=settings.report_cache_ttl
    )


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
ReportCacheDep = Annotated[
    ReportCache[T2125Data] | None, Depends(get_report_cache)
]
