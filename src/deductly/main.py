"""Deductly FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deductly.api import health_router, main_router
from deductly.core.config import get_settings
from deductly.core.dependencies import create_report_cache, set_report_cache
from deductly.core.logging_config import (
    LoggingConfig,
    setup_audit_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI as FastAPIType

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPIType) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Manage application lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting Deductly application...")

    if settings.audit_log_enabled:
        setup_audit_logging(
            LoggingConfig(
                log_level=settings.log_level,
                audit_log_path=Path(settings.audit_log_dir) / "audit",
            )
        )
        logger.info("Audit logging enabled in %s", settings.audit_log_dir)

    cache = create_report_cache(settings)
    set_report_cache(cache)
    if cache is not None:
        logger.info(
            "Report cache initialized (maxsize=%d, ttl=%ds)",
            cache.maxsize,
            cache.ttl,
        )

    yield

    logger.info("Shutting down Deductly application...")
    if cache is not None:
        cache.clear()
    set_report_cache(None)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Deductly",
        version=settings.app_version,
        description="CRA T2125 statement and deduction engine for gig drivers",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(main_router, prefix=settings.api_prefix)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    log_level = settings.log_level.lower()

    uvicorn.run(
        "deductly.main:app",
        host="0.0.0.0",  # noqa: S104
        port=8000,
        reload=settings.debug,
        log_level=log_level,
    )
