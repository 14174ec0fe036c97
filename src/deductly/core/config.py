"""Application configuration using pydantic-settings."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from deductly.models.tax import ProvinceCode, TaxBracket
from deductly.services.tax_estimator import DEFAULT_TAX_BRACKETS, DEFAULT_TAX_RATE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application settings
    app_name: str = Field(default="deductly", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # API settings
    api_prefix: str = Field(default="/api/v1", description="API route prefix")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Tax defaults
    default_province: ProvinceCode = Field(
        default=ProvinceCode.ON,
        description="Province reported when the profile has none",
    )
    home_office_percent: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=1,
        description="Share of home-office costs claimed, as a fraction",
    )
    tax_brackets: list[TaxBracket] = Field(
        default_factory=lambda: list(DEFAULT_TAX_BRACKETS),
        description="Income thresholds and marginal rates for the savings estimate",
    )
    tax_default_rate: Decimal = Field(
        default=DEFAULT_TAX_RATE,
        ge=0,
        le=1,
        description="Rate used when income is below every bracket threshold",
    )

    # Caching configuration
    enable_report_cache: bool = Field(
        default=True,
        description="Cache generated T2125 reports by ledger fingerprint",
    )
    report_cache_ttl: int = Field(
        default=300,
        description="Report cache TTL in seconds (5 minutes)",
    )
    report_cache_max_size: int = Field(
        default=128,
        description="Maximum number of cached reports",
    )

    # Audit logging
    audit_log_enabled: bool = Field(
        default=True,
        description="Write the structured audit log for generated reports",
    )
    audit_log_dir: str = Field(
        default="logs",
        description="Directory for the audit log file",
    )

    model_config = SettingsConfigDict(
        env_file=[".env.example", ".env.local"],  # Local overrides example
        env_file_encoding="utf-8",
        env_prefix="DEDUCTLY_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
