"""Ledger record models consumed by the calculation engine.

These mirror the rows handed over by the record store. Every numeric field is
lenient: ``None`` or garbage becomes zero, because users fill the ledger in
incrementally over a tax year and a half-entered row must never break a
report. Strict entry validation lives in ``deductly.services.validation``.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from deductly.models.common import (
    Money,
    coerce_decimal,
    coerce_optional_decimal,
    coerce_text,
)
from deductly.services.currency import ZERO, clamp

HUNDRED = Decimal("100")
UNDATED_LABEL = "(undated)"

_RECORD_CONFIG = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class Expense(BaseModel):
    """One business expenditure."""

    model_config = _RECORD_CONFIG

    id: str = ""
    date: dt.date | None = None
    merchant_name: str = Field(
        default="", validation_alias=AliasChoices("merchant_name", "merchant", "vendor")
    )
    description: str = ""
    amount: Money = ZERO
    tax_amount: Money = Field(
        default=ZERO, validation_alias=AliasChoices("tax_amount", "tax_paid_hst")
    )
    total_amount: Money | None = None
    category_code: str = ""
    category: str = ""
    category_label: str = ""
    business_percentage: Money = HUNDRED
    deductible_amount: Money | None = None
    itc_eligible: bool = False
    notes: str = ""

    @field_validator("amount", "tax_amount", mode="before")
    @classmethod
    def validate_amounts(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Convert to Decimal; missing amounts count as zero."""
        return coerce_decimal(v)

    @field_validator("total_amount", "deductible_amount", mode="before")
    @classmethod
    def validate_optional_amounts(cls, v: Any) -> Decimal | None:  # noqa: ANN401
        """Convert precomputed amounts, keeping None when absent."""
        return coerce_optional_decimal(v)

    @field_validator("business_percentage", mode="before")
    @classmethod
    def validate_business_percentage(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Clamp the business-use percentage into 0-100."""
        if v is None or v == "":
            return HUNDRED
        return clamp(coerce_decimal(v), ZERO, HUNDRED)

    @field_validator(
        "id",
        "merchant_name",
        "description",
        "category_code",
        "category",
        "category_label",
        "notes",
        mode="before",
    )
    @classmethod
    def validate_text(cls, v: Any) -> str:  # noqa: ANN401
        """Treat null text as empty."""
        return coerce_text(v)

    @field_validator("itc_eligible", mode="before")
    @classmethod
    def validate_flag(cls, v: Any) -> bool:  # noqa: ANN401
        """Treat a null flag as False."""
        return bool(v)

    @property
    def category_key(self) -> str:
        """Category used for line mapping (code first, legacy name second)."""
        return self.category_code or self.category

    @property
    def gross_total(self) -> Decimal:
        """Tax-inclusive total when tracked separately, else the amount."""
        return self.total_amount or self.amount

    @property
    def resolved_deductible(self) -> Decimal:
        """Deductible amount, preferring a stored value over recomputation."""
        if self.deductible_amount:
            return self.deductible_amount
        return self.amount * self.business_percentage / HUNDRED


class IncomeEntry(BaseModel):
    """One income event: payout, tip, bonus or other."""

    model_config = _RECORD_CONFIG

    id: str = ""
    date: dt.date | None = None
    platform: str = Field(
        default="", validation_alias=AliasChoices("platform", "source")
    )
    gross_amount: Money = Field(
        default=ZERO,
        validation_alias=AliasChoices("gross_amount", "amount", "gross_income"),
    )
    gst_collected: Money = ZERO
    includes_tax: bool = False
    tips: Money = ZERO
    bonuses: Money = ZERO
    other_income: Money = ZERO
    trips_completed: int | None = None
    notes: str = ""

    @field_validator(
        "gross_amount",
        "gst_collected",
        "tips",
        "bonuses",
        "other_income",
        mode="before",
    )
    @classmethod
    def validate_amounts(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Convert to Decimal; missing amounts count as zero."""
        return coerce_decimal(v)

    @field_validator("id", "platform", "notes", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:  # noqa: ANN401
        """Treat null text as empty."""
        return coerce_text(v)

    @field_validator("includes_tax", mode="before")
    @classmethod
    def validate_flag(cls, v: Any) -> bool:  # noqa: ANN401
        """Treat a null flag as False."""
        return bool(v)

    @property
    def gst_hst_portion(self) -> Decimal:
        """GST/HST included in the gross amount (line 3B contribution)."""
        return self.gst_collected if self.includes_tax else ZERO

    @property
    def net_sales(self) -> Decimal:
        """Gross amount less the GST/HST it includes."""
        return self.gross_amount - self.gst_hst_portion

    @property
    def other_income_total(self) -> Decimal:
        """Tips, bonuses and other income (line 8230 contribution)."""
        return self.tips + self.bonuses + self.other_income

    def tax_warning(self) -> str | None:
        """Describe an inconsistent tax-included entry, if any."""
        if not self.includes_tax:
            return None
        label = self.id or (self.date.isoformat() if self.date else UNDATED_LABEL)
        if self.gst_collected <= 0:
            return f"Income entry {label} includes tax but has no GST/HST amount."
        if self.gst_collected > self.gross_amount:
            return f"Income entry {label} has GST/HST above its gross amount."
        return None


class MileageLog(BaseModel):
    """One trip or odometer interval."""

    model_config = _RECORD_CONFIG

    id: str = ""
    date: dt.date | None = None
    start_odometer: Money | None = None
    end_odometer: Money | None = None
    distance_km: Money | None = None
    is_business: bool = False
    purpose: str = ""

    @field_validator("start_odometer", "end_odometer", "distance_km", mode="before")
    @classmethod
    def validate_readings(cls, v: Any) -> Decimal | None:  # noqa: ANN401
        """Convert odometer readings and distance to Decimal."""
        return coerce_optional_decimal(v)

    @field_validator("id", "purpose", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:  # noqa: ANN401
        """Treat null text as empty."""
        return coerce_text(v)

    @field_validator("is_business", mode="before")
    @classmethod
    def validate_flag(cls, v: Any) -> bool:  # noqa: ANN401
        """Treat a null flag as False."""
        return bool(v)

    @property
    def km(self) -> Decimal:
        """Distance driven, derived from the odometer when not logged directly."""
        if self.distance_km:
            return max(ZERO, self.distance_km)
        if (
            self.start_odometer is not None
            and self.end_odometer is not None
            and self.end_odometer >= self.start_odometer
        ):
            return self.end_odometer - self.start_odometer
        return ZERO


class MileageSettings(BaseModel):
    """Annual odometer anchors for one user and tax year."""

    model_config = _RECORD_CONFIG

    year: int | None = None
    jan1_odometer_km: Money | None = None
    current_odometer_km: Money | None = None
    manual_total_km_ytd: Money | None = None

    @field_validator(
        "jan1_odometer_km", "current_odometer_km", "manual_total_km_ytd", mode="before"
    )
    @classmethod
    def validate_readings(cls, v: Any) -> Decimal | None:  # noqa: ANN401
        """Convert readings to Decimal."""
        return coerce_optional_decimal(v)

    @property
    def total_km_for_year(self) -> Decimal:
        """Kilometres driven this year, or zero when it cannot be known."""
        if (
            self.jan1_odometer_km is not None
            and self.current_odometer_km is not None
            and self.current_odometer_km >= self.jan1_odometer_km
        ):
            return self.current_odometer_km - self.jan1_odometer_km
        if self.manual_total_km_ytd is not None and self.manual_total_km_ytd > 0:
            return self.manual_total_km_ytd
        return ZERO


CCAClassCode = Literal["10", "10.1", "54"]


class Asset(BaseModel):
    """Depreciable property under CCA, usually the vehicle."""

    model_config = _RECORD_CONFIG

    id: str = ""
    asset_name: str = ""
    asset_class: CCAClassCode = "10"
    cost_before_tax: Money = ZERO
    purchase_date: dt.date | None = None
    business_use_pct: Money = HUNDRED
    ucc_opening: Money = ZERO
    cca_rate: Money | None = Field(default=None, ge=0, le=1)
    cca_current: Money = ZERO
    ucc_closing: Money = ZERO
    is_luxury_vehicle: bool = False
    is_zero_emission: bool = False
    half_year_rule: bool = True
    notes: str = ""

    @field_validator("asset_class", mode="before")
    @classmethod
    def validate_asset_class(cls, v: Any) -> str:  # noqa: ANN401
        """Accept numeric class codes such as 10 or 10.1."""
        if v is None or v == "":
            return "10"
        return str(v)

    @field_validator(
        "cost_before_tax", "ucc_opening", "cca_current", "ucc_closing", mode="before"
    )
    @classmethod
    def validate_amounts(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Convert to Decimal; missing amounts count as zero."""
        return coerce_decimal(v)

    @field_validator("cca_rate", mode="before")
    @classmethod
    def validate_rate(cls, v: Any) -> Decimal | None:  # noqa: ANN401
        """Convert the CCA rate (a fraction) to Decimal."""
        return coerce_optional_decimal(v)

    @field_validator("business_use_pct", mode="before")
    @classmethod
    def validate_business_use(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Clamp business use into 0-100."""
        if v is None or v == "":
            return HUNDRED
        return clamp(coerce_decimal(v), ZERO, HUNDRED)

    @field_validator("id", "asset_name", "notes", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:  # noqa: ANN401
        """Treat null text as empty."""
        return coerce_text(v)


class Profile(BaseModel):
    """Business and taxpayer identification. Read-only input to the mapper."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    full_name: str | None = None
    legal_name: str | None = None
    sin: str | None = None
    business_name: str | None = None
    business_number: str | None = None
    business_type: str | None = None
    mailing_address_line1: str | None = None
    mailing_address_line2: str | None = None
    mailing_city: str | None = None
    province: str | None = None
    mailing_postal_code: str | None = None
    main_product_service: str | None = None
    industry_code: str | None = None
    naics_code: str | None = None
    fiscal_year_start: dt.date | None = None
    fiscal_year_end_date: dt.date | None = None
    accounting_method: str | None = None
    gst_hst_registered: bool = False
    gst_hst_number: str | None = None
    last_year_of_business: bool = False
    partnership_percentage: Money | None = None
    internet_business_urls: list[str] = Field(default_factory=list)
    internet_income_percentage: Money | None = None

    @field_validator(
        "partnership_percentage", "internet_income_percentage", mode="before"
    )
    @classmethod
    def validate_percentages(cls, v: Any) -> Decimal | None:  # noqa: ANN401
        """Convert optional percentages, clamped into 0-100."""
        value = coerce_optional_decimal(v)
        if value is None:
            return None
        return clamp(value, ZERO, HUNDRED)

    @field_validator("internet_business_urls", mode="before")
    @classmethod
    def validate_urls(cls, v: Any) -> list[str]:  # noqa: ANN401
        """Treat a null URL list as empty."""
        return [str(url) for url in v or [] if url]

    @field_validator("gst_hst_registered", "last_year_of_business", mode="before")
    @classmethod
    def validate_flags(cls, v: Any) -> bool:  # noqa: ANN401
        """Treat null flags as False."""
        return bool(v)


class CCAOverride(BaseModel):
    """CCA figures computed elsewhere (e.g. the vehicle CCA screen)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    cca_deduction: Money = Field(
        default=ZERO, validation_alias=AliasChoices("cca_deduction", "ccaDeduction")
    )
    remaining_ucc: Money = Field(
        default=ZERO, validation_alias=AliasChoices("remaining_ucc", "remainingUCC")
    )

    @field_validator("cca_deduction", "remaining_ucc", mode="before")
    @classmethod
    def validate_amounts(cls, v: Any) -> Decimal:  # noqa: ANN401
        """Never allow a negative CCA figure through."""
        return max(ZERO, coerce_decimal(v))


class LedgerSnapshot(BaseModel):
    """Everything one report needs, as fetched from the record store."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    profile: Profile | None = None
    expenses: list[Expense] = Field(default_factory=list)
    income: list[IncomeEntry] = Field(default_factory=list)
    mileage: list[MileageLog] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    mileage_settings: MileageSettings | None = None
    cca_override: CCAOverride | None = None

    @field_validator("expenses", "income", "mileage", "assets", mode="before")
    @classmethod
    def validate_collections(cls, v: Any) -> list[Any]:  # noqa: ANN401
        """Treat a missing collection as empty."""
        return v or []
