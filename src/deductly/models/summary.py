"""Dashboard summary models and the date-period filter."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from deductly.models.common import Money
from deductly.services.currency import ZERO


class PeriodFilter(BaseModel):
    """Optional date window. Every criterion that is set must match."""

    model_config = ConfigDict(frozen=True)

    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @model_validator(mode="after")
    def validate_range(self) -> PeriodFilter:
        """Reject a window that ends before it starts."""
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date < self.start_date
        ):
            raise ValueError("end_date must not be before start_date")
        return self

    @property
    def is_empty(self) -> bool:
        """True when no criterion is set."""
        return (
            self.year is None
            and self.month is None
            and self.start_date is None
            and self.end_date is None
        )


class MileageTotals(BaseModel):
    """Total and business kilometres."""

    model_config = ConfigDict(frozen=True)

    total: Money = ZERO
    business: Money = ZERO


class CategoryTotal(BaseModel):
    """Expense totals for one category."""

    model_config = ConfigDict(frozen=True)

    category: str
    category_label: str
    total: Money = ZERO
    deductible: Money = ZERO
    count: int = 0


class SummaryTotals(BaseModel):
    """Headline figures for a period."""

    model_config = ConfigDict(frozen=True)

    total_income: Money = ZERO
    total_expenses: Money = ZERO
    total_deductible: Money = ZERO
    total_mileage: Money = ZERO
    business_mileage: Money = ZERO
    net_income: Money = ZERO
