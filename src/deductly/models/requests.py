"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from deductly.models.common import Money
from deductly.models.income import (
    IncomeTotalsDisplay,
    IncomeTotalsExport,
    IncomeTotalsPart3C,
    IncomeValidation,
)
from deductly.models.ledger import (
    Asset,
    CCAClassCode,
    Expense,
    IncomeEntry,
    LedgerSnapshot,
    MileageLog,
)
from deductly.models.summary import CategoryTotal, PeriodFilter, SummaryTotals


class T2125Request(LedgerSnapshot):
    """Ledger snapshot plus report options."""

    tax_year: int | None = Field(default=None, ge=1900, le=2100)
    home_office_percent: Decimal | None = Field(default=None, ge=0, le=1)


class SummaryRequest(BaseModel):
    """Records to summarise and an optional period."""

    expenses: list[Expense] = Field(default_factory=list)
    income: list[IncomeEntry] = Field(default_factory=list)
    mileage: list[MileageLog] = Field(default_factory=list)
    period: PeriodFilter | None = None


class SummaryResponse(BaseModel):
    """Headline totals with the per-category breakdown."""

    totals: SummaryTotals
    categories: list[CategoryTotal]


class TaxEstimateRequest(SummaryRequest):
    """Records for the deduction estimate."""

    assets: list[Asset] = Field(default_factory=list)
    home_office_percent: Decimal | None = Field(default=None, ge=0, le=1)


class CCARequest(BaseModel):
    """Inputs for one CCA computation. The cost is validated by the service."""

    cost_before_tax: Money
    opening_ucc: Money
    rate: Decimal | None = Field(default=None, ge=0, le=1)
    asset_class: CCAClassCode = "10"
    half_year_rule: bool = True


class Part3CRequest(BaseModel):
    """Income entries to aggregate into Part 3C."""

    income: list[IncomeEntry] = Field(default_factory=list)
    period: PeriodFilter | None = None


class Part3CResponse(BaseModel):
    """Part 3C totals in cents, for display, for export and their warnings."""

    totals: IncomeTotalsPart3C
    display: IncomeTotalsDisplay
    export: IncomeTotalsExport
    validation: IncomeValidation


class ExpenseValidationResponse(BaseModel):
    """A validated expense entry."""

    valid: bool = True
    expense: Expense
