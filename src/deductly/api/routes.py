"""Main API routes.

Every endpoint is stateless: the request carries the ledger records it needs
and the response is computed from them alone.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, status

from deductly.core.caching import ledger_fingerprint
from deductly.core.dependencies import ReportCacheDep, SettingsDep
from deductly.models.ledger import Expense
from deductly.models.report import T2125Data
from deductly.models.requests import (
    CCARequest,
    ExpenseValidationResponse,
    Part3CRequest,
    Part3CResponse,
    SummaryRequest,
    SummaryResponse,
    T2125Request,
    TaxEstimateRequest,
)
from deductly.models.t2125 import get_t2125_mapping
from deductly.models.tax import CCAResult, TaxEstimate
from deductly.services.cca import calculate_cca, prescribed_rate
from deductly.services.income import (
    aggregate_income_part3c,
    calculate_income_totals_display,
    get_income_totals_for_export,
    validate_income_totals,
)
from deductly.services.summary import category_totals, summary_totals, total_income
from deductly.services.t2125_mapper import generate_t2125_for_ledger
from deductly.services.tax_estimator import calculate_tax_estimate
from deductly.services.validation import LedgerValidationError, validate_expense_entry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["t2125"])


def _validation_error(error: LedgerValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"field": error.field, "message": error.message},
    )


@router.get("/")
async def root(settings: SettingsDep) -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "Deductly T2125 API",
        "version": settings.app_version,
        "docs": "/docs",
    }


@router.get("/categories")
async def list_categories() -> dict[str, dict[str, str | float | None]]:
    """Expense category routing: T2125 line, deductibility and ITA reference."""
    return get_t2125_mapping()


@router.post("/t2125")
async def generate_t2125(
    request: T2125Request,
    settings: SettingsDep,
    cache: ReportCacheDep,
) -> T2125Data:
    """Generate the T2125 statement for a ledger snapshot."""
    home_office_percent = (
        request.home_office_percent
        if request.home_office_percent is not None
        else settings.home_office_percent
    )

    def build() -> T2125Data:
        return generate_t2125_for_ledger(
            request,
            tax_year=request.tax_year,
            home_office_percent=home_office_percent,
            default_province=settings.default_province,
        )

    if cache is None:
        return build()
    key = ledger_fingerprint(
        request,
        home_office_percent=home_office_percent,
        default_province=settings.default_province.value,
    )
    return cache.get_or_compute(key, build)


@router.post("/summary")
async def summarize(request: SummaryRequest) -> SummaryResponse:
    """Headline totals and category breakdown for a period."""
    return SummaryResponse(
        totals=summary_totals(
            request.expenses, request.income, request.mileage, request.period
        ),
        categories=category_totals(request.expenses, request.period),
    )


@router.post("/tax-estimate")
async def estimate_tax(
    request: TaxEstimateRequest, settings: SettingsDep
) -> TaxEstimate:
    """Deduction breakdown with a coarse tax-savings estimate."""
    home_office_percent = (
        request.home_office_percent
        if request.home_office_percent is not None
        else settings.home_office_percent
    )
    return calculate_tax_estimate(
        request.expenses,
        total_income(request.income, request.period),
        request.mileage,
        request.assets,
        home_office_percent=home_office_percent,
        brackets=settings.tax_brackets,
        default_rate=settings.tax_default_rate,
        period=request.period,
    )


@router.post("/cca")
async def compute_cca(request: CCARequest) -> CCAResult:
    """One year of capital cost allowance."""
    rate = (
        request.rate
        if request.rate is not None
        else prescribed_rate(request.asset_class)
    )
    try:
        return calculate_cca(
            request.cost_before_tax,
            request.opening_ucc,
            rate,
            half_year_rule=request.half_year_rule,
        )
    except LedgerValidationError as e:
        raise _validation_error(e) from e


@router.post("/income/part3c")
async def income_part3c(request: Part3CRequest) -> Part3CResponse:
    """Part 3C totals from raw income entries."""
    totals = aggregate_income_part3c(request.income, request.period)
    return Part3CResponse(
        totals=totals,
        display=calculate_income_totals_display(totals),
        export=get_income_totals_for_export(totals),
        validation=validate_income_totals(totals),
    )


@router.post("/expenses/validate")
async def validate_expense(
    entry: dict[str, Any] = Body(...),  # noqa: B008
) -> ExpenseValidationResponse:
    """Validate an expense before it is stored."""
    try:
        validated = validate_expense_entry(entry)
    except LedgerValidationError as e:
        logger.info("Rejected expense entry: %s", e.message)
        raise _validation_error(e) from e
    return ExpenseValidationResponse(expense=Expense.model_validate(validated))
