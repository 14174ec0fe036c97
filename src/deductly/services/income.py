"""T2125 Part 3C: gross business income.

Line 3C = 3A - 3B (net sales) and line 8299 = 3C + 8230. Totals are kept in
integer cents. Display values keep the cents, export values are whole dollars
rounded half-up, since the CRA form takes whole dollars only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from deductly.models.income import (
    IncomeTotalsDisplay,
    IncomeTotalsExport,
    IncomeTotalsPart3C,
    IncomeValidation,
)
from deductly.services.currency import (
    cents_to_display,
    cents_to_dollars,
    display_to_cents,
)
from deductly.services.period_filter import filter_by_period

if TYPE_CHECKING:
    from collections.abc import Sequence

    from deductly.models.ledger import IncomeEntry
    from deductly.models.summary import PeriodFilter

logger = logging.getLogger(__name__)

GST_EXCEEDS_SALES_WARNING = "GST/HST exceeds gross sales—check entries."
NEGATIVE_OTHER_INCOME_WARNING = (
    "Other income is negative—verify adjustments are intentional."
)
NEGATIVE_GROSS_INCOME_WARNING = (
    "Total gross business income is negative—verify all entries."
)


def _gst_exceeds_sales(totals: IncomeTotalsPart3C) -> bool:
    return totals.sum_3b_cents > totals.sum_3a_cents and totals.sum_3a_cents > 0


def aggregate_income_part3c(
    entries: Sequence[IncomeEntry], period: PeriodFilter | None = None
) -> IncomeTotalsPart3C:
    """Sum raw income entries into Part 3C cent totals.

    Each entry is converted to cents before summing so the totals never pick
    up floating-point drift.
    """
    selected = filter_by_period(entries, period)
    dates = [entry.date for entry in selected if entry.date is not None]
    totals = IncomeTotalsPart3C(
        sum_3a_cents=sum(display_to_cents(entry.gross_amount) for entry in selected),
        sum_3b_cents=sum(
            display_to_cents(entry.gst_hst_portion) for entry in selected
        ),
        sum_8230_cents=sum(
            display_to_cents(entry.other_income_total) for entry in selected
        ),
        period_start=min(dates) if dates else None,
        period_end=max(dates) if dates else None,
        entry_count=len(selected),
    )
    logger.debug(
        "Aggregated %d income entries: 3A=%d 3B=%d 8230=%d cents",
        totals.entry_count,
        totals.sum_3a_cents,
        totals.sum_3b_cents,
        totals.sum_8230_cents,
    )
    return totals


def calculate_income_totals_display(
    totals: IncomeTotalsPart3C,
) -> IncomeTotalsDisplay:
    """Part 3C lines in dollars with cents (no rounding) for display."""
    has_warning = _gst_exceeds_sales(totals)
    return IncomeTotalsDisplay(
        line3a=cents_to_display(totals.sum_3a_cents),
        line3b=cents_to_display(totals.sum_3b_cents),
        line3c=cents_to_display(totals.sum_3c_cents),
        line8230=cents_to_display(totals.sum_8230_cents),
        line8299=cents_to_display(totals.sum_8299_cents),
        has_warning=has_warning,
        warning_message=GST_EXCEEDS_SALES_WARNING if has_warning else None,
    )


def get_income_totals_for_export(totals: IncomeTotalsPart3C) -> IncomeTotalsExport:
    """Part 3C lines in whole dollars for the CRA export."""
    return IncomeTotalsExport(
        line3a=cents_to_dollars(totals.sum_3a_cents),
        line3b=cents_to_dollars(totals.sum_3b_cents),
        line3c=cents_to_dollars(totals.sum_3c_cents),
        line8230=cents_to_dollars(totals.sum_8230_cents),
        line8299=cents_to_dollars(totals.sum_8299_cents),
    )


def validate_income_totals(totals: IncomeTotalsPart3C) -> IncomeValidation:
    """Check Part 3C totals for data-quality problems. Never raises."""
    warnings: list[str] = []
    if _gst_exceeds_sales(totals):
        warnings.append(GST_EXCEEDS_SALES_WARNING)
    if totals.sum_8230_cents < 0:
        warnings.append(NEGATIVE_OTHER_INCOME_WARNING)
    if totals.sum_8299_cents < 0:
        warnings.append(NEGATIVE_GROSS_INCOME_WARNING)
    return IncomeValidation(is_valid=not warnings, warnings=warnings)
