"""Dashboard aggregates over expenses, income and mileage.

All functions are pure: they read the records they are given, apply the
optional period filter and return fresh totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from deductly.models.summary import (
    CategoryTotal,
    MileageTotals,
    PeriodFilter,
    SummaryTotals,
)
from deductly.services.categories import format_category_label
from deductly.services.currency import ZERO
from deductly.services.period_filter import filter_by_period

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from deductly.models.ledger import Expense, IncomeEntry, MileageLog


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def total_income(
    income: Sequence[IncomeEntry], period: PeriodFilter | None = None
) -> Decimal:
    """Sum of gross income amounts."""
    return _sum(entry.gross_amount for entry in filter_by_period(income, period))


def total_expenses(
    expenses: Sequence[Expense], period: PeriodFilter | None = None
) -> Decimal:
    """Sum of gross expense amounts, tax-inclusive totals preferred."""
    return _sum(expense.gross_total for expense in filter_by_period(expenses, period))


def total_deductible(
    expenses: Sequence[Expense], period: PeriodFilter | None = None
) -> Decimal:
    """Sum of deductible amounts after business-use percentage."""
    return _sum(
        expense.resolved_deductible for expense in filter_by_period(expenses, period)
    )


def mileage_totals(
    mileage: Sequence[MileageLog], period: PeriodFilter | None = None
) -> MileageTotals:
    """Total and business kilometres."""
    logs = filter_by_period(mileage, period)
    return MileageTotals(
        total=_sum(log.km for log in logs),
        business=_sum(log.km for log in logs if log.is_business),
    )


def category_totals(
    expenses: Sequence[Expense], period: PeriodFilter | None = None
) -> list[CategoryTotal]:
    """Group expenses by category, largest deductible first.

    Groups with equal deductible totals keep the order in which their category
    first appeared.
    """
    groups: dict[str, _CategoryBucket] = {}
    for expense in filter_by_period(expenses, period):
        key = expense.category_key
        if key not in groups:
            groups[key] = _CategoryBucket(
                label=expense.category_label or format_category_label(key)
            )
        bucket = groups[key]
        bucket.total += expense.gross_total
        bucket.deductible += expense.resolved_deductible
        bucket.count += 1

    totals = [
        CategoryTotal(
            category=key,
            category_label=bucket.label,
            total=bucket.total,
            deductible=bucket.deductible,
            count=bucket.count,
        )
        for key, bucket in groups.items()
    ]
    return sorted(totals, key=lambda item: item.deductible, reverse=True)


@dataclass
class _CategoryBucket:
    label: str
    total: Decimal = ZERO
    deductible: Decimal = ZERO
    count: int = 0


def summary_totals(
    expenses: Sequence[Expense],
    income: Sequence[IncomeEntry],
    mileage: Sequence[MileageLog],
    period: PeriodFilter | None = None,
) -> SummaryTotals:
    """Headline figures; net income is income less deductible expenses."""
    income_total = total_income(income, period)
    deductible = total_deductible(expenses, period)
    miles = mileage_totals(mileage, period)
    return SummaryTotals(
        total_income=income_total,
        total_expenses=total_expenses(expenses, period),
        total_deductible=deductible,
        total_mileage=miles.total,
        business_mileage=miles.business,
        net_income=income_total - deductible,
    )
