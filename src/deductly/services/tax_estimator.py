"""Year-to-date deduction breakdown and a rough tax-savings estimate.

The savings figure multiplies total deductions by a flat bracket rate chosen
from gross income. It is a coarse estimate for the dashboard, not a tax
calculation: it ignores federal/provincial brackets, credits and CPP.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from deductly.models.t2125 import (
    HOME_OFFICE_CATEGORIES,
    MEALS_CATEGORIES,
    MOTOR_VEHICLE_CATEGORIES,
)
from deductly.models.tax import GST_HST_RATES, ProvinceCode, TaxBracket, TaxEstimate
from deductly.services.cca import total_cca_deduction
from deductly.services.currency import ZERO, clamp
from deductly.services.period_filter import filter_by_period
from deductly.services.summary import mileage_totals, total_deductible

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from deductly.models.ledger import Asset, Expense, MileageLog
    from deductly.models.summary import PeriodFilter

logger = logging.getLogger(__name__)

MEALS_DEDUCTION_RATE = Decimal("0.5")
HUNDRED = Decimal("100")
QUARTERS_PER_YEAR = 4

DEFAULT_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(threshold=Decimal("50000"), rate=Decimal("0.30")),
    TaxBracket(threshold=Decimal("25000"), rate=Decimal("0.25")),
)
DEFAULT_TAX_RATE = Decimal("0.20")
DEFAULT_INSTALMENT_RATE = Decimal("0.25")


def _in_categories(
    expenses: Sequence[Expense], categories: frozenset[str]
) -> list[Expense]:
    return [expense for expense in expenses if expense.category_key in categories]


def marginal_rate(
    income: Decimal,
    brackets: Iterable[TaxBracket] = DEFAULT_TAX_BRACKETS,
    default_rate: Decimal = DEFAULT_TAX_RATE,
) -> Decimal:
    """Rate of the highest bracket whose threshold ``income`` strictly exceeds."""
    for bracket in sorted(brackets, key=lambda b: b.threshold, reverse=True):
        if income > bracket.threshold:
            return bracket.rate
    return default_rate


def business_use_percent(
    mileage: Sequence[MileageLog], period: PeriodFilter | None = None
) -> Decimal:
    """Business kilometres as a share of all kilometres, 0-100."""
    totals = mileage_totals(mileage, period)
    if totals.total <= ZERO:
        return ZERO
    return clamp(totals.business / totals.total * HUNDRED, ZERO, HUNDRED)


def calculate_tax_estimate(  # noqa: PLR0913
    expenses: Sequence[Expense],
    income_total: Decimal,
    mileage: Sequence[MileageLog],
    assets: Sequence[Asset],
    *,
    home_office_percent: Decimal = ZERO,
    brackets: Iterable[TaxBracket] = DEFAULT_TAX_BRACKETS,
    default_rate: Decimal = DEFAULT_TAX_RATE,
    period: PeriodFilter | None = None,
) -> TaxEstimate:
    """Break deductible expenses into CRA-flavoured components.

    ``other_deductions`` is the residual of total deductible expenses after the
    meals, motor-vehicle and home-office amounts are taken out, so the five
    components always add up to ``total_deductions`` exactly.

    Args:
        expenses: Expense records
        income_total: Gross income used to pick the savings bracket
        mileage: Mileage logs for the business-use percentage
        assets: Depreciable assets for the CCA component
        home_office_percent: Share of home-office costs claimed, as a fraction
        brackets: Income thresholds and marginal rates
        default_rate: Rate when income is below every threshold
        period: Optional date window applied to expenses and mileage

    Returns:
        TaxEstimate with the deduction components and estimated savings
    """
    selected = filter_by_period(expenses, period)

    meals_full = total_deductible(_in_categories(selected, MEALS_CATEGORIES))
    meals_50 = meals_full * MEALS_DEDUCTION_RATE
    motor_vehicle = total_deductible(
        _in_categories(selected, MOTOR_VEHICLE_CATEGORIES)
    )
    home_office = (
        total_deductible(_in_categories(selected, HOME_OFFICE_CATEGORIES))
        * home_office_percent
    )
    cca = total_cca_deduction(assets)

    all_deductible = total_deductible(selected)
    other = all_deductible - meals_full - motor_vehicle - home_office
    total = meals_50 + motor_vehicle + home_office + cca + other

    rate = marginal_rate(income_total, brackets, default_rate)
    logger.debug(
        "Tax estimate: deductions=%s income=%s rate=%s", total, income_total, rate
    )
    return TaxEstimate(
        total_income=income_total,
        total_deductions=total,
        meals_50_percent=meals_50,
        motor_vehicle_expenses=motor_vehicle,
        home_office_deduction=home_office,
        cca_deduction=cca,
        other_deductions=other,
        business_use_percent=business_use_percent(mileage, period),
        estimated_tax_savings=total * rate,
        marginal_rate=rate,
    )


def quarterly_tax_payment(
    income: Decimal,
    deductions: Decimal,
    tax_rate: Decimal = DEFAULT_INSTALMENT_RATE,
) -> Decimal:
    """Rough quarterly instalment: a quarter of the tax on net income."""
    taxable = max(ZERO, income - deductions)
    return taxable * tax_rate / QUARTERS_PER_YEAR


def gst_hst_rate(province: ProvinceCode | str = ProvinceCode.ON) -> Decimal:
    """GST or HST rate charged in ``province``."""
    return GST_HST_RATES[ProvinceCode(province)]


def gst_hst_collected(
    income: Decimal, province: ProvinceCode | str = ProvinceCode.ON
) -> Decimal:
    """GST/HST on taxable income at the province's rate."""
    return income * gst_hst_rate(province)


def gst_hst_itcs(
    expenses: Sequence[Expense], period: PeriodFilter | None = None
) -> Decimal:
    """Input tax credits: GST/HST paid on ITC-eligible expenses."""
    return sum(
        (
            expense.tax_amount
            for expense in filter_by_period(expenses, period)
            if expense.itc_eligible
        ),
        ZERO,
    )


def gst_hst_owing(
    income: Decimal,
    expenses: Sequence[Expense],
    province: ProvinceCode | str = ProvinceCode.ON,
    period: PeriodFilter | None = None,
) -> Decimal:
    """GST/HST collected less input tax credits, never below zero."""
    collected = gst_hst_collected(income, province)
    return max(ZERO, collected - gst_hst_itcs(expenses, period))
