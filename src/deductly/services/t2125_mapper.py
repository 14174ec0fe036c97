"""Assemble a complete T2125 statement from raw ledger records.

The mapper is a pure function of its inputs. It never raises on a partially
filled ledger: missing numbers count as zero, a missing profile falls back to
defaults and data-quality problems come back as warnings on the report.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING

from deductly.core.logging_config import log_report_generated
from deductly.models.report import (
    BusinessIncome,
    ExpenseDetail,
    GrossIncome,
    HomeOffice,
    Identification,
    InternetBusiness,
    MotorVehicleChart,
    NetIncome,
    Part4Expenses,
    T2125Data,
)
from deductly.models.t2125 import (
    HOME_OFFICE_CATEGORIES,
    VEHICLE_CHART_A_MAP,
    ChartAItem,
    T2125Line,
    line_for_category,
)
from deductly.models.tax import ProvinceCode
from deductly.services.categories import format_category_label
from deductly.services.cca import total_cca_deduction
from deductly.services.currency import ZERO, clamp, round_money
from deductly.services.income import (
    aggregate_income_part3c,
    calculate_income_totals_display,
    validate_income_totals,
)
from deductly.services.period_filter import fiscal_year_filter
from deductly.services.summary import mileage_totals

if TYPE_CHECKING:
    from collections.abc import Sequence

    from deductly.models.ledger import (
        Asset,
        CCAOverride,
        Expense,
        IncomeEntry,
        LedgerSnapshot,
        MileageLog,
        MileageSettings,
        Profile,
    )
    from deductly.models.summary import PeriodFilter

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")
MEALS_DEDUCTION_RATE = Decimal("0.5")
MAX_WEBSITES = 5

DEFAULT_INDUSTRY_CODE = "485310"  # NAICS: taxi service
DEFAULT_ACCOUNTING_METHOD = "Cash"
DEFAULT_MAIN_SERVICE = "Rideshare Driver"
UNKNOWN_MERCHANT = "Unknown"
NO_LINE = "N/A"
HOME_OFFICE_LINE = "9945"

BUSINESS_TYPES: dict[str, str] = {
    "rideshare": "Rideshare Driver (Uber/Lyft)",
    "delivery": "Delivery Driver (DoorDash/Skip)",
    "courier": "Courier Service",
    "freelance": "Freelance/Contractor",
    "other": "Self-Employed",
}

BUSINESS_USE_CAPPED_WARNING = (
    "Business kilometres exceed total kilometres for the year; "
    "business use capped at 100%."
)
MILEAGE_SETTINGS_YEAR_WARNING = (
    "Odometer readings are for {settings_year}, not {tax_year}; "
    "total kilometres taken from the mileage log."
)

OTHER_CATEGORY = "other"
VEHICLE_NOTE_KEYWORD = "vehicle"

# Part 4 lines filled from Chart A and the CCA schedule rather than summed.
_DERIVED_LINES = frozenset({T2125Line.MOTOR_VEHICLE, T2125Line.CCA})


def resolve_tax_year(
    profile: Profile | None,
    mileage_settings: MileageSettings | None,
    tax_year: int | None = None,
) -> int:
    """Pick the tax year: explicit, profile fiscal start, settings, then today."""
    if tax_year is not None:
        return tax_year
    if profile is not None and profile.fiscal_year_start is not None:
        return profile.fiscal_year_start.year
    if mileage_settings is not None and mileage_settings.year is not None:
        return mileage_settings.year
    return dt.date.today().year


def fiscal_period(profile: Profile | None, tax_year: int) -> PeriodFilter:
    """The profile's fiscal period, defaulting to the calendar tax year."""
    if profile is None:
        return fiscal_year_filter(tax_year)
    start = profile.fiscal_year_start or dt.date(tax_year, 1, 1)
    end = profile.fiscal_year_end_date or dt.date(tax_year, 12, 31)
    if end < start:
        logger.warning(
            "Fiscal period %s to %s is inverted; using %d", start, end, tax_year
        )
        return fiscal_year_filter(tax_year)
    return fiscal_year_filter(tax_year, start, end)


def _identification(
    profile: Profile | None, tax_year: int, default_province: str
) -> Identification:
    period = fiscal_period(profile, tax_year)
    start = period.start_date.isoformat() if period.start_date else ""
    end = period.end_date.isoformat() if period.end_date else ""
    if profile is None:
        return Identification(
            province=default_province,
            fiscal_period_start=start,
            fiscal_period_end=end,
            main_product_service=DEFAULT_MAIN_SERVICE,
            industry_code=DEFAULT_INDUSTRY_CODE,
            accounting_method=DEFAULT_ACCOUNTING_METHOD,
        )

    address = ", ".join(
        line
        for line in (profile.mailing_address_line1, profile.mailing_address_line2)
        if line
    )
    return Identification(
        your_name=profile.legal_name or profile.full_name or "",
        sin=profile.sin or "",
        business_name=profile.business_name or "",
        business_number=profile.business_number or "",
        business_address=address,
        city=profile.mailing_city or "",
        province=profile.province or default_province,
        postal_code=profile.mailing_postal_code or "",
        fiscal_period_start=start,
        fiscal_period_end=end,
        main_product_service=profile.main_product_service
        or BUSINESS_TYPES.get(profile.business_type or "", DEFAULT_MAIN_SERVICE),
        industry_code=profile.naics_code
        or profile.industry_code
        or DEFAULT_INDUSTRY_CODE,
        accounting_method=profile.accounting_method or DEFAULT_ACCOUNTING_METHOD,
        last_year_of_business=profile.last_year_of_business,
    )


def _internet_business(profile: Profile | None) -> InternetBusiness:
    if profile is None:
        return InternetBusiness()
    urls = profile.internet_business_urls[:MAX_WEBSITES]
    padded = urls + [""] * (MAX_WEBSITES - len(urls))
    return InternetBusiness(
        num_websites=len(profile.internet_business_urls),
        website1=padded[0],
        website2=padded[1],
        website3=padded[2],
        website4=padded[3],
        website5=padded[4],
        income_from_web_percent=profile.internet_income_percentage or ZERO,
    )


def _business_use(
    mileage: Sequence[MileageLog],
    mileage_settings: MileageSettings | None,
    period: PeriodFilter,
    tax_year: int,
    warnings: list[str],
) -> tuple[Decimal, Decimal, Decimal]:
    """Business km, total km and business-use percentage for the fiscal period.

    Odometer anchors replace the logged total only when they belong to
    ``tax_year`` (or carry no year).
    """
    logged = mileage_totals(mileage, period)
    total_km = logged.total
    if mileage_settings is not None and mileage_settings.total_km_for_year > ZERO:
        if mileage_settings.year in (None, tax_year):
            total_km = mileage_settings.total_km_for_year
        else:
            logger.warning(
                "Ignoring %d odometer readings for a %d report",
                mileage_settings.year,
                tax_year,
            )
            warnings.append(
                MILEAGE_SETTINGS_YEAR_WARNING.format(
                    settings_year=mileage_settings.year, tax_year=tax_year
                )
            )

    if total_km <= ZERO:
        return logged.business, total_km, ZERO

    percent = logged.business / total_km * HUNDRED
    if percent > HUNDRED:
        logger.warning(
            "Business km %s exceed total km %s for %d",
            logged.business,
            total_km,
            tax_year,
        )
        warnings.append(BUSINESS_USE_CAPPED_WARNING)
    return logged.business, total_km, clamp(percent, ZERO, HUNDRED)


def _is_vehicle_other(expense: Expense) -> bool:
    """Generic "Other" expenses whose notes mention the vehicle."""
    return (
        expense.category_key.lower() == OTHER_CATEGORY
        and VEHICLE_NOTE_KEYWORD in expense.notes.lower()
    )


def _chart_a_item(expense: Expense) -> ChartAItem | None:
    item = VEHICLE_CHART_A_MAP.get(expense.category_key)
    if item is None and _is_vehicle_other(expense):
        return ChartAItem.OTHER
    return item


def _motor_vehicle_chart(
    expenses: Sequence[Expense],
    business_km: Decimal,
    total_km: Decimal,
    business_use_percent: Decimal,
) -> MotorVehicleChart:
    buckets: dict[ChartAItem, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        item = _chart_a_item(expense)
        if item is not None:
            buckets[item] += expense.resolved_deductible

    lines = {item: round_money(buckets[item]) for item in ChartAItem}
    line12 = sum(
        (value for item, value in lines.items() if item != ChartAItem.PARKING), ZERO
    )
    line13 = round_money(line12 * business_use_percent / HUNDRED)
    line14 = lines[ChartAItem.PARKING]
    return MotorVehicleChart(
        business_km=business_km,
        total_km=total_km,
        fuel_oil=lines[ChartAItem.FUEL_OIL],
        interest=lines[ChartAItem.INTEREST],
        insurance=lines[ChartAItem.INSURANCE],
        licence_registration=lines[ChartAItem.LICENCE_REGISTRATION],
        maintenance=lines[ChartAItem.MAINTENANCE],
        leasing=lines[ChartAItem.LEASING],
        electricity=lines[ChartAItem.ELECTRICITY],
        other_expenses=lines[ChartAItem.OTHER],
        total_expenses=line12,
        business_portion=line13,
        business_parking_fees=line14,
        allowable_expenses=line13 + line14,
        business_use_percent=round_money(business_use_percent),
    )


def _part4_expenses(
    expenses: Sequence[Expense], motor_vehicle: Decimal, cca: Decimal
) -> Part4Expenses:
    by_line: dict[T2125Line, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        line = line_for_category(expense.category_key)
        if line is None or line in _DERIVED_LINES:
            continue
        by_line[line] += expense.resolved_deductible

    # 50% limit on meals and entertainment (ITA s. 67.1), applied after summing.
    by_line[T2125Line.MEALS_ENTERTAINMENT] *= MEALS_DEDUCTION_RATE
    by_line[T2125Line.MOTOR_VEHICLE] = motor_vehicle
    by_line[T2125Line.CCA] = cca

    values = {line.field_name: round_money(by_line[line]) for line in T2125Line}
    return Part4Expenses(total_expenses=sum(values.values(), ZERO), **values)


def _home_office(
    expenses: Sequence[Expense],
    home_office_percent: Decimal,
    net_income_after_adjustments: Decimal,
) -> HomeOffice:
    costs = round_money(
        sum(
            (
                expense.resolved_deductible
                for expense in expenses
                if expense.category_key in HOME_OFFICE_CATEGORIES
            ),
            ZERO,
        )
    )
    business_part = round_money(costs * home_office_percent)
    available = business_part
    limit = max(ZERO, net_income_after_adjustments)
    allowed = min(available, limit)
    return HomeOffice(
        other_expenses=costs,
        subtotal=costs,
        personal_use_part=costs - business_part,
        business_part=business_part,
        total_available=available,
        net_income_limit=limit,
        carry_forward_next=available - allowed,
        allowable_claim=allowed,
    )


def _line_number(expense: Expense) -> str:
    category_key = expense.category_key
    line = line_for_category(category_key)
    if line is not None:
        return line.value
    if _is_vehicle_other(expense):
        return T2125Line.MOTOR_VEHICLE.value
    if category_key in HOME_OFFICE_CATEGORIES:
        return HOME_OFFICE_LINE
    # Unmapped codes stay in the audit list under their own code.
    return category_key or NO_LINE


def _expense_details(expenses: Sequence[Expense]) -> list[ExpenseDetail]:
    ordered = sorted(
        expenses,
        key=lambda e: (e.date is None, e.date or dt.date.min),
    )
    return [
        ExpenseDetail(
            id=expense.id,
            date=expense.date.isoformat() if expense.date else "",
            merchant=expense.merchant_name or UNKNOWN_MERCHANT,
            description=expense.description or expense.notes,
            amount=round_money(expense.amount),
            business_percentage=expense.business_percentage,
            deductible_amount=round_money(expense.resolved_deductible),
            category_code=expense.category_key,
            category_label=expense.category_label
            or format_category_label(expense.category_key),
            line_number=_line_number(expense),
        )
        for expense in ordered
    ]


def generate_t2125_data(  # noqa: PLR0913
    profile: Profile | None,
    expenses: Sequence[Expense],
    income: Sequence[IncomeEntry],
    mileage: Sequence[MileageLog],
    assets: Sequence[Asset],
    mileage_settings: MileageSettings | None = None,
    cca_override: CCAOverride | None = None,
    *,
    tax_year: int | None = None,
    home_office_percent: Decimal = ZERO,
    default_province: ProvinceCode | str = ProvinceCode.ON,
) -> T2125Data:
    """Build the T2125 statement for one tax year.

    Args:
        profile: Taxpayer and business identification, if any
        expenses: Expenses to report (already limited to the tax year)
        income: Income entries to report
        mileage: Mileage logs; only the fiscal year's logs drive business use
        assets: Depreciable assets for the CCA line
        mileage_settings: Odometer anchors giving total km for the year
        cca_override: CCA computed elsewhere, replacing the asset calculation
        tax_year: Year to report; derived from the inputs when omitted
        home_office_percent: Share of home costs used for business (fraction)
        default_province: Province reported when the profile has none

    Returns:
        The fully computed T2125Data
    """
    year = resolve_tax_year(profile, mileage_settings, tax_year)
    warnings: list[str] = []

    # Part 3: income
    totals = aggregate_income_part3c(income)
    display = calculate_income_totals_display(totals)
    warnings.extend(validate_income_totals(totals).warnings)
    for entry in income:
        entry_warning = entry.tax_warning()
        if entry_warning:
            warnings.append(entry_warning)

    business_income = BusinessIncome(
        gross_sales=display.line3a,
        gst_hst_collected=display.line3b,
        subtotal=display.line3c,
        adjusted_gross_sales=display.line3c,
    )
    gross_income = GrossIncome(
        adjusted_gross_sales=display.line3c,
        other_income=display.line8230,
        gross_business_income=display.line8299,
    )

    # Part 4 and Chart A
    business_km, total_km, business_use = _business_use(
        mileage, mileage_settings, fiscal_period(profile, year), year, warnings
    )
    chart_a = _motor_vehicle_chart(expenses, business_km, total_km, business_use)
    cca = (
        cca_override.cca_deduction
        if cca_override is not None
        else total_cca_deduction(assets)
    )
    part4 = _part4_expenses(expenses, chart_a.allowable_expenses, cca)

    # Part 5 and Part 7
    net_before = gross_income.gross_business_income - part4.total_expenses
    home_office = _home_office(expenses, home_office_percent, net_before)
    net_income = NetIncome(
        net_income_before_adjustments=net_before,
        your_share=net_before,
        total=net_before,
        net_income_after_adjustments=net_before,
        business_use_of_home=home_office.allowable_claim,
        your_net_income=net_before - home_office.allowable_claim,
    )

    report = T2125Data(
        tax_year=year,
        identification=_identification(
            profile, year, ProvinceCode(default_province).value
        ),
        part2_internet=_internet_business(profile),
        part3a_business_income=business_income,
        part3c_income=gross_income,
        part4_expenses=part4,
        chart_a_motor_vehicle=chart_a,
        part5_net_income=net_income,
        part7_home_office=home_office,
        expense_details=_expense_details(expenses),
        warnings=warnings,
        has_warning=bool(warnings),
        warning_message=warnings[0] if warnings else None,
    )
    logger.info(
        "Generated T2125 for %d: %d expenses, %d income entries, %d warnings",
        year,
        len(expenses),
        len(income),
        len(warnings),
    )
    log_report_generated(report)
    return report


def generate_t2125_for_ledger(
    snapshot: LedgerSnapshot,
    *,
    tax_year: int | None = None,
    home_office_percent: Decimal = ZERO,
    default_province: ProvinceCode | str = ProvinceCode.ON,
) -> T2125Data:
    """Run :func:`generate_t2125_data` over a fetched ledger snapshot."""
    return generate_t2125_data(
        snapshot.profile,
        snapshot.expenses,
        snapshot.income,
        snapshot.mileage,
        snapshot.assets,
        snapshot.mileage_settings,
        snapshot.cca_override,
        tax_year=tax_year,
        home_office_percent=home_office_percent,
        default_province=default_province,
    )
