"""T2125 line schema and the expense category routing table."""

from __future__ import annotations

from enum import Enum


class T2125Line(str, Enum):
    """Part 4 expense lines of CRA form T2125.

    Statement of Business or Professional Activities. Values are the literal
    CRA line numbers.
    """

    ADVERTISING = "8521"
    MEALS_ENTERTAINMENT = "8523"  # 50% deductible per ITA Section 67.1
    BAD_DEBTS = "8590"
    INSURANCE = "8690"
    INTEREST_BANK_CHARGES = "8710"
    BUSINESS_TAXES_LICENCES = "8760"
    OFFICE_EXPENSES = "8810"
    OFFICE_STATIONERY = "8811"
    PROFESSIONAL_FEES = "8860"
    MANAGEMENT_FEES = "8871"
    RENT = "8910"
    REPAIRS_MAINTENANCE = "8960"
    SALARIES_WAGES = "9060"
    PROPERTY_TAXES = "9180"
    TRAVEL = "9200"
    UTILITIES = "9220"
    FUEL_COSTS = "9224"
    TELEPHONE = "9225"
    OTHER_EXPENSES = "9270"
    DELIVERY_FREIGHT = "9275"
    MOTOR_VEHICLE = "9281"
    CCA = "9936"

    @property
    def field_name(self) -> str:
        """Attribute of ``Part4Expenses`` holding this line."""
        return _LINE_FIELDS[self.value]

    @property
    def description(self) -> str:
        """Human-readable description of the line."""
        return _LINE_DESCRIPTIONS[self.value]

    @property
    def deductibility_percentage(self) -> float:
        """Share of the business-use amount the CRA allows on this line."""
        if self == T2125Line.MEALS_ENTERTAINMENT:
            return 50.0
        return 100.0

    @property
    def ita_reference(self) -> str | None:
        """Income Tax Act reference for lines with special rules."""
        if self == T2125Line.MEALS_ENTERTAINMENT:
            return "ITA Section 67.1"
        if self == T2125Line.CCA:
            return "ITA Section 20(1)(a)"
        return None


_LINE_FIELDS: dict[str, str] = {
    "8521": "advertising",
    "8523": "meals_entertainment",
    "8590": "bad_debts",
    "8690": "insurance",
    "8710": "interest_bank_charges",
    "8760": "business_taxes_licences",
    "8810": "office_expenses",
    "8811": "office_stationery",
    "8860": "professional_fees",
    "8871": "management_fees",
    "8910": "rent",
    "8960": "repairs_maintenance",
    "9060": "salaries_wages",
    "9180": "property_taxes",
    "9200": "travel_expenses",
    "9220": "utilities",
    "9224": "fuel_costs",
    "9225": "telephone",
    "9270": "other_expenses",
    "9275": "delivery_freight",
    "9281": "motor_vehicle_expenses",
    "9936": "cca",
}

_LINE_DESCRIPTIONS: dict[str, str] = {
    "8521": "Advertising",
    "8523": "Meals and entertainment",
    "8590": "Bad debts",
    "8690": "Insurance",
    "8710": "Interest and bank charges",
    "8760": "Business taxes, licences and memberships",
    "8810": "Office expenses",
    "8811": "Office stationery and supplies",
    "8860": "Professional fees",
    "8871": "Management and administration fees",
    "8910": "Rent",
    "8960": "Repairs and maintenance",
    "9060": "Salaries, wages, and benefits",
    "9180": "Property taxes",
    "9200": "Travel expenses",
    "9220": "Utilities",
    "9224": "Fuel costs (except for motor vehicles)",
    "9225": "Telephone and internet",
    "9270": "Other expenses",
    "9275": "Delivery, freight and express",
    "9281": "Motor vehicle expenses",
    "9936": "Capital cost allowance",
}


class ChartAItem(str, Enum):
    """Chart A (motor vehicle expenses) buckets fed by vehicle categories."""

    FUEL_OIL = "fuel_oil"
    INTEREST = "interest"
    INSURANCE = "insurance"
    LICENCE_REGISTRATION = "licence_registration"
    MAINTENANCE = "maintenance"
    LEASING = "leasing"
    ELECTRICITY = "electricity"
    OTHER = "other_expenses"
    PARKING = "parking"


# Category code -> T2125 line. Codes not listed here are left out of the
# Part 4 totals but still show up in the audit list of the report.
CATEGORY_LINE_MAP: dict[str, T2125Line] = {
    "ADVERTISING_PROMOS": T2125Line.ADVERTISING,
    "8521": T2125Line.ADVERTISING,
    "MEALS_CLIENT": T2125Line.MEALS_ENTERTAINMENT,
    "8523": T2125Line.MEALS_ENTERTAINMENT,
    "8590": T2125Line.BAD_DEBTS,
    "8690": T2125Line.INSURANCE,
    "BANK_FEES_INTEREST": T2125Line.INTEREST_BANK_CHARGES,
    "LOAN_INTEREST": T2125Line.INTEREST_BANK_CHARGES,
    "8710": T2125Line.INTEREST_BANK_CHARGES,
    "8760": T2125Line.BUSINESS_TAXES_LICENCES,
    "8810": T2125Line.OFFICE_EXPENSES,
    "SUPPLIES": T2125Line.OFFICE_STATIONERY,
    "CLEANING_SUPPLIES": T2125Line.OFFICE_STATIONERY,
    "8811": T2125Line.OFFICE_STATIONERY,
    "ACCOUNTING_SOFTWARE": T2125Line.PROFESSIONAL_FEES,
    "8860": T2125Line.PROFESSIONAL_FEES,
    "UBER_FEES": T2125Line.MANAGEMENT_FEES,
    "8871": T2125Line.MANAGEMENT_FEES,
    "8910": T2125Line.RENT,
    "8960": T2125Line.REPAIRS_MAINTENANCE,
    "9060": T2125Line.SALARIES_WAGES,
    "9180": T2125Line.PROPERTY_TAXES,
    "9200": T2125Line.TRAVEL,
    "PHONE_PLAN_DATA": T2125Line.TELEPHONE,
    "INTERNET_BUSINESS": T2125Line.TELEPHONE,
    "9225": T2125Line.TELEPHONE,
    "9220": T2125Line.UTILITIES,
    "9224": T2125Line.FUEL_COSTS,
    "TRAINING_EDU": T2125Line.OTHER_EXPENSES,
    "9270": T2125Line.OTHER_EXPENSES,
    "9275": T2125Line.DELIVERY_FREIGHT,
    "GAS_FUEL": T2125Line.MOTOR_VEHICLE,
    "REPAIRS_MAINT": T2125Line.MOTOR_VEHICLE,
    "INSURANCE_AUTO": T2125Line.MOTOR_VEHICLE,
    "LIC_REG": T2125Line.MOTOR_VEHICLE,
    "CAR_WASH": T2125Line.MOTOR_VEHICLE,
    "PARKING_TOLLS": T2125Line.MOTOR_VEHICLE,
    "LEASE_PAYMENTS": T2125Line.MOTOR_VEHICLE,
    "VEHICLE_ELECTRICITY": T2125Line.MOTOR_VEHICLE,
    "9281": T2125Line.MOTOR_VEHICLE,
    "VEHICLE_DEPRECIATION_CCA": T2125Line.CCA,
    "9936": T2125Line.CCA,
}

# Vehicle categories -> Chart A bucket. Every key routes to line 9281 above.
VEHICLE_CHART_A_MAP: dict[str, ChartAItem] = {
    "GAS_FUEL": ChartAItem.FUEL_OIL,
    "INSURANCE_AUTO": ChartAItem.INSURANCE,
    "LIC_REG": ChartAItem.LICENCE_REGISTRATION,
    "REPAIRS_MAINT": ChartAItem.MAINTENANCE,
    "CAR_WASH": ChartAItem.MAINTENANCE,
    "LEASE_PAYMENTS": ChartAItem.LEASING,
    "VEHICLE_ELECTRICITY": ChartAItem.ELECTRICITY,
    "PARKING_TOLLS": ChartAItem.PARKING,
    "9281": ChartAItem.OTHER,
}

MEALS_CATEGORIES: frozenset[str] = frozenset(
    code
    for code, line in CATEGORY_LINE_MAP.items()
    if line == T2125Line.MEALS_ENTERTAINMENT
)
MOTOR_VEHICLE_CATEGORIES: frozenset[str] = frozenset(
    code for code, line in CATEGORY_LINE_MAP.items() if line == T2125Line.MOTOR_VEHICLE
)
# Business-use-of-home costs go to Part 7 / line 9945, never to Part 4.
HOME_OFFICE_CATEGORIES: frozenset[str] = frozenset({"HOME_OFFICE", "9945"})


def line_for_category(category_code: str | None) -> T2125Line | None:
    """Map an expense category code to its T2125 line, or None if unmapped."""
    if not category_code:
        return None
    return CATEGORY_LINE_MAP.get(category_code)


def get_t2125_mapping() -> dict[str, dict[str, str | float | None]]:
    """Get the complete category routing table with line metadata."""
    return {
        category: {
            "line_item": line.value,
            "description": line.description,
            "deductibility": line.deductibility_percentage,
            "ita_reference": line.ita_reference,
        }
        for category, line in CATEGORY_LINE_MAP.items()
    }
