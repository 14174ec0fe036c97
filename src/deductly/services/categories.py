"""Human-readable labels for expense category codes."""

from __future__ import annotations

import re

DEFAULT_CATEGORY_LABEL = "Other"

CATEGORY_LABELS: dict[str, str] = {
    # Vehicle expenses
    "GAS_FUEL": "Gas & Fuel",
    "REPAIRS_MAINT": "Repairs & Maintenance",
    "INSURANCE_AUTO": "Vehicle Insurance",
    "LIC_REG": "License & Registration",
    "CAR_WASH": "Car Washes",
    "PARKING_TOLLS": "Parking & Tolls",
    "LEASE_PAYMENTS": "Lease Payments",
    "VEHICLE_ELECTRICITY": "Vehicle Electricity",
    "VEHICLE_DEPRECIATION_CCA": "Vehicle CCA",
    # Line-numbered operating expenses
    "8521_ADVERTISING": "Advertising",
    "8523_MEALS": "Meals & Entertainment",
    "8590_BAD_DEBTS": "Bad Debts",
    "8690_INSURANCE": "Insurance",
    "8710_INTEREST": "Interest & Bank Charges",
    "8760_LICENCES": "Business Taxes & Licences",
    "8810_OFFICE": "Office Expenses",
    "8811_STATIONERY": "Office Stationery & Supplies",
    "8860_PROFESSIONAL": "Professional Fees",
    "8871_MANAGEMENT": "Management Fees",
    "8910_RENT": "Rent",
    "8960_REPAIRS": "Repairs & Maintenance",
    "9060_SALARIES": "Salaries & Wages",
    "9180_PROPERTY_TAX": "Property Taxes",
    "9200_TRAVEL": "Travel Expenses",
    "9220_UTILITIES": "Utilities",
    "9224_FUEL": "Fuel Costs",
    "9225_TELEPHONE": "Phone & Internet",
    "9275_DELIVERY": "Delivery & Freight",
    "9281_OTHER": "Other Motor Vehicle",
    "9270_OTHER": "Other Expenses",
    "9936_CCA": "Capital Cost Allowance",
    # Legacy codes
    "ADVERTISING_PROMOS": "Advertising & Promotions",
    "MEALS_CLIENT": "Meals & Entertainment",
    "BANK_FEES_INTEREST": "Bank Fees & Interest",
    "LOAN_INTEREST": "Loan Interest",
    "SUPPLIES": "Supplies",
    "CLEANING_SUPPLIES": "Cleaning Supplies",
    "ACCOUNTING_SOFTWARE": "Accounting Software",
    "UBER_FEES": "Platform Fees",
    "PHONE_PLAN_DATA": "Phone & Data Plan",
    "INTERNET_BUSINESS": "Internet Service",
    "TRAINING_EDU": "Training & Education",
    "HOME_OFFICE": "Business Use of Home",
    # Simple lowercase names
    "fuel": "Gas & Oil",
    "maintenance": "Maintenance & Repairs",
    "insurance": "Insurance",
    "license": "License & Registration",
    "carwash": "Car Washes",
    "lease": "Lease Payments",
    "cca": "Capital Cost Allowance",
    "advertising": "Advertising",
    "meals": "Meals & Entertainment",
    "office": "Office Expenses",
    "supplies": "Supplies",
    "professional": "Professional Fees",
    "rent": "Rent",
    "utilities": "Utilities",
    "phone": "Phone & Internet",
    "internet": "Internet Service",
    "travel": "Travel",
    "parking": "Parking",
    "other": "Other",
}

# Title-cased abbreviation -> display form, applied word by word.
_WORD_REPLACEMENTS: dict[str, str] = {
    "Cca": "CCA",
    "Gst": "GST",
    "Hst": "HST",
    "Itc": "ITC",
    "Reg": "Registration",
    "Lic": "License",
    "Maint": "Maintenance",
    "Auto": "Vehicle",
    "Mgmt": "Management",
    "Prof": "Professional",
    "Adv": "Advertising",
}

_LINE_PREFIX = re.compile(r"^\d+_")


def format_category_label(category_code: str | None) -> str:
    """Turn a category code such as ``REPAIRS_MAINT`` into a display label.

    Known codes use a fixed label. Anything else loses its numeric line prefix,
    is title-cased word by word, and has common abbreviations expanded.
    """
    if not category_code:
        return DEFAULT_CATEGORY_LABEL
    if category_code in CATEGORY_LABELS:
        return CATEGORY_LABELS[category_code]

    words = _LINE_PREFIX.sub("", category_code).replace("_", " ").lower().split(" ")
    titled = (word[:1].upper() + word[1:] for word in words)
    return " ".join(_WORD_REPLACEMENTS.get(word, word) for word in titled)
