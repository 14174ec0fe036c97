"""Tax models: provinces, CCA classes and the deduction estimate."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from deductly.models.common import Money
from deductly.services.currency import ZERO


class ProvinceCode(str, Enum):
    """Canadian province and territory codes."""

    BC = "BC"  # British Columbia
    AB = "AB"  # Alberta
    SK = "SK"  # Saskatchewan
    MB = "MB"  # Manitoba
    ON = "ON"  # Ontario
    QC = "QC"  # Quebec
    NB = "NB"  # New Brunswick
    NS = "NS"  # Nova Scotia
    PE = "PE"  # Prince Edward Island
    NL = "NL"  # Newfoundland and Labrador
    YT = "YT"  # Yukon
    NT = "NT"  # Northwest Territories
    NU = "NU"  # Nunavut


# GST or HST charged on taxable supplies. Provincial sales taxes (PST/QST) are
# not collected through the GST/HST return and are left out.
GST_HST_RATES: dict[ProvinceCode, Decimal] = {
    ProvinceCode.BC: Decimal("0.05"),
    ProvinceCode.AB: Decimal("0.05"),
    ProvinceCode.SK: Decimal("0.05"),
    ProvinceCode.MB: Decimal("0.05"),
    ProvinceCode.ON: Decimal("0.13"),
    ProvinceCode.QC: Decimal("0.05"),
    ProvinceCode.NB: Decimal("0.15"),
    ProvinceCode.NS: Decimal("0.15"),
    ProvinceCode.PE: Decimal("0.15"),
    ProvinceCode.NL: Decimal("0.15"),
    ProvinceCode.YT: Decimal("0.05"),
    ProvinceCode.NT: Decimal("0.05"),
    ProvinceCode.NU: Decimal("0.05"),
}


class CCAClass(str, Enum):
    """CCA classes a rideshare vehicle can fall into."""

    CLASS_10 = "10"  # Motor vehicles
    CLASS_10_1 = "10.1"  # Passenger vehicles above the luxury threshold
    CLASS_54 = "54"  # Zero-emission vehicles

    @property
    def prescribed_rate(self) -> Decimal:
        """Declining-balance rate prescribed by the Income Tax Regulations."""
        return _PRESCRIBED_RATES[self.value]

    @property
    def description(self) -> str:
        """Human-readable class description."""
        return _CLASS_DESCRIPTIONS[self.value]


_PRESCRIBED_RATES: dict[str, Decimal] = {
    "10": Decimal("0.30"),
    "10.1": Decimal("0.30"),
    "54": Decimal("0.30"),
}

_CLASS_DESCRIPTIONS: dict[str, str] = {
    "10": "Class 10 - motor vehicles",
    "10.1": "Class 10.1 - luxury passenger vehicles",
    "54": "Class 54 - zero-emission vehicles",
}


class CCAResult(BaseModel):
    """Outcome of one declining-balance CCA computation."""

    model_config = ConfigDict(frozen=True)

    base: Money = Field(..., description="Cost eligible for CCA this year")
    cca_deduction: Money = Field(..., ge=0)
    closing_ucc: Money = Field(..., ge=0)


class TaxBracket(BaseModel):
    """Marginal rate applied once income exceeds ``threshold``."""

    model_config = ConfigDict(frozen=True)

    threshold: Money
    rate: Decimal = Field(..., ge=0, le=1)


class TaxEstimate(BaseModel):
    """Year-to-date deduction breakdown and a rough tax-savings figure.

    ``total_deductions`` is the exact sum of the five component fields.
    """

    model_config = ConfigDict(frozen=True)

    total_income: Money = ZERO
    total_deductions: Money = ZERO
    meals_50_percent: Money = ZERO
    motor_vehicle_expenses: Money = ZERO
    home_office_deduction: Money = ZERO
    cca_deduction: Money = ZERO
    other_deductions: Money = ZERO
    business_use_percent: Money = ZERO
    estimated_tax_savings: Money = ZERO
    marginal_rate: Decimal = ZERO
