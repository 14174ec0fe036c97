"""The assembled T2125 report handed to CSV/HTML/PDF renderers.

Serialised keys (the aliases below) mirror the literal CRA line numbers and
are consumed by every exporter, so they must not be renamed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from deductly.models.common import Money
from deductly.services.currency import ZERO

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
_LINES = ConfigDict(populate_by_name=True, frozen=True)


class Identification(BaseModel):
    """Part 1 - identification."""

    model_config = _CAMEL

    your_name: str = ""
    sin: str = ""
    business_name: str = ""
    business_number: str = ""
    business_address: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    fiscal_period_start: str = ""
    fiscal_period_end: str = ""
    main_product_service: str = ""
    industry_code: str = ""
    accounting_method: str = ""
    last_year_of_business: bool = False


class InternetBusiness(BaseModel):
    """Part 2 - internet business activities."""

    model_config = _CAMEL

    num_websites: int = 0
    website1: str = ""
    website2: str = ""
    website3: str = ""
    website4: str = ""
    website5: str = ""
    income_from_web_percent: Money = ZERO


class BusinessIncome(BaseModel):
    """Part 3A/3B - gross sales and GST/HST collected."""

    model_config = _LINES

    gross_sales: Money = Field(default=ZERO, alias="line3A_grossSales")
    gst_hst_collected: Money = Field(default=ZERO, alias="line3B_gstHstCollected")
    subtotal: Money = Field(default=ZERO, alias="line3C_subtotal")
    adjusted_gross_sales: Money = Field(
        default=ZERO, alias="line3G_adjustedGrossSales"
    )


class GrossIncome(BaseModel):
    """Part 3C - gross business income."""

    model_config = _LINES

    adjusted_gross_sales: Money = Field(
        default=ZERO, alias="line8000_adjustedGrossSales"
    )
    reserves_deducted_last_year: Money = Field(
        default=ZERO, alias="line8290_reservesDeductedLastYear"
    )
    other_income: Money = Field(default=ZERO, alias="line8230_otherIncome")
    gross_business_income: Money = Field(
        default=ZERO, alias="line8299_grossBusinessIncome"
    )


class Part4Expenses(BaseModel):
    """Part 4 - business expenses, one attribute per CRA line."""

    model_config = _LINES

    advertising: Money = Field(default=ZERO, alias="line8521_advertising")
    meals_entertainment: Money = Field(
        default=ZERO, alias="line8523_mealsEntertainment"
    )
    bad_debts: Money = Field(default=ZERO, alias="line8590_badDebts")
    insurance: Money = Field(default=ZERO, alias="line8690_insurance")
    interest_bank_charges: Money = Field(
        default=ZERO, alias="line8710_interestBankCharges"
    )
    business_taxes_licences: Money = Field(
        default=ZERO, alias="line8760_businessTaxesLicences"
    )
    office_expenses: Money = Field(default=ZERO, alias="line8810_officeExpenses")
    office_stationery: Money = Field(default=ZERO, alias="line8811_officeStationery")
    professional_fees: Money = Field(default=ZERO, alias="line8860_professionalFees")
    management_fees: Money = Field(default=ZERO, alias="line8871_managementFees")
    rent: Money = Field(default=ZERO, alias="line8910_rent")
    repairs_maintenance: Money = Field(
        default=ZERO, alias="line8960_repairsMaintenance"
    )
    salaries_wages: Money = Field(default=ZERO, alias="line9060_salariesWages")
    property_taxes: Money = Field(default=ZERO, alias="line9180_propertyTaxes")
    travel_expenses: Money = Field(default=ZERO, alias="line9200_travelExpenses")
    utilities: Money = Field(default=ZERO, alias="line9220_utilities")
    fuel_costs: Money = Field(default=ZERO, alias="line9224_fuelCosts")
    telephone: Money = Field(default=ZERO, alias="line9225_telephone")
    delivery_freight: Money = Field(default=ZERO, alias="line9275_deliveryFreight")
    motor_vehicle_expenses: Money = Field(
        default=ZERO, alias="line9281_motorVehicleExpenses"
    )
    cca: Money = Field(default=ZERO, alias="line9936_cca")
    other_expenses: Money = Field(default=ZERO, alias="line9270_otherExpenses")
    total_expenses: Money = Field(default=ZERO, alias="line9368_totalExpenses")

    def line_values(self) -> dict[str, Money]:
        """Every expense line except the total, keyed by attribute name."""
        return {
            name: value
            for name, value in self.__dict__.items()
            if name != "total_expenses"
        }


class MotorVehicleChart(BaseModel):
    """Chart A - motor vehicle expenses."""

    model_config = _LINES

    business_km: Money = Field(default=ZERO, alias="line1_businessKm")
    total_km: Money = Field(default=ZERO, alias="line2_totalKm")
    fuel_oil: Money = Field(default=ZERO, alias="line3_fuelOil")
    interest: Money = Field(default=ZERO, alias="line4_interest")
    insurance: Money = Field(default=ZERO, alias="line5_insurance")
    licence_registration: Money = Field(
        default=ZERO, alias="line6_licenceRegistration"
    )
    maintenance: Money = Field(default=ZERO, alias="line7_maintenance")
    leasing: Money = Field(default=ZERO, alias="line8_leasing")
    electricity: Money = Field(default=ZERO, alias="line9_electricity")
    other_expenses: Money = Field(default=ZERO, alias="line10_otherExpenses")
    subcontract_costs: Money = Field(default=ZERO, alias="line11_subcontractCosts")
    total_expenses: Money = Field(default=ZERO, alias="line12_totalExpenses")
    business_portion: Money = Field(default=ZERO, alias="line13_businessPortion")
    business_parking_fees: Money = Field(
        default=ZERO, alias="line14_businessParkingFees"
    )
    supplementary_insurance: Money = Field(
        default=ZERO, alias="line15_supplementaryInsurance"
    )
    allowable_expenses: Money = Field(default=ZERO, alias="line16_allowableExpenses")
    business_use_percent: Money = Field(default=ZERO, alias="businessUsePercent")


class NetIncome(BaseModel):
    """Part 5 - net income (loss) before and after adjustments."""

    model_config = _LINES

    net_income_before_adjustments: Money = Field(
        default=ZERO, alias="line9369_netIncomeBeforeAdjustments"
    )
    your_share: Money = Field(default=ZERO, alias="line5A_yourShare")
    canadian_journalism_credit: Money = Field(
        default=ZERO, alias="line5B_canadianJournalismCredit"
    )
    gst_hst_rebate: Money = Field(default=ZERO, alias="line9974_gstHstRebate")
    total: Money = Field(default=ZERO, alias="line5C_total")
    other_deductions: Money = Field(default=ZERO, alias="line9943_otherDeductions")
    net_income_after_adjustments: Money = Field(
        default=ZERO, alias="line5D_netIncomeAfterAdjustments"
    )
    business_use_of_home: Money = Field(
        default=ZERO, alias="line9945_businessUseOfHome"
    )
    your_net_income: Money = Field(default=ZERO, alias="line9946_yourNetIncome")


class HomeOffice(BaseModel):
    """Part 7 - business-use-of-home expenses."""

    model_config = _LINES

    heat: Money = Field(default=ZERO, alias="line7A_heat")
    electricity: Money = Field(default=ZERO, alias="line7B_electricity")
    insurance: Money = Field(default=ZERO, alias="line7C_insurance")
    maintenance: Money = Field(default=ZERO, alias="line7D_maintenance")
    mortgage_interest: Money = Field(default=ZERO, alias="line7E_mortgageInterest")
    property_taxes: Money = Field(default=ZERO, alias="line7F_propertyTaxes")
    other_expenses: Money = Field(default=ZERO, alias="line7G_otherExpenses")
    subtotal: Money = Field(default=ZERO, alias="line7H_subtotal")
    personal_use_part: Money = Field(default=ZERO, alias="line7I_personalUsePart")
    business_part: Money = Field(default=ZERO, alias="line7J_businessPart")
    cca: Money = Field(default=ZERO, alias="line7K_cca")
    carried_forward: Money = Field(default=ZERO, alias="line7L_carriedForward")
    total_available: Money = Field(default=ZERO, alias="line7M_totalAvailable")
    net_income_limit: Money = Field(default=ZERO, alias="line7N_netIncomeLimit")
    carry_forward_next: Money = Field(default=ZERO, alias="line7O_carryForwardNext")
    allowable_claim: Money = Field(default=ZERO, alias="line7P_allowableClaim")


class ExpenseDetail(BaseModel):
    """One expense in the chronological audit list."""

    model_config = _CAMEL

    id: str
    date: str
    merchant: str
    description: str
    amount: Money
    business_percentage: Money
    deductible_amount: Money
    category_code: str
    category_label: str
    line_number: str


class T2125Data(BaseModel):
    """Fully computed T2125 statement. Recomputed on every export."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tax_year: int = Field(alias="taxYear")
    identification: Identification
    part2_internet: InternetBusiness
    part3a_business_income: BusinessIncome = Field(alias="part3a_businessIncome")
    part3c_income: GrossIncome
    part4_expenses: Part4Expenses
    chart_a_motor_vehicle: MotorVehicleChart = Field(alias="chartA_motorVehicle")
    part5_net_income: NetIncome = Field(alias="part5_netIncome")
    part7_home_office: HomeOffice = Field(alias="part7_homeOffice")
    expense_details: list[ExpenseDetail] = Field(alias="expenseDetails")
    warnings: list[str] = Field(default_factory=list)
    has_warning: bool = Field(default=False, alias="hasWarning")
    warning_message: str | None = Field(default=None, alias="warningMessage")
