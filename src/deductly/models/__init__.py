"""Deductly models package."""

from .income import (
    IncomeTotalsDisplay,
    IncomeTotalsExport,
    IncomeTotalsPart3C,
    IncomeValidation,
)
from .ledger import (
    Asset,
    CCAOverride,
    Expense,
    IncomeEntry,
    LedgerSnapshot,
    MileageLog,
    MileageSettings,
    Profile,
)
from .report import ExpenseDetail, T2125Data
from .summary import CategoryTotal, MileageTotals, PeriodFilter, SummaryTotals
from .t2125 import ChartAItem, T2125Line
from .tax import CCAClass, CCAResult, ProvinceCode, TaxBracket, TaxEstimate

__all__ = [
    "Asset",
    "CCAClass",
    "CCAOverride",
    "CCAResult",
    "CategoryTotal",
    "ChartAItem",
    "Expense",
    "ExpenseDetail",
    "IncomeEntry",
    "IncomeTotalsDisplay",
    "IncomeTotalsExport",
    "IncomeTotalsPart3C",
    "IncomeValidation",
    "LedgerSnapshot",
    "MileageLog",
    "MileageSettings",
    "MileageTotals",
    "PeriodFilter",
    "Profile",
    "SummaryTotals",
    "T2125Data",
    "T2125Line",
    "TaxBracket",
    "TaxEstimate",
]
