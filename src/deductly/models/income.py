"""Part 3C income totals.

Totals are carried in integer cents. Screens show dollars with cents while the
CRA form takes whole dollars, so both projections are derived from the same
cents totals.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from deductly.models.common import Money


class IncomeTotalsPart3C(BaseModel):
    """Aggregated Part 3C inputs, in cents."""

    model_config = ConfigDict(frozen=True)

    sum_3a_cents: int = 0
    sum_3b_cents: int = 0
    sum_8230_cents: int = 0
    period_start: dt.date | None = None
    period_end: dt.date | None = None
    entry_count: int = 0

    @property
    def sum_3c_cents(self) -> int:
        """Line 3C: gross sales less GST/HST collected."""
        return self.sum_3a_cents - self.sum_3b_cents

    @property
    def sum_8299_cents(self) -> int:
        """Line 8299: 3C plus other income."""
        return self.sum_3c_cents + self.sum_8230_cents


class IncomeTotalsDisplay(BaseModel):
    """Part 3C lines in dollars with cents, for on-screen display."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    line3a: Money = Field(alias="line3A")
    line3b: Money = Field(alias="line3B")
    line3c: Money = Field(alias="line3C")
    line8230: Money
    line8299: Money
    has_warning: bool = Field(default=False, alias="hasWarning")
    warning_message: str | None = Field(default=None, alias="warningMessage")


class IncomeTotalsExport(BaseModel):
    """Part 3C lines in whole dollars, as entered on the CRA form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    line3a: int = Field(alias="line3A")
    line3b: int = Field(alias="line3B")
    line3c: int = Field(alias="line3C")
    line8230: int
    line8299: int


class IncomeValidation(BaseModel):
    """Data-quality findings for a set of Part 3C totals."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool = True
    warnings: list[str] = Field(default_factory=list)
