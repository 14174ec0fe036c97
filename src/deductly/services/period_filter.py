"""Date-window filtering shared by every aggregate."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Protocol, TypeVar

from deductly.models.summary import PeriodFilter

if TYPE_CHECKING:
    from collections.abc import Sequence


class Dated(Protocol):
    """Anything carrying an optional calendar date."""

    @property
    def date(self) -> dt.date | None: ...


RecordT = TypeVar("RecordT", bound=Dated)


def matches_period(record_date: dt.date | None, period: PeriodFilter) -> bool:
    """Check one date against every criterion set on ``period``."""
    if period.is_empty:
        return True
    if record_date is None:
        return False
    if period.year is not None and record_date.year != period.year:
        return False
    if period.month is not None and record_date.month != period.month:
        return False
    # ISO strings order the same way as the dates they encode.
    iso = record_date.isoformat()
    if period.start_date is not None and iso < period.start_date.isoformat():
        return False
    return not (period.end_date is not None and iso > period.end_date.isoformat())


def filter_by_period(
    records: Sequence[RecordT], period: PeriodFilter | None = None
) -> Sequence[RecordT]:
    """Return the records inside ``period``; no filter returns ``records`` as is."""
    if period is None:
        return records
    return [record for record in records if matches_period(record.date, period)]


def current_year_filter(today: dt.date | None = None) -> PeriodFilter:
    """Everything dated in the current calendar year."""
    today = today or dt.date.today()
    return PeriodFilter(year=today.year)


def ytd_filter(today: dt.date | None = None) -> PeriodFilter:
    """January 1 of the current year through ``today`` inclusive."""
    today = today or dt.date.today()
    return PeriodFilter(start_date=dt.date(today.year, 1, 1), end_date=today)


def month_filter(year: int, month: int) -> PeriodFilter:
    """One calendar month; ``month`` runs 1-12, January being 1."""
    return PeriodFilter(year=year, month=month)


def fiscal_year_filter(
    year: int,
    start: dt.date | None = None,
    end: dt.date | None = None,
) -> PeriodFilter:
    """The fiscal period for ``year``.

    Missing bounds fall back to the calendar year, January 1 to December 31.
    """
    return PeriodFilter(
        start_date=start or dt.date(year, 1, 1),
        end_date=end or dt.date(year, 12, 31),
    )
