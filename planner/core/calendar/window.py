# planner/core/calendar/window.py
"""
Timezone boundary for monthly calendar queries.

All calendar logic works on local dates of the user's timezone; instants are
converted to and from UTC only here, where store queries need them.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from planner.core.errors import InvalidCalendarParameterError
from planner.core.recurrence import iter_dates

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_LAST_MINUTE = time(23, 59)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_zone(name: str) -> ZoneInfo:
    """``ZoneInfo`` for an IANA name; unknown names are a calendar parameter error."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        log.warning("Unknown timezone %r", name)
        raise InvalidCalendarParameterError(f"Unknown timezone: {name}") from exc


def ensure_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values (as SQLite returns them) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(instant: datetime, zone: ZoneInfo) -> date:
    return ensure_utc(instant).astimezone(zone).date()


def local_midnight_utc(day: date, zone: ZoneInfo) -> datetime:
    """
    First instant of ``day`` in ``zone`` as UTC.

    A midnight skipped by a DST gap resolves to the first valid local time
    (fold=0 applies the pre-transition offset).
    """
    return datetime.combine(day, time.min, tzinfo=zone).astimezone(timezone.utc)


def validate_calendar_params(year: Optional[int], month: Optional[int]) -> None:
    if month is not None and not 1 <= month <= 12:
        log.warning("Invalid month parameter received: month=%s", month)
        raise InvalidCalendarParameterError(f"Month must be between 1 and 12, got {month}")
    if year is not None and not 1 <= year <= 9999:
        log.warning("Invalid year parameter received: year=%s", year)
        raise InvalidCalendarParameterError(f"Year must be between 1 and 9999, got {year}")


def resolve_year_month(
    year: Optional[int], month: Optional[int], zone: ZoneInfo, clock: Clock = utc_now
) -> Tuple[int, int]:
    """
    Validate the requested year/month and fill missing parts from "now"
    in ``zone``.
    """
    validate_calendar_params(year, month)
    if year is None or month is None:
        now_local = clock().astimezone(zone)
        year = now_local.year if year is None else year
        month = now_local.month if month is None else month
        log.debug("Defaulted calendar request to %04d-%02d in %s", year, month, zone.key)
    return year, month


@dataclass(frozen=True)
class MonthWindow:
    """
    One calendar month of ``zone``.

    ``[utc_start, utc_end)`` runs from local midnight on day 1 to local
    23:59 on the last day, converted to UTC.
    """

    zone: ZoneInfo
    year: int
    month: int

    @property
    def local_start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def local_end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def utc_start(self) -> datetime:
        return local_midnight_utc(self.local_start, self.zone)

    @property
    def utc_end(self) -> datetime:
        return datetime.combine(self.local_end, _LAST_MINUTE, tzinfo=self.zone).astimezone(timezone.utc)

    def dates(self) -> List[date]:
        return list(iter_dates(self.local_start, self.local_end))

    @classmethod
    def for_month(cls, zone: ZoneInfo, year: int, month: int) -> "MonthWindow":
        """Build a window whose UTC bounds are representable, or fail as a bad parameter."""
        window = cls(zone, year, month)
        try:
            bounds = (window.utc_start, window.utc_end)
        except OverflowError as exc:
            log.warning("Month %04d-%02d in %s overflows the supported range", year, month, zone.key)
            raise InvalidCalendarParameterError(
                f"Month {year:04d}-{month:02d} is outside the supported range"
            ) from exc
        log.debug("Month window %04d-%02d %s -> [%s, %s)", year, month, zone.key, *bounds)
        return window


def span_dates(start: datetime, end: Optional[datetime], zone: ZoneInfo) -> List[date]:
    """Every local date touched by ``[start, end]`` (``start`` alone when ``end`` is missing)."""
    first = local_date(start, zone)
    last = local_date(end, zone) if end is not None else first
    return list(iter_dates(first, max(first, last)))


__all__: list[str] = [
    "Clock",
    "MonthWindow",
    "ensure_utc",
    "local_date",
    "local_midnight_utc",
    "resolve_year_month",
    "resolve_zone",
    "span_dates",
    "utc_now",
    "validate_calendar_params",
]
