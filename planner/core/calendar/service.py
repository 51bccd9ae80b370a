# planner/core/calendar/service.py

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Set

from planner.core.recurrence import expand

from .base import BaseCalendarStore, CalendarUser, LabelRef
from .window import (
    Clock,
    MonthWindow,
    resolve_year_month,
    resolve_zone,
    span_dates,
    utc_now,
    validate_calendar_params,
)

log = logging.getLogger(__name__)


class MonthlyCalendarService:
    """
    Distinct local dates of a month that carry at least one scheduled item.

    Works in the local calendar of ``user.timezone``; UTC instants are used
    only for the store queries.
    """

    def __init__(self, store: BaseCalendarStore, user: CalendarUser, clock: Optional[Clock] = None):
        self.store = store
        self.user = user
        self.clock = clock or utc_now

    def month_window(self, year: Optional[int] = None, month: Optional[int] = None) -> MonthWindow:
        """
        Validate the request and build its month window, before any store call.

        Raises:
            InvalidCalendarParameterError: Bad month or year, unknown user
                timezone, or a month outside the representable range.
        """
        validate_calendar_params(year, month)
        zone = resolve_zone(self.user.timezone)
        year, month = resolve_year_month(year, month, zone, self.clock)
        return MonthWindow.for_month(zone, year, month)

    async def owned_label(self, label_id: int) -> LabelRef:
        label = await self.store.find_label(label_id)
        self.store.validate_label_ownership(self.user.id, label)
        return label

    async def dates_with_events(self, year: Optional[int] = None, month: Optional[int] = None) -> List[date]:
        """
        Dates of the month with a confirmed one-off event or recurring occurrence.

        Args:
            year (Optional[int]): Defaults to the current local year.
            month (Optional[int]): Defaults to the current local month.

        Returns:
            List[date]: Ascending, duplicate-free local dates. One-off events
            contribute every date they touch, even outside the month.
        """
        window = self.month_window(year, month)
        log.debug("Calendar dates for user %s, %04d-%02d", self.user.id, window.year, window.month)

        active: Set[date] = set()

        spans = await self.store.find_one_off_spans(self.user.id, window.utc_start, window.utc_end)
        for span in spans:
            active.update(span_dates(span.start, span.end, window.zone))

        windows = await self.store.find_recurring_windows(self.user.id, window.local_start, window.local_end)
        for series in windows:
            first = max(window.local_start, series.valid_from)
            last = window.local_end if series.valid_to is None else min(window.local_end, series.valid_to)
            if first > last:
                continue
            # skip_days stay listed; only the rule decides
            active.update(expand(series.rule, first, last))

        result = sorted(active)
        log.debug(
            "User %s has %d active dates (%d spans, %d recurring windows)",
            self.user.id, len(result), len(spans), len(windows),
        )
        return result

    async def dates_for_label(
        self, label_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> List[date]:
        """
        Dates of the month touched by completed events of one label.

        Each event contributes its full local date span, the same policy as
        ``dates_with_events``.

        Raises:
            InvalidCalendarParameterError: Bad month, year or timezone.
            LabelNotFoundError: Unknown label.
            LabelOwnershipError: Label belongs to another user.
        """
        window = self.month_window(year, month)
        await self.owned_label(label_id)

        spans = await self.store.find_completed_spans_for_label(label_id, window.utc_start, window.utc_end)
        active: Set[date] = set()
        for span in spans:
            active.update(span_dates(span.start, span.end, window.zone))

        result = sorted(active)
        log.debug("Label %s has %d active dates in %04d-%02d", label_id, len(result), window.year, window.month)
        return result


__all__ = ["MonthlyCalendarService"]
