# planner/core/calendar/memory.py

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from planner.core.errors import LabelNotFoundError
from planner.core.recurrence import ParsedRule

from .base import BaseCalendarStore, LabelRef, RecurringEventWindow, ScheduledSpan
from .window import ensure_utc

log = logging.getLogger(__name__)


class InMemoryCalendarStore(BaseCalendarStore):
    """
    Calendar store kept in process memory.

    Filters exactly like ``SqlCalendarStore``; used by tests and local runs.
    Spans and windows added here count as confirmed.
    """

    name: str = "memory"

    def __init__(self) -> None:
        self._spans: list[ScheduledSpan] = []
        self._windows: list[RecurringEventWindow] = []
        self._labels: Dict[int, LabelRef] = {}
        self._aggregates: Dict[Tuple[str, int, int, int], int] = {}
        log.info("Initialized InMemoryCalendarStore")

    # --- Population helpers ---

    def add_label(self, label_id: int, owner_id: str, name: str) -> LabelRef:
        label = LabelRef(id=label_id, owner_id=owner_id, name=name)
        self._labels[label_id] = label
        return label

    def add_event(
        self,
        owner_id: str,
        start: datetime,
        end: Optional[datetime] = None,
        label_id: Optional[int] = None,
        completed: bool = False,
    ) -> ScheduledSpan:
        span = ScheduledSpan(
            owner_id=owner_id,
            label_id=label_id,
            start=ensure_utc(start),
            end=ensure_utc(end) if end is not None else None,
            completed=completed,
        )
        self._spans.append(span)
        return span

    def add_recurring(
        self,
        owner_id: str,
        rule: Optional[ParsedRule],
        valid_from: date,
        valid_to: Optional[date] = None,
        skip_days: Iterable[date] = (),
    ) -> RecurringEventWindow:
        window = RecurringEventWindow(
            owner_id=owner_id,
            valid_from=valid_from,
            valid_to=valid_to,
            rule=rule,
            skip_days=frozenset(skip_days),
        )
        self._windows.append(window)
        return window

    def set_monthly_aggregate(self, user_id: str, label_id: int, year: int, month: int, minutes: int) -> None:
        self._aggregates[(user_id, label_id, year, month)] = minutes

    # --- BaseCalendarStore ---

    async def find_one_off_spans(
        self, user_id: str, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        spans = [
            span for span in self._spans
            if span.owner_id == user_id
            and span.start < utc_end
            and (span.end or span.start) >= utc_start
        ]
        spans.sort(key=lambda span: span.start)
        log.debug("Memory: found %d one-off spans for user %s", len(spans), user_id)
        return spans

    async def find_completed_spans_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        spans = [
            span for span in self._spans
            if span.label_id == label_id and span.completed and utc_start <= span.start < utc_end
        ]
        spans.sort(key=lambda span: span.start)
        return spans

    async def count_completed_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> int:
        return len(await self.find_completed_spans_for_label(label_id, utc_start, utc_end))

    async def find_recurring_windows(
        self, user_id: str, local_start: date, local_end: date
    ) -> List[RecurringEventWindow]:
        windows = [
            window for window in self._windows
            if window.owner_id == user_id
            and window.valid_from <= local_end
            and (window.valid_to is None or window.valid_to >= local_start)
        ]
        log.debug("Memory: found %d recurring windows for user %s", len(windows), user_id)
        return windows

    async def find_label(self, label_id: int) -> LabelRef:
        try:
            return self._labels[label_id]
        except KeyError:
            log.warning("Memory: label %s not found", label_id)
            raise LabelNotFoundError(label_id) from None

    async def find_monthly_aggregate(
        self, user_id: str, label_id: int, year: int, month: int
    ) -> Optional[int]:
        return self._aggregates.get((user_id, label_id, year, month))


__all__ = ["InMemoryCalendarStore"]
