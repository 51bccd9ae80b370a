# planner/core/calendar/sql.py

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import FrozenSet, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from planner.core.errors import InvalidRuleError, LabelNotFoundError
from planner.core.events.models import Event, RecurringEvent
from planner.core.labels.models import Label
from planner.core.recurrence import ParsedRule, parse_rule
from planner.core.stats.models import LabelTimeBucket, TimeBucketType

from .base import BaseCalendarStore, LabelRef, RecurringEventWindow, ScheduledSpan
from .window import ensure_utc

log = logging.getLogger(__name__)


class SqlCalendarStore(BaseCalendarStore):
    """Calendar store reading the ORM tables through one ``AsyncSession``."""

    name: str = "sql"

    def __init__(self, db_session: AsyncSession) -> None:
        self.db = db_session

    # --- One-off events ---

    async def find_one_off_spans(
        self, user_id: str, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        log.debug("SQL: one-off spans for user %s in [%s, %s)", user_id, utc_start, utc_end)
        stmt = (
            select(Event)
            .where(
                Event.user_id == user_id,
                Event.unconfirmed.is_(False),
                Event.start_time < utc_end,
                func.coalesce(Event.end_time, Event.start_time) >= utc_start,
            )
            .order_by(Event.start_time)
        )
        result = await self.db.execute(stmt)
        spans = [_to_span(ev) for ev in result.scalars().all()]
        log.debug("SQL: found %d one-off spans for user %s", len(spans), user_id)
        return spans

    def _completed_for_label(self, label_id: int, utc_start: datetime, utc_end: datetime):
        return and_(
            Event.label_id == label_id,
            Event.unconfirmed.is_(False),
            Event.is_completed.is_(True),
            Event.start_time >= utc_start,
            Event.start_time < utc_end,
        )

    async def find_completed_spans_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        stmt = (
            select(Event)
            .where(self._completed_for_label(label_id, utc_start, utc_end))
            .order_by(Event.start_time)
        )
        result = await self.db.execute(stmt)
        spans = [_to_span(ev) for ev in result.scalars().all()]
        log.debug("SQL: found %d completed spans for label %s", len(spans), label_id)
        return spans

    async def count_completed_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> int:
        stmt = select(func.count(Event.id)).where(self._completed_for_label(label_id, utc_start, utc_end))
        count = (await self.db.execute(stmt)).scalar_one()
        log.debug("SQL: %d completed events for label %s", count, label_id)
        return int(count)

    # --- Recurring events ---

    async def find_recurring_windows(
        self, user_id: str, local_start: date, local_end: date
    ) -> List[RecurringEventWindow]:
        stmt = (
            select(RecurringEvent)
            .where(
                RecurringEvent.user_id == user_id,
                RecurringEvent.unconfirmed.is_(False),
                RecurringEvent.start_date <= local_end,
                or_(RecurringEvent.end_date.is_(None), RecurringEvent.end_date >= local_start),
            )
            .order_by(RecurringEvent.start_date, RecurringEvent.id)
        )
        result = await self.db.execute(stmt)
        windows = [_to_window(rec) for rec in result.scalars().all()]
        log.debug("SQL: found %d recurring windows for user %s", len(windows), user_id)
        return windows

    # --- Labels & aggregates ---

    async def find_label(self, label_id: int) -> LabelRef:
        label = await self.db.get(Label, label_id)
        if label is None:
            log.warning("SQL: label %s not found", label_id)
            raise LabelNotFoundError(label_id)
        return LabelRef(id=label.id, owner_id=label.user_id, name=label.name)

    async def find_monthly_aggregate(
        self, user_id: str, label_id: int, year: int, month: int
    ) -> Optional[int]:
        stmt = select(LabelTimeBucket.duration_minutes).where(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id == label_id,
            LabelTimeBucket.bucket_type == TimeBucketType.MONTH,
            LabelTimeBucket.bucket_year == year,
            LabelTimeBucket.bucket_value == month,
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()


# --- Row conversion ---

def _to_span(event: Event) -> ScheduledSpan:
    return ScheduledSpan(
        owner_id=event.user_id,
        label_id=event.label_id,
        start=ensure_utc(event.start_time),
        end=ensure_utc(event.end_time) if event.end_time is not None else None,
        completed=event.is_completed,
    )


def _to_window(record: RecurringEvent) -> RecurringEventWindow:
    rule: Optional[ParsedRule]
    try:
        rule = parse_rule(record.recurrence_rule)
    except InvalidRuleError:
        log.warning(
            "Recurring event %s has unparseable rule %r; it contributes no occurrences",
            record.id, record.recurrence_rule,
        )
        rule = None
    return RecurringEventWindow(
        owner_id=record.user_id,
        valid_from=record.start_date,
        valid_to=record.end_date,
        rule=rule,
        skip_days=_skip_days(record),
    )


def _skip_days(record: RecurringEvent) -> FrozenSet[date]:
    days = set()
    for raw in record.skip_days or []:
        try:
            days.add(date.fromisoformat(raw))
        except (TypeError, ValueError):
            log.warning("Recurring event %s has malformed skip day %r; ignoring it", record.id, raw)
    return frozenset(days)


__all__ = ["SqlCalendarStore"]
