# planner/core/stats/service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planner.core.calendar.base import BaseCalendarStore, CalendarUser
from planner.core.calendar.service import MonthlyCalendarService
from planner.core.calendar.window import Clock, ensure_utc, resolve_zone
from planner.core.errors import LabelNotFoundError
from planner.core.labels.models import Label

from .models import LabelTimeBucket, TimeBucketType
from .schemas import EventChange, LabelMonthStats

log = logging.getLogger(__name__)

_BucketKey = Tuple[TimeBucketType, int, int]


class LabelStatsService:
    """Monthly statistics of one label: completed-event count plus bucketed minutes."""

    def __init__(self, store: BaseCalendarStore, user: CalendarUser, clock: Optional[Clock] = None):
        self.store = store
        self.user = user
        self.calendar = MonthlyCalendarService(store, user, clock)

    async def monthly_stats(
        self, label_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> LabelMonthStats:
        """
        Args:
            label_id (int): Label owned by the current user.
            year (Optional[int]): Defaults to the current local year.
            month (Optional[int]): Defaults to the current local month.

        Returns:
            LabelMonthStats: ``total_duration_minutes`` comes from the MONTH
            bucket (0 when none exists); ``total_events`` is counted live.

        Raises:
            InvalidCalendarParameterError: Bad month, year or timezone.
            LabelNotFoundError: Unknown label.
            LabelOwnershipError: Label belongs to another user.
        """
        window = self.calendar.month_window(year, month)
        label = await self.calendar.owned_label(label_id)

        minutes = await self.store.find_monthly_aggregate(self.user.id, label_id, window.year, window.month)
        total_events = await self.store.count_completed_for_label(label_id, window.utc_start, window.utc_end)

        stats = LabelMonthStats(
            label_id=label.id,
            label_name=label.name,
            total_events=total_events,
            total_duration_minutes=minutes or 0,
        )
        log.debug("Label %s stats for %04d-%02d: %r", label_id, window.year, window.month, stats)
        return stats


# --- Time buckets ---

@dataclass(frozen=True)
class TimeSlice:
    """Part of an event inside one local day; ``start`` is a UTC instant."""
    start: datetime
    minutes: int


def split_by_day(start: datetime, duration_minutes: int, zone: ZoneInfo) -> List[TimeSlice]:
    """
    Cut ``[start, start + duration)`` at every local midnight of ``zone``.

    Arithmetic runs on UTC instants, so a DST shift inside a day changes
    neither the total nor the slice lengths. ``start`` is truncated to the
    minute, so the slices always sum to ``duration_minutes``.
    """
    cursor = ensure_utc(start).replace(second=0, microsecond=0)
    end = cursor + timedelta(minutes=duration_minutes)
    slices: List[TimeSlice] = []
    while cursor < end:
        local_day = cursor.astimezone(zone).date()
        next_midnight = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=zone).astimezone(timezone.utc)
        segment_end = min(next_midnight, end)
        slices.append(TimeSlice(cursor, int((segment_end - cursor).total_seconds() // 60)))
        cursor = segment_end
    return slices


def bucket_keys(day: date) -> List[_BucketKey]:
    """DAY, WEEK and MONTH bucket coordinates ``(type, year, value)`` of a local date."""
    iso_year, iso_week, _ = day.isocalendar()
    return [
        (TimeBucketType.DAY, day.year, day.year * 10000 + day.month * 100 + day.day),
        (TimeBucketType.WEEK, iso_year, iso_week),
        (TimeBucketType.MONTH, day.year, day.month),
    ]


class TimeBucketService:
    """
    Keeps the per-label DAY/WEEK/MONTH minute buckets in step with completed events.
    """

    def __init__(self, db_session: AsyncSession):
        self.db: AsyncSession = db_session

    async def apply(self, user_id: str, label_id: int, start: datetime, duration_minutes: int, tz_name: str) -> None:
        log.debug("Applying %d min to label %s for user %s", duration_minutes, label_id, user_id)
        await self._adjust(user_id, label_id, start, duration_minutes, tz_name, +1)

    async def revert(self, user_id: str, label_id: int, start: datetime, duration_minutes: int, tz_name: str) -> None:
        log.debug("Reverting %d min from label %s for user %s", duration_minutes, label_id, user_id)
        await self._adjust(user_id, label_id, start, duration_minutes, tz_name, -1)

    async def handle_event_change(self, change: EventChange) -> None:
        """
        Revert the old contribution of a completed event, then apply the new one.

        Args:
            change (EventChange): Before/after state of the event.
        """
        log.debug(
            "Event change for user %s: was_completed=%s is_now_completed=%s",
            change.user_id, change.was_completed, change.is_now_completed,
        )
        if change.was_completed and change.is_now_completed:
            log.info(
                "Event change moves time: user=%s old_label=%s new_label=%s",
                change.user_id, change.old_label_id, change.new_label_id,
            )
        if change.was_completed:
            await self.revert(
                change.user_id, change.old_label_id, change.old_start_time,
                change.old_duration_minutes, change.timezone,
            )
        if change.is_now_completed:
            await self.apply(
                change.user_id, change.new_label_id, change.new_start_time,
                change.new_duration_minutes, change.timezone,
            )

    async def _adjust(
        self, user_id: str, label_id: int, start: datetime, duration_minutes: int, tz_name: str, direction: int
    ) -> None:
        zone = resolve_zone(tz_name)
        label = await self.db.get(Label, label_id)
        if label is None:
            log.warning("Cannot update time buckets: label %s not found", label_id)
            raise LabelNotFoundError(label_id)

        slices = split_by_day(start, duration_minutes, zone)
        touched: Dict[_BucketKey, LabelTimeBucket] = {}
        for piece in slices:
            local_day = piece.start.astimezone(zone).date()
            for key in bucket_keys(local_day):
                bucket = touched.get(key)
                if bucket is None:
                    bucket = await self._resolve_or_create(user_id, label_id, label.name, *key)
                    touched[key] = bucket
                bucket.increment_minutes(direction * piece.minutes)

        await self.db.flush()
        log.info(
            "Updated %d time buckets for user=%s label=%s: %d minutes %s",
            len(touched), user_id, label_id, duration_minutes, "added" if direction > 0 else "removed",
        )

    async def _resolve_or_create(
        self, user_id: str, label_id: int, label_name: str, bucket_type: TimeBucketType, year: int, value: int
    ) -> LabelTimeBucket:
        stmt = select(LabelTimeBucket).where(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id == label_id,
            LabelTimeBucket.bucket_type == bucket_type,
            LabelTimeBucket.bucket_year == year,
            LabelTimeBucket.bucket_value == value,
        )
        bucket = (await self.db.execute(stmt)).scalar_one_or_none()
        if bucket is None:
            log.debug("Creating %s bucket for user=%s label=%s year=%s value=%s", bucket_type.value, user_id, label_id, year, value)
            bucket = LabelTimeBucket(
                user_id=user_id,
                label_id=label_id,
                label_name=label_name,
                bucket_type=bucket_type,
                bucket_year=year,
                bucket_value=value,
                duration_minutes=0,
            )
            self.db.add(bucket)
        return bucket


__all__ = ["LabelStatsService", "TimeBucketService", "TimeSlice", "bucket_keys", "split_by_day"]
