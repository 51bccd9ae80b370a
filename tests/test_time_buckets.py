from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planner.core.errors import LabelNotFoundError
from planner.core.labels.models import Label
from planner.core.stats.models import LabelTimeBucket, TimeBucketType
from planner.core.stats.schemas import EventChange
from planner.core.stats.service import TimeBucketService, bucket_keys, split_by_day
from planner.core.users.models import User
from planner.db.base import async_session_context, create_db_and_tables, drop_db_and_tables

UTC = timezone.utc


@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_db():
    await create_db_and_tables()
    yield
    await drop_db_and_tables()


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    async with async_session_context() as session:
        session.add(User(id="u1", timezone="UTC"))
        await session.flush()
        session.add_all([Label(id=1, user_id="u1", name="Work"), Label(id=2, user_id="u1", name="Play")])
        await session.commit()
        yield session


async def _minutes(session: AsyncSession, label_id: int, bucket_type: TimeBucketType) -> dict:
    stmt = select(LabelTimeBucket).where(
        LabelTimeBucket.label_id == label_id, LabelTimeBucket.bucket_type == bucket_type
    )
    rows = (await session.execute(stmt)).scalars().all()
    return {(row.bucket_year, row.bucket_value): row.duration_minutes for row in rows}


def test_split_by_day_cuts_at_local_midnight():
    slices = split_by_day(datetime(2025, 6, 1, 23, 30, tzinfo=UTC), 120, ZoneInfo("UTC"))
    assert [(piece.start, piece.minutes) for piece in slices] == [
        (datetime(2025, 6, 1, 23, 30, tzinfo=UTC), 30),
        (datetime(2025, 6, 2, 0, 0, tzinfo=UTC), 90),
    ]


def test_split_by_day_mid_minute_start_keeps_every_minute():
    slices = split_by_day(datetime(2025, 6, 1, 23, 59, 30, tzinfo=UTC), 2, ZoneInfo("UTC"))
    assert [(piece.start, piece.minutes) for piece in slices] == [
        (datetime(2025, 6, 1, 23, 59, tzinfo=UTC), 1),
        (datetime(2025, 6, 2, 0, 0, tzinfo=UTC), 1),
    ]


def test_split_by_day_keeps_real_minutes_across_dst_start():
    # 00:30 EST on 2025-03-09; clocks jump from 02:00 to 03:00
    slices = split_by_day(datetime(2025, 3, 9, 5, 30, tzinfo=UTC), 180, ZoneInfo("America/New_York"))
    assert [piece.minutes for piece in slices] == [180]


def test_bucket_keys_use_iso_week_year():
    assert bucket_keys(date(2024, 12, 30)) == [
        (TimeBucketType.DAY, 2024, 20241230),
        (TimeBucketType.WEEK, 2025, 1),
        (TimeBucketType.MONTH, 2024, 12),
    ]


@pytest.mark.asyncio
async def test_apply_fills_day_week_and_month_buckets(db_session: AsyncSession):
    service = TimeBucketService(db_session)
    await service.apply("u1", 1, datetime(2025, 6, 1, 23, 30, tzinfo=UTC), 120, "UTC")
    await db_session.commit()

    assert await _minutes(db_session, 1, TimeBucketType.DAY) == {(2025, 20250601): 30, (2025, 20250602): 90}
    assert await _minutes(db_session, 1, TimeBucketType.WEEK) == {(2025, 22): 30, (2025, 23): 90}
    assert await _minutes(db_session, 1, TimeBucketType.MONTH) == {(2025, 6): 120}


@pytest.mark.asyncio
async def test_buckets_follow_the_users_timezone(db_session: AsyncSession):
    service = TimeBucketService(db_session)
    # 2025-07-01T02:00Z is June 30 22:00 in New York
    await service.apply("u1", 1, datetime(2025, 7, 1, 2, 0, tzinfo=UTC), 60, "America/New_York")
    await db_session.commit()

    assert await _minutes(db_session, 1, TimeBucketType.MONTH) == {(2025, 6): 60}


@pytest.mark.asyncio
async def test_revert_cancels_apply(db_session: AsyncSession):
    service = TimeBucketService(db_session)
    start = datetime(2025, 6, 10, 9, 0, tzinfo=UTC)
    await service.apply("u1", 1, start, 45, "UTC")
    await service.apply("u1", 1, start, 45, "UTC")
    await service.revert("u1", 1, start, 45, "UTC")
    await db_session.commit()

    assert await _minutes(db_session, 1, TimeBucketType.MONTH) == {(2025, 6): 45}
    assert await _minutes(db_session, 1, TimeBucketType.DAY) == {(2025, 20250610): 45}


@pytest.mark.asyncio
async def test_event_change_moves_minutes_between_labels(db_session: AsyncSession):
    service = TimeBucketService(db_session)
    start = datetime(2025, 6, 10, 9, 0, tzinfo=UTC)
    await service.apply("u1", 1, start, 60, "UTC")

    await service.handle_event_change(EventChange(
        user_id="u1", timezone="UTC",
        old_label_id=1, old_start_time=start, old_duration_minutes=60, was_completed=True,
        new_label_id=2, new_start_time=start, new_duration_minutes=90, is_now_completed=True,
    ))
    await db_session.commit()

    assert await _minutes(db_session, 1, TimeBucketType.MONTH) == {(2025, 6): 0}
    assert await _minutes(db_session, 2, TimeBucketType.MONTH) == {(2025, 6): 90}


@pytest.mark.asyncio
async def test_uncompleted_change_touches_nothing(db_session: AsyncSession):
    await TimeBucketService(db_session).handle_event_change(EventChange(user_id="u1", timezone="UTC"))
    await db_session.commit()

    assert await _minutes(db_session, 1, TimeBucketType.MONTH) == {}


@pytest.mark.asyncio
async def test_unknown_label_is_rejected(db_session: AsyncSession):
    with pytest.raises(LabelNotFoundError):
        await TimeBucketService(db_session).apply("u1", 99, datetime(2025, 6, 1, tzinfo=UTC), 30, "UTC")


def test_event_change_requires_the_completed_side():
    with pytest.raises(ValueError):
        EventChange(user_id="u1", timezone="UTC", is_now_completed=True, new_label_id=1)
