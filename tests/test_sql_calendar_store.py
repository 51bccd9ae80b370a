from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from planner.core.calendar import CalendarUser, get_calendar_store
from planner.core.calendar.service import MonthlyCalendarService
from planner.core.calendar.sql import SqlCalendarStore
from planner.core.errors import LabelNotFoundError
from planner.core.events.models import Event, RecurringEvent
from planner.core.labels.models import Label
from planner.core.recurrence import parse_rule
from planner.core.stats.models import LabelTimeBucket, TimeBucketType
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
        yield session


@pytest_asyncio.fixture
async def seeded(db_session: AsyncSession):
    db_session.add_all([User(id="u1", timezone="UTC"), User(id="u2", timezone="UTC")])
    await db_session.flush()
    db_session.add(Label(id=1, user_id="u1", name="Work"))
    await db_session.flush()
    db_session.add_all([
        Event(user_id="u1", label_id=1, title="spans into June",
              start_time=datetime(2025, 5, 31, 22, 0, tzinfo=UTC), end_time=datetime(2025, 6, 1, 2, 0, tzinfo=UTC),
              is_completed=True),
        Event(user_id="u1", label_id=1, title="done", start_time=datetime(2025, 6, 10, 9, 0, tzinfo=UTC),
              end_time=datetime(2025, 6, 10, 10, 0, tzinfo=UTC), is_completed=True),
        Event(user_id="u1", label_id=1, title="open", start_time=datetime(2025, 6, 12, 9, 0, tzinfo=UTC)),
        Event(user_id="u1", label_id=1, title="draft", start_time=datetime(2025, 6, 14, 9, 0, tzinfo=UTC),
              is_completed=True, unconfirmed=True),
        Event(user_id="u1", title="before", start_time=datetime(2025, 5, 20, 9, 0, tzinfo=UTC)),
        Event(user_id="u2", title="other user", start_time=datetime(2025, 6, 15, 9, 0, tzinfo=UTC)),
        RecurringEvent(user_id="u1", title="standup", start_date=date(2025, 1, 1), end_date=None,
                       recurrence_rule="MONTHLY:2:TUESDAY", skip_days=[]),
        RecurringEvent(user_id="u1", title="weekly", start_date=date(2025, 6, 1), end_date=date(2025, 6, 30),
                       recurrence_rule="WEEKLY:FRIDAY", skip_days=["2025-06-13", "2025-06-20"]),
        RecurringEvent(user_id="u1", title="broken", start_date=date(2025, 1, 1), end_date=None,
                       recurrence_rule="WEEKLY:FUNDAY", skip_days=[]),
        RecurringEvent(user_id="u1", title="finished", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31),
                       recurrence_rule="DAILY:", skip_days=[]),
        LabelTimeBucket(user_id="u1", label_id=1, label_name="Work", bucket_type=TimeBucketType.MONTH,
                        bucket_year=2025, bucket_value=6, duration_minutes=180),
    ])
    await db_session.commit()
    return db_session


JUNE_START = datetime(2025, 6, 1, 0, 0, tzinfo=UTC)
JUNE_END = datetime(2025, 6, 30, 23, 59, tzinfo=UTC)


@pytest.mark.asyncio
async def test_one_off_spans_overlap_window_and_skip_drafts(seeded):
    store = SqlCalendarStore(seeded)
    spans = await store.find_one_off_spans("u1", JUNE_START, JUNE_END)

    assert [span.start for span in spans] == [
        datetime(2025, 5, 31, 22, 0, tzinfo=UTC),
        datetime(2025, 6, 10, 9, 0, tzinfo=UTC),
        datetime(2025, 6, 12, 9, 0, tzinfo=UTC),
    ]
    assert all(span.start.tzinfo is not None for span in spans)


@pytest.mark.asyncio
async def test_completed_spans_for_label_start_inside_window(seeded):
    store = SqlCalendarStore(seeded)

    spans = await store.find_completed_spans_for_label(1, JUNE_START, JUNE_END)
    assert [span.start for span in spans] == [datetime(2025, 6, 10, 9, 0, tzinfo=UTC)]
    assert await store.count_completed_for_label(1, JUNE_START, JUNE_END) == 1


@pytest.mark.asyncio
async def test_recurring_windows_intersect_month_and_tolerate_bad_rules(seeded):
    store = SqlCalendarStore(seeded)
    windows = await store.find_recurring_windows("u1", date(2025, 6, 1), date(2025, 6, 30))

    assert len(windows) == 3
    by_rule = {window.rule: window for window in windows}
    assert by_rule[parse_rule("WEEKLY:FRIDAY")].skip_days == {date(2025, 6, 13), date(2025, 6, 20)}
    assert by_rule[parse_rule("MONTHLY:2:TUESDAY")].valid_to is None
    assert None in by_rule


@pytest.mark.asyncio
async def test_malformed_skip_day_is_dropped_not_fatal(db_session):
    db_session.add(User(id="u3", timezone="UTC"))
    await db_session.flush()
    db_session.add(RecurringEvent(user_id="u3", title="odd", start_date=date(2025, 6, 1), end_date=None,
                                  recurrence_rule="WEEKLY:MONDAY", skip_days=["2025-06-09", "not-a-date", 42]))
    await db_session.commit()

    windows = await SqlCalendarStore(db_session).find_recurring_windows("u3", date(2025, 6, 1), date(2025, 6, 30))
    assert len(windows) == 1
    assert windows[0].skip_days == {date(2025, 6, 9)}


@pytest.mark.asyncio
async def test_labels_and_monthly_aggregate(seeded):
    store = SqlCalendarStore(seeded)

    label = await store.find_label(1)
    assert (label.id, label.owner_id, label.name) == (1, "u1", "Work")
    with pytest.raises(LabelNotFoundError):
        await store.find_label(404)

    assert await store.find_monthly_aggregate("u1", 1, 2025, 6) == 180
    assert await store.find_monthly_aggregate("u1", 1, 2025, 7) is None


@pytest.mark.asyncio
async def test_calendar_service_over_sql_store(seeded):
    store = get_calendar_store("sql", db_session=seeded)
    service = MonthlyCalendarService(store, CalendarUser("u1", "UTC"))

    assert await service.dates_with_events(2025, 6) == [
        date(2025, 5, 31), date(2025, 6, 1), date(2025, 6, 6), date(2025, 6, 10),
        date(2025, 6, 12), date(2025, 6, 13), date(2025, 6, 20), date(2025, 6, 27),
    ]


def test_registry_shares_one_memory_store():
    memory = get_calendar_store("memory")
    assert get_calendar_store("MEMORY") is memory
    session = object()
    assert get_calendar_store("sql", db_session=session) is not get_calendar_store("sql", db_session=session)


def test_registry_rejects_unknown_store_and_sql_without_session():
    with pytest.raises(ValueError):
        get_calendar_store("google")
    with pytest.raises(ValueError):
        get_calendar_store("sql")
