# planner/api/v1/calendar.py

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from planner.core.auth.security import get_calendar_user
from planner.core.calendar import BaseCalendarStore, CalendarUser, get_calendar_store
from planner.core.calendar.schemas import MonthlyCalendarResponse
from planner.core.calendar.service import MonthlyCalendarService
from planner.core.stats.service import LabelStatsService
from planner.db.base import get_async_db_session

log = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/calendar", tags=["Calendar"])


async def get_store(db: AsyncSession = Depends(get_async_db_session)) -> BaseCalendarStore:
    return get_calendar_store(db_session=db)


@router.get("", response_model=MonthlyCalendarResponse)
async def get_monthly_calendar(
    label_id: Optional[int] = Query(None, description="Restrict to completed events of this label"),
    year: Optional[int] = Query(None, description="Defaults to the current year in the user's timezone"),
    month: Optional[int] = Query(None, description="1-12; defaults to the current month in the user's timezone"),
    store: BaseCalendarStore = Depends(get_store),
    user: CalendarUser = Depends(get_calendar_user),
) -> MonthlyCalendarResponse:
    """
    Active dates of a month for the current user.

    With ``label_id`` the dates come from the label's completed events and
    the response carries the label's monthly statistics.
    """
    log.info("Calendar request: user=%s label=%s year=%s month=%s", user.id, label_id, year, month)
    calendar = MonthlyCalendarService(store, user)
    if label_id is None:
        dates = await calendar.dates_with_events(year, month)
        return MonthlyCalendarResponse(event_dates=dates)

    dates = await calendar.dates_for_label(label_id, year, month)
    stats = await LabelStatsService(store, user).monthly_stats(label_id, year, month)
    return MonthlyCalendarResponse(event_dates=dates, stats=stats)
