# planner/api/v1/recurrence.py

from __future__ import annotations

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, HTTPException, status

from planner.config import settings
from planner.core.calendar.schemas import RecurrencePreviewRequest, RecurrencePreviewResponse
from planner.core.recurrence import encode_rule, expand, parse_rule, summarize
from planner.core.recurrence.rules import sorted_days

log = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/recurrence", tags=["Recurrence"])


@router.post("/preview", response_model=RecurrencePreviewResponse)
async def preview_recurrence(payload: RecurrencePreviewRequest) -> RecurrencePreviewResponse:
    """
    Parse a rule and describe it. Occurrences are listed only for a bounded
    series no longer than ``RECURRENCE_PREVIEW_MAX_DAYS``.
    """
    rule = parse_rule(payload.rule)

    if payload.end_date is not None and payload.end_date < payload.start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )

    occurrences: List[date] = []
    if payload.end_date is not None:
        span_days = (payload.end_date - payload.start_date).days + 1
        if span_days > settings.RECURRENCE_PREVIEW_MAX_DAYS:
            log.warning("Recurrence preview range of %d days exceeds the limit", span_days)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Preview range must not exceed {settings.RECURRENCE_PREVIEW_MAX_DAYS} days",
            )
        occurrences = expand(rule, payload.start_date, payload.end_date, payload.skip_days)

    return RecurrencePreviewResponse(
        rule=encode_rule(rule),
        frequency=rule.frequency.value,
        days_of_week=[day.name for day in sorted_days(rule.days_of_week)],
        ordinal=rule.ordinal,
        summary=summarize(rule, payload.start_date, payload.end_date),
        occurrences=occurrences,
    )
