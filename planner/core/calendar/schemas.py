# planner/core/calendar/schemas.py

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from planner.core.stats.schemas import LabelMonthStats


class MonthlyCalendarResponse(BaseModel):
    event_dates: List[date] = Field(default_factory=list, description="Active local dates, ascending")
    stats: Optional[LabelMonthStats] = None


class RecurrencePreviewRequest(BaseModel):
    rule: str = Field(..., description="Encoded rule, e.g. 'MONTHLY:2:TUESDAY'")
    start_date: date
    end_date: Optional[date] = Field(None, description="Last day of the series; open-ended when missing")
    skip_days: List[date] = Field(default_factory=list)

    @field_validator('rule')
    @classmethod
    def rule_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("rule must not be blank")
        return value


class RecurrencePreviewResponse(BaseModel):
    rule: str = Field(..., description="Canonical encoding of the parsed rule")
    frequency: str
    days_of_week: List[str]
    ordinal: Optional[int] = None
    summary: str
    occurrences: List[date] = Field(default_factory=list)


__all__ = ["MonthlyCalendarResponse", "RecurrencePreviewRequest", "RecurrencePreviewResponse"]
