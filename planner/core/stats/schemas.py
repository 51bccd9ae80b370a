# planner/core/stats/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class LabelMonthStats(BaseModel):
    label_id: int
    label_name: str
    total_events: int = Field(0, ge=0, description="Completed events of the label in the month")
    total_duration_minutes: int = Field(0, description="Precomputed minutes of the label's MONTH bucket")


class EventChange(BaseModel):
    """
    Before/after state of a one-off event, as the time buckets see it.

    The old values are reverted when ``was_completed``; the new values are
    applied when ``is_now_completed``.
    """
    user_id: str
    timezone: str = Field(..., description="IANA timezone the buckets are computed in")
    old_label_id: Optional[int] = None
    new_label_id: Optional[int] = None
    old_start_time: Optional[datetime] = None
    new_start_time: Optional[datetime] = None
    old_duration_minutes: Optional[int] = Field(None, ge=0)
    new_duration_minutes: Optional[int] = Field(None, ge=0)
    was_completed: bool = False
    is_now_completed: bool = False

    @model_validator(mode='after')
    def check_completed_sides(self) -> 'EventChange':
        if self.was_completed and None in (self.old_label_id, self.old_start_time, self.old_duration_minutes):
            raise ValueError("old_label_id, old_start_time and old_duration_minutes are required when was_completed")
        if self.is_now_completed and None in (self.new_label_id, self.new_start_time, self.new_duration_minutes):
            raise ValueError("new_label_id, new_start_time and new_duration_minutes are required when is_now_completed")
        return self


__all__ = ["EventChange", "LabelMonthStats"]
