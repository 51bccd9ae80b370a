# planner/core/events/models.py

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from planner.db.base import Base


class Event(Base):
    """
    One-off scheduled event.

    Start/end are absolute instants stored in UTC. ``unconfirmed`` marks a
    draft that calendar views ignore.
    """
    __tablename__ = 'events'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True
    )
    label_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('labels.id', ondelete='SET NULL'), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    unconfirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index('ix_events_user_start', 'user_id', 'start_time'),
        Index('ix_events_label_completed_start', 'label_id', 'is_completed', 'start_time'),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Event id={self.id} user_id={self.user_id!r} start={self.start_time!s} completed={self.is_completed}>"


class RecurringEvent(Base):
    """
    Recurring series: an encoded rule bounded by ``[start_date, end_date]``.

    ``end_date`` NULL means open-ended. ``skip_days`` holds ISO dates of
    cancelled single occurrences.
    """
    __tablename__ = 'recurring_events'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True
    )
    label_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('labels.id', ondelete='SET NULL'), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    recurrence_rule: Mapped[str] = mapped_column(String(128), nullable=False, comment="Encoded rule, e.g. WEEKLY:MONDAY")
    recurrence_summary: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    skip_days: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    unconfirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index('ix_recurring_events_user_dates', 'user_id', 'start_date', 'end_date'),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<RecurringEvent id={self.id} rule={self.recurrence_rule!r} {self.start_date}..{self.end_date}>"
