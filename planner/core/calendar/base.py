# planner/core/calendar/base.py
"""
Abstract base and common types for calendar stores.

A store is the read side the calendar aggregators depend on: confirmed
one-off spans, recurring windows, labels and the precomputed monthly
aggregate. All methods are asynchronous.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, List, Optional

from planner.core.errors import LabelOwnershipError
from planner.core.recurrence import ParsedRule

log = logging.getLogger(__name__)


# --- Value types ---

@dataclass(frozen=True)
class CalendarUser:
    """Identity and IANA timezone of the user a calendar is computed for."""
    id: str
    timezone: str


@dataclass(frozen=True)
class LabelRef:
    id: int
    owner_id: str
    name: str


@dataclass(frozen=True)
class ScheduledSpan:
    """A confirmed one-off event; ``start``/``end`` are aware UTC instants."""
    owner_id: str
    label_id: Optional[int]
    start: datetime
    end: Optional[datetime] = None
    completed: bool = False


@dataclass(frozen=True)
class RecurringEventWindow:
    """
    A recurring series bounded by ``[valid_from, valid_to]``.

    ``valid_to`` None means open-ended; ``rule`` None means the stored rule
    could not be parsed and the series has no occurrences.
    """
    owner_id: str
    valid_from: date
    valid_to: Optional[date]
    rule: Optional[ParsedRule]
    skip_days: FrozenSet[date] = field(default_factory=frozenset)


# --- Store interface ---

class BaseCalendarStore(ABC):
    """
    Abstract calendar store interface (asynchronous).
    """

    # Store name, e.g. 'sql' or 'memory'
    name: str

    @abstractmethod
    async def find_one_off_spans(
        self, user_id: str, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        """
        Confirmed one-off spans of the user overlapping a UTC window.

        Args:
            user_id (str): Owner of the events.
            utc_start (datetime): Inclusive window start (UTC).
            utc_end (datetime): Exclusive window end (UTC).

        Returns:
            List[ScheduledSpan]: spans with ``start < utc_end`` and
            ``(end or start) >= utc_start``.
        """
        ...

    @abstractmethod
    async def find_completed_spans_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> List[ScheduledSpan]:
        """Confirmed completed spans of a label starting in ``[utc_start, utc_end)``."""
        ...

    @abstractmethod
    async def count_completed_for_label(
        self, label_id: int, utc_start: datetime, utc_end: datetime
    ) -> int:
        """Number of spans ``find_completed_spans_for_label`` would return."""
        ...

    @abstractmethod
    async def find_recurring_windows(
        self, user_id: str, local_start: date, local_end: date
    ) -> List[RecurringEventWindow]:
        """
        Confirmed recurring windows of the user intersecting a local date range.

        Returns windows with ``valid_from <= local_end`` and ``valid_to``
        absent or ``>= local_start``.
        """
        ...

    @abstractmethod
    async def find_label(self, label_id: int) -> LabelRef:
        """
        Raises:
            LabelNotFoundError: no label with this id exists.
        """
        ...

    @abstractmethod
    async def find_monthly_aggregate(
        self, user_id: str, label_id: int, year: int, month: int
    ) -> Optional[int]:
        """Precomputed minutes of the label's MONTH bucket, or None when absent."""
        ...

    def validate_label_ownership(self, user_id: str, label: LabelRef) -> None:
        validate_label_ownership(user_id, label)


def validate_label_ownership(user_id: str, label: LabelRef) -> None:
    """
    Raises:
        LabelOwnershipError: ``label`` belongs to someone other than ``user_id``.
    """
    if label.owner_id != user_id:
        log.warning("User %s attempted to access label %s owned by %s", user_id, label.id, label.owner_id)
        raise LabelOwnershipError(label.id, user_id)


__all__: list[str] = [
    "BaseCalendarStore",
    "CalendarUser",
    "LabelRef",
    "RecurringEventWindow",
    "ScheduledSpan",
    "validate_label_ownership",
]
