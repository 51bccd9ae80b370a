# planner/core/recurrence/rules.py
"""
Value types of the recurrence grammar.

A parsed rule is one of three frozen variants (``DailyRule``, ``WeeklyRule``,
``MonthlyRule``); each exposes the same read-only view
(``frequency``, ``days_of_week``, ``ordinal``) so callers never branch on
nullable fields.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union


class Frequency(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class Weekday(enum.IntEnum):
    """Weekdays numbered like ``datetime.date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def title(self) -> str:
        return self.name.title()


ALL_WEEKDAYS: FrozenSet[Weekday] = frozenset(Weekday)


@dataclass(frozen=True)
class DailyRule:
    frequency: Frequency = field(default=Frequency.DAILY, init=False)

    @property
    def days_of_week(self) -> FrozenSet[Weekday]:
        return ALL_WEEKDAYS

    @property
    def ordinal(self) -> Optional[int]:
        return None


@dataclass(frozen=True)
class WeeklyRule:
    days: FrozenSet[Weekday]
    frequency: Frequency = field(default=Frequency.WEEKLY, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(self.days))

    @property
    def days_of_week(self) -> FrozenSet[Weekday]:
        return self.days

    @property
    def ordinal(self) -> Optional[int]:
        return None


@dataclass(frozen=True)
class MonthlyRule:
    days: FrozenSet[Weekday]
    nth: int
    frequency: Frequency = field(default=Frequency.MONTHLY, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(self.days))

    @property
    def days_of_week(self) -> FrozenSet[Weekday]:
        return self.days

    @property
    def ordinal(self) -> Optional[int]:
        return self.nth


ParsedRule = Union[DailyRule, WeeklyRule, MonthlyRule]


def sorted_days(days: FrozenSet[Weekday]) -> list[Weekday]:
    """Monday-first ordering used by the encoder and the summaries."""
    return sorted(days)


__all__: list[str] = [
    "Frequency",
    "Weekday",
    "ALL_WEEKDAYS",
    "DailyRule",
    "WeeklyRule",
    "MonthlyRule",
    "ParsedRule",
    "sorted_days",
]
