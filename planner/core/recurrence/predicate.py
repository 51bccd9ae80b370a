# planner/core/recurrence/predicate.py
"""Per-date matching: the only place that decides whether a rule fires on a date."""

from __future__ import annotations

from datetime import date
from typing import Optional

from .rules import Frequency, ParsedRule


def weekday_ordinal(day: date) -> int:
    """1-based position of ``day`` among the days of its month sharing its weekday."""
    return (day.day - 1) // 7 + 1


def occurs_on(rule: Optional[ParsedRule], day: date) -> bool:
    """Return True when ``rule`` has an occurrence on ``day``.

    An absent rule has no occurrences.
    """
    if rule is None:
        return False
    if rule.frequency is Frequency.DAILY:
        return True
    if day.weekday() not in rule.days_of_week:
        return False
    if rule.frequency is Frequency.WEEKLY:
        return True
    return weekday_ordinal(day) == rule.ordinal


__all__: list[str] = ["occurs_on", "weekday_ordinal"]
