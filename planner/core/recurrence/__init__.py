"""
Recurrence grammar package.

• ``parse_rule`` / ``encode_rule`` – string ⇄ ``ParsedRule``.
• ``occurs_on`` – per-date predicate, the single source of matching logic.
• ``expand`` – occurrences over an inclusive date range (built on ``occurs_on``).
• ``summarize`` – English sentence for a rule and its validity window.
"""
from __future__ import annotations

from .expander import expand, iter_dates
from .parser import encode_rule, parse_rule
from .predicate import occurs_on
from .rules import (
    ALL_WEEKDAYS,
    DailyRule,
    Frequency,
    MonthlyRule,
    ParsedRule,
    Weekday,
    WeeklyRule,
)
from .summary import summarize

__all__: list[str] = [
    "ALL_WEEKDAYS",
    "DailyRule",
    "Frequency",
    "MonthlyRule",
    "ParsedRule",
    "Weekday",
    "WeeklyRule",
    "encode_rule",
    "expand",
    "iter_dates",
    "occurs_on",
    "parse_rule",
    "summarize",
]
