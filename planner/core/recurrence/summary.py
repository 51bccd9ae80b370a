# planner/core/recurrence/summary.py
"""Human-readable English summaries of recurrence rules."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from .rules import Frequency, ParsedRule, Weekday, sorted_days

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_ORDINAL_WORDS = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth"}


def format_date(day: date) -> str:
    """``June 10, 2025`` style, independent of the process locale."""
    return f"{_MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def ordinal_word(n: int) -> str:
    if n in _ORDINAL_WORDS:
        return _ORDINAL_WORDS[n]
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def join_days(days: Sequence[Weekday]) -> str:
    """``Monday``, ``Monday and Friday``, ``Monday, Wednesday and Friday``."""
    names = [day.title for day in days]
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"


def summarize(rule: ParsedRule, valid_from: date, valid_to: Optional[date] = None) -> str:
    """
    Render ``rule`` bounded by its validity window as a sentence.

    Args:
        rule (ParsedRule): The parsed rule.
        valid_from (date): First day of the series.
        valid_to (date | None, optional): Last day; None renders "forever".

    Returns:
        str: e.g. ``"Every second Tuesday of the month from June 1, 2025 until June 30, 2025"``.
    """
    until = f"until {format_date(valid_to)}" if valid_to is not None else "forever"
    window = f"from {format_date(valid_from)} {until}"
    days = join_days(sorted_days(rule.days_of_week))

    if rule.frequency is Frequency.DAILY:
        return f"Every day {window}"
    if rule.frequency is Frequency.WEEKLY:
        return f"Every {days} {window}"
    return f"Every {ordinal_word(rule.ordinal)} {days} of the month {window}"


__all__: list[str] = ["summarize", "format_date", "ordinal_word", "join_days"]
