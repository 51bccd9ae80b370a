# planner/core/recurrence/expander.py
"""Expansion of a rule over an inclusive date range."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional

from .predicate import occurs_on
from .rules import ParsedRule

log = logging.getLogger(__name__)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` to ``end`` inclusive, ascending."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def expand(
    rule: Optional[ParsedRule],
    range_start: date,
    range_end: date,
    skip: Iterable[date] = (),
) -> List[date]:
    """
    List the occurrences of ``rule`` in ``[range_start, range_end]``.

    Each calendar date is evaluated once through :func:`occurs_on`, so the
    result is strictly ascending and free of duplicates.

    Args:
        rule (ParsedRule | None): Rule to expand; None yields no dates.
        range_start (date): First date of the range (inclusive).
        range_end (date): Last date of the range (inclusive).
        skip (Iterable[date], optional): Dates excluded from the result.

    Returns:
        List[date]: Occurrence dates in ascending order.
    """
    if rule is None:
        log.warning("Cannot expand an absent recurrence rule")
        return []

    skip_days = frozenset(skip)
    log.debug(
        "Expanding %s from %s to %s with %d skip days",
        rule.frequency.value, range_start, range_end, len(skip_days),
    )
    occurrences = [
        day for day in iter_dates(range_start, range_end)
        if day not in skip_days and occurs_on(rule, day)
    ]
    log.debug("Expansion complete: %d occurrences", len(occurrences))
    return occurrences


__all__: list[str] = ["expand", "iter_dates"]
