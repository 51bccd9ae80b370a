# planner/core/recurrence/parser.py
"""
Parser and encoder for the compact recurrence grammar::

    DAILY:
    WEEKLY:<weekday>(,<weekday>)*
    MONTHLY:<ordinal>:<weekday>(,<weekday>)*

Tokens are case-insensitive; weekdays are full English names.
"""

from __future__ import annotations

import logging
from typing import FrozenSet

from planner.core.errors import InvalidRuleError

from .rules import DailyRule, Frequency, MonthlyRule, ParsedRule, Weekday, WeeklyRule, sorted_days

log = logging.getLogger(__name__)

_SEPARATOR = ":"


def parse_rule(text: str) -> ParsedRule:
    """
    Parse a rule string into a ``ParsedRule``.

    Args:
        text (str): Encoded rule, e.g. ``"MONTHLY:2:TUESDAY"``.

    Returns:
        ParsedRule: The immutable rule variant.

    Raises:
        InvalidRuleError: Unknown frequency, unknown or missing weekdays,
            or a missing / non-numeric / non-positive MONTHLY ordinal.
    """
    log.debug("Parsing recurrence rule: %r", text)
    parts = (text or "").strip().split(_SEPARATOR)
    if len(parts) < 2:
        log.warning("Recurrence rule without frequency separator: %r", text)
        raise InvalidRuleError("Recurrence rule must specify a frequency.")

    token = parts[0].strip().upper()
    try:
        frequency = Frequency(token)
    except ValueError:
        log.warning("Invalid frequency in rule: %r", parts[0])
        raise InvalidRuleError("The recurrence rule combination is not supported.") from None

    if frequency is Frequency.DAILY:
        rule: ParsedRule = DailyRule()
    elif frequency is Frequency.WEEKLY:
        rule = WeeklyRule(_parse_days(parts[1]))
    else:
        if len(parts) < 3:
            log.warning("Monthly rule missing ordinal or days: %r", text)
            raise InvalidRuleError("Monthly recurrence must include both ordinal and day(s).")
        rule = MonthlyRule(_parse_days(parts[2]), _parse_ordinal(parts[1]))

    log.debug("Parsed recurrence rule %r -> %s", text, rule)
    return rule


def encode_rule(rule: ParsedRule) -> str:
    """Canonical uppercase encoding of ``rule`` (inverse of :func:`parse_rule`)."""
    days = ",".join(day.name for day in sorted_days(rule.days_of_week))
    if rule.frequency is Frequency.DAILY:
        return "DAILY:"
    if rule.frequency is Frequency.WEEKLY:
        return f"WEEKLY:{days}"
    return f"MONTHLY:{rule.ordinal}:{days}"


def _parse_days(segment: str) -> FrozenSet[Weekday]:
    tokens = [token.strip().upper() for token in segment.split(",")]
    if not any(tokens):
        log.warning("No days provided in days segment: %r", segment)
        raise InvalidRuleError("Recurrence must specify at least one day.")

    days: set[Weekday] = set()
    for token in tokens:
        try:
            days.add(Weekday[token])
        except KeyError:
            log.warning("Invalid day name: %r", token)
            raise InvalidRuleError("The recurrence rule contains an invalid day of the week.") from None
    return frozenset(days)


def _parse_ordinal(segment: str) -> int:
    try:
        ordinal = int(segment.strip())
    except ValueError:
        log.warning("Invalid ordinal format: %r", segment)
        raise InvalidRuleError("The recurrence rule contains an invalid ordinal value.") from None
    if ordinal < 1:
        log.warning("Non-positive ordinal: %d", ordinal)
        raise InvalidRuleError("The recurrence rule contains an invalid ordinal value.")
    return ordinal


__all__: list[str] = ["parse_rule", "encode_rule"]
