from datetime import date, timedelta

import pytest

from planner.core.recurrence import expand, iter_dates, occurs_on, parse_rule
from planner.core.recurrence.predicate import weekday_ordinal


def test_absent_rule_never_occurs():
    assert occurs_on(None, date(2025, 6, 10)) is False
    assert expand(None, date(2025, 6, 1), date(2025, 6, 30)) == []


def test_daily_occurs_every_day():
    rule = parse_rule("DAILY:")
    assert expand(rule, date(2025, 2, 27), date(2025, 3, 2)) == [
        date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1), date(2025, 3, 2),
    ]


def test_weekly_matches_weekdays():
    rule = parse_rule("WEEKLY:MONDAY,FRIDAY")
    assert occurs_on(rule, date(2025, 6, 2))       # Monday
    assert occurs_on(rule, date(2025, 6, 6))       # Friday
    assert not occurs_on(rule, date(2025, 6, 3))   # Tuesday


def test_monthly_second_tuesday_of_june_2025():
    rule = parse_rule("MONTHLY:2:TUESDAY")
    assert expand(rule, date(2025, 6, 1), date(2025, 6, 30)) == [date(2025, 6, 10)]


def test_monthly_fifth_occurrence_only_in_long_months():
    rule = parse_rule("MONTHLY:5:SATURDAY")
    # May 2025 has five Saturdays, June 2025 only four
    assert expand(rule, date(2025, 5, 1), date(2025, 6, 30)) == [date(2025, 5, 31)]


def test_monthly_ordinal_above_five_never_matches():
    rule = parse_rule("MONTHLY:6:MONDAY")
    assert expand(rule, date(2025, 1, 1), date(2025, 12, 31)) == []


def test_weekday_ordinal():
    assert weekday_ordinal(date(2025, 6, 1)) == 1
    assert weekday_ordinal(date(2025, 6, 7)) == 1
    assert weekday_ordinal(date(2025, 6, 8)) == 2
    assert weekday_ordinal(date(2025, 6, 29)) == 5


@pytest.mark.parametrize("text, start, end, skip, expected", [
    ("WEEKLY:TUESDAY", date(2025, 6, 1), date(2025, 6, 30), [date(2025, 6, 10), date(2025, 6, 11)],
     [date(2025, 6, 3), date(2025, 6, 17), date(2025, 6, 24)]),
    ("DAILY:", date(2025, 6, 1), date(2025, 6, 4), [date(2025, 6, 2), date(2025, 6, 3)],
     [date(2025, 6, 1), date(2025, 6, 4)]),
    ("MONTHLY:2:TUESDAY", date(2025, 6, 1), date(2025, 8, 31), [date(2025, 7, 8)],
     [date(2025, 6, 10), date(2025, 8, 12)]),
])
def test_skip_days_are_excluded(text, start, end, skip, expected):
    assert expand(parse_rule(text), start, end, skip=skip) == expected


def test_inverted_range_is_empty():
    assert expand(parse_rule("DAILY:"), date(2025, 6, 2), date(2025, 6, 1)) == []


def test_iter_dates_reaches_date_max_without_overflow():
    assert list(iter_dates(date.max - timedelta(days=1), date.max)) == [date.max - timedelta(days=1), date.max]


@pytest.mark.parametrize("text", ["DAILY:", "WEEKLY:WEDNESDAY,SUNDAY", "MONTHLY:1:MONDAY,FRIDAY", "MONTHLY:4:THURSDAY"])
def test_single_day_expansion_agrees_with_predicate(text):
    rule = parse_rule(text)
    for day in iter_dates(date(2024, 2, 1), date(2024, 3, 31)):
        assert (expand(rule, day, day) != []) == occurs_on(rule, day)


def test_expansion_is_strictly_ascending():
    result = expand(parse_rule("WEEKLY:MONDAY,THURSDAY"), date(2025, 1, 1), date(2025, 12, 31))
    assert result == sorted(set(result))
    assert len(result) == 104
