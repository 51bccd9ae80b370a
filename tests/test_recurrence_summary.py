from datetime import date

import pytest

from planner.core.recurrence import parse_rule, summarize
from planner.core.recurrence.summary import format_date, ordinal_word


def test_daily_summary():
    assert summarize(parse_rule("DAILY:"), date(2025, 6, 1), date(2025, 6, 30)) == (
        "Every day from June 1, 2025 until June 30, 2025"
    )


def test_weekly_summary_two_days():
    assert summarize(parse_rule("WEEKLY:FRIDAY,MONDAY"), date(2025, 1, 6), date(2025, 3, 28)) == (
        "Every Monday and Friday from January 6, 2025 until March 28, 2025"
    )


def test_weekly_summary_three_days_uses_commas():
    assert summarize(parse_rule("WEEKLY:MONDAY,WEDNESDAY,FRIDAY"), date(2025, 6, 1), date(2025, 6, 30)) == (
        "Every Monday, Wednesday and Friday from June 1, 2025 until June 30, 2025"
    )


def test_monthly_summary():
    assert summarize(parse_rule("MONTHLY:2:TUESDAY"), date(2025, 6, 1), date(2025, 12, 31)) == (
        "Every second Tuesday of the month from June 1, 2025 until December 31, 2025"
    )


def test_open_ended_summary_runs_forever():
    assert summarize(parse_rule("WEEKLY:SUNDAY"), date(2025, 6, 10)) == "Every Sunday from June 10, 2025 forever"


@pytest.mark.parametrize(
    "n, word",
    [(1, "first"), (3, "third"), (5, "fifth"), (6, "6th"), (11, "11th"), (12, "12th"), (21, "21st"), (22, "22nd"), (113, "113th")],
)
def test_ordinal_word(n, word):
    assert ordinal_word(n) == word


def test_format_date():
    assert format_date(date(2025, 6, 10)) == "June 10, 2025"
