"""Tests for report period windows."""

from datetime import datetime, timedelta, timezone

import pytest

from claude_code_summary.utils.periods import Period, period_start, period_window

TZ = timezone(timedelta(hours=2))
# Thursday
NOW = datetime(2024, 3, 14, 15, 30, tzinfo=TZ)


def test_today_starts_at_midnight():
    assert period_start(Period.TODAY, NOW) == datetime(2024, 3, 14, tzinfo=TZ)


def test_week_starts_monday():
    assert period_start(Period.WEEK, NOW) == datetime(2024, 3, 11, tzinfo=TZ)


def test_week_on_monday_is_today():
    monday = datetime(2024, 3, 11, 8, 0, tzinfo=TZ)
    assert period_start(Period.WEEK, monday) == period_start(Period.TODAY, monday)


def test_month_starts_on_first():
    assert period_start(Period.MONTH, NOW) == datetime(2024, 3, 1, tzinfo=TZ)


@pytest.mark.parametrize("now", [
    NOW,
    datetime(2024, 3, 1, 0, 0, tzinfo=TZ),
    datetime(2024, 3, 31, 23, 59, tzinfo=TZ),
    datetime(2024, 1, 1, 12, 0, tzinfo=TZ),
])
def test_windows_nest(now):
    today = period_window(Period.TODAY, now)
    week = period_window(Period.WEEK, now)
    month = period_window(Period.MONTH, now)

    assert week.start <= today.start
    assert month.start <= today.start
    assert week.contains_date(today.start_date)
    assert month.contains_date(today.start_date)


def test_contains_date():
    window = period_window("week", NOW)
    assert window.period is Period.WEEK
    assert window.start_date == "2024-03-11"
    assert window.contains_date("2024-03-11")
    assert window.contains_date("2024-03-14")
    assert not window.contains_date("2024-03-10")


def test_titles():
    assert Period.TODAY.title == "Today"
    assert Period.WEEK.title == "This Week"
    assert Period.MONTH.title == "This Month"


def test_unknown_period():
    with pytest.raises(ValueError):
        period_window("year", NOW)
