from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd
import pytest

from maint_reminder.services.date_math import days_between, to_calendar_date, today_from


@pytest.mark.parametrize(
    "later, expected",
    [
        (date(2024, 6, 15), 0),
        (date(2024, 6, 16), 1),
        (date(2024, 6, 14), -1),
        (date(2024, 7, 15), 30),
        (date(2023, 6, 15), -366),  # 2024 はうるう年
    ],
)
def test_days_between_dates(later: date, expected: int):
    assert days_between(date(2024, 6, 15), later) == expected


def test_days_between_ignores_time_of_day():
    earlier = datetime(2024, 6, 15, 23, 59)
    later = datetime(2024, 6, 16, 0, 1)
    assert days_between(earlier, later) == 1
    assert days_between(later, earlier) == -1


def test_days_between_is_monotonic():
    base = date(2024, 1, 1)
    counts = [days_between(base, base + timedelta(days=n)) for n in range(-10, 11)]
    assert counts == list(range(-10, 11))


def test_days_between_accepts_timestamp():
    assert days_between(date(2024, 3, 1), pd.Timestamp("2024-03-31 08:00")) == 30


def test_to_calendar_date_variants():
    assert to_calendar_date(date(2024, 1, 2)) == date(2024, 1, 2)
    assert to_calendar_date(datetime(2024, 1, 2, 13, 0)) == date(2024, 1, 2)
    assert to_calendar_date(pd.Timestamp("2024-01-02")) == date(2024, 1, 2)
    assert to_calendar_date("2024-01-02") == date(2024, 1, 2)
    assert to_calendar_date("2024-01-02 08:30:00") == date(2024, 1, 2)
    assert to_calendar_date("06/18/2024") == date(2024, 6, 18)
    assert to_calendar_date("June 18, 2024") == date(2024, 6, 18)


@pytest.mark.parametrize(
    "value", [None, "", "   ", "not a date", "june", "Mon", "2024", "June 2024", pd.NaT, 42]
)
def test_to_calendar_date_unreadable(value):
    assert to_calendar_date(value) is None


def test_today_from_drops_time():
    assert today_from(lambda: datetime(2024, 6, 15, 18, 30)) == date(2024, 6, 15)
