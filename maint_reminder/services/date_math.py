from __future__ import annotations

import math
from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any

import pandas as pd

"""Day-granularity date arithmetic.

All comparisons happen on calendar days: values are truncated to midnight
before the difference is taken, so time-of-day never leaks into a day count.
"""

__all__ = [
    "MS_PER_DAY",
    "TEXT_DATE_FORMATS",
    "Clock",
    "days_between",
    "to_calendar_date",
    "today_from",
]

MS_PER_SECOND = 1000
MS_PER_MINUTE = MS_PER_SECOND * 60
MS_PER_HOUR = MS_PER_MINUTE * 60
MS_PER_DAY = MS_PER_HOUR * 24

Clock = Callable[[], datetime]

# 完全一致のみ受け付ける (年や日を補完しない)
TEXT_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def _as_midnight(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        # tz 付きの値は naive に揃える (日付部分のみ使用)
        return datetime.combine(value.date(), time.min)
    return datetime.combine(value, time.min)


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    """Return ``later - earlier`` in whole days, truncated toward zero.

    The difference is taken in milliseconds, rounded to absorb sub-millisecond
    artifacts and then truncated to an integer day count. Negative when
    ``later`` precedes ``earlier``.
    """
    delta = _as_midnight(later) - _as_midnight(earlier)
    ms = round(delta.total_seconds() * MS_PER_SECOND)
    return math.trunc(ms / MS_PER_DAY)


def _parse_text_date(text: str) -> date | None:
    for fmt in TEXT_DATE_FORMATS:
        try:
            parsed = pd.to_datetime(text, format=fmt, exact=True)
        except (ValueError, OverflowError):
            continue
        if not pd.isna(parsed):
            return parsed.date()
    return None


def to_calendar_date(value: Any) -> date | None:
    """Coerce a raw cell value to a calendar date.

    Accepts ``date``, ``datetime``/``pd.Timestamp`` and text in one of
    TEXT_DATE_FORMATS. Partial text such as "june" or "Mon" is rejected
    rather than completed with an invented year or day.
    Returns None when the value cannot be interpreted as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if pd.isna(value):  # NaT
            return None
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return _parse_text_date(text)
    return None


def today_from(clock: Clock = datetime.now) -> date:
    """Capture "today" once from the clock, time-of-day dropped."""
    return clock().date()
