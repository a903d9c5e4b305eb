"""Date manipulation utilities"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

SECONDS_PER_DAY = 86_400


def as_utc(moment: datetime) -> datetime:
    """Normalize a datetime to UTC (naive values are taken as UTC)"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value) -> Optional[datetime]:
    """
    Interpret a date-like value as a UTC datetime.

    Calendar dates (``date`` objects or ``YYYY-MM-DD`` strings) map to UTC
    midnight. Missing, blank or unparseable values return None instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            parsed = date.fromisoformat(text)
            return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def ceil_days(delta: timedelta) -> int:
    """Whole days in a time span, rounded up (negative spans round toward zero)"""
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)
