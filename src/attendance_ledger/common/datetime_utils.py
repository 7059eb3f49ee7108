from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" shift boundary; missing parts default to zero."""
    parts = (value or "").strip().split(":")
    hours = int(parts[0]) if parts and parts[0] else 0
    minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return time(hour=hours, minute=minutes)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: date | datetime) -> datetime:
    return datetime.combine(as_date(value), time.min)


def end_of_day(value: date | datetime) -> datetime:
    return datetime.combine(as_date(value), time.max)


def at_time(day: date | datetime, hhmm: str) -> datetime:
    """Anchor an "HH:MM" boundary on the given calendar day."""
    return datetime.combine(as_date(day), parse_hhmm(hhmm))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, rounded half up, never negative."""
    seconds = (end - start).total_seconds()
    return max(0, int(math.floor(seconds / 60 + 0.5)))


def first_of_month(value: date | datetime) -> date:
    return as_date(value).replace(day=1)


def next_month_start(value: date | datetime) -> date:
    first = first_of_month(value)
    return (first + timedelta(days=32)).replace(day=1)


def month_bounds(value: date | datetime) -> tuple[date, date]:
    """First and last calendar day of the month containing value."""
    first = first_of_month(value)
    return first, next_month_start(first) - timedelta(days=1)


def format_minutes_label(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"
