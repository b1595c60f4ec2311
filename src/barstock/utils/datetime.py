"""Timezone-aware datetime utilities for the bar's local business day."""

import os
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

# Business day boundaries follow the bar's local time (Nairobi by default)
APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "Africa/Nairobi"))


def now_local() -> datetime:
    """Get current datetime in the bar's timezone."""
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    """Get today's business date."""
    return now_local().date()


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_utc_naive() -> datetime:
    """Alias for now_utc() - both return naive UTC."""
    return now_utc()


def to_local_date(value: datetime) -> date:
    """Business date of a stored timestamp (naive values are UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(APP_TIMEZONE).date()


def local_day_bounds_utc(day: date) -> tuple[datetime, datetime]:
    """Naive UTC [start, end) covering one local business date."""
    start = datetime.combine(day, time.min, tzinfo=APP_TIMEZONE)
    end = start + timedelta(days=1)
    return (
        start.astimezone(timezone.utc).replace(tzinfo=None),
        end.astimezone(timezone.utc).replace(tzinfo=None),
    )
