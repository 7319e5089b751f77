"""Timezone-aware datetime utilities for Sri Lanka local time."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

# Sri Lanka: UTC+5:30 year-round, no DST
APP_TIMEZONE = ZoneInfo("Asia/Colombo")


def now_local() -> datetime:
    """Get current datetime in Sri Lanka timezone."""
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    """Get today's date in Sri Lanka timezone."""
    return now_local().date()


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
