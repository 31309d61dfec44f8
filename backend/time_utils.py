"""
Time utilities for the Task Tracker application.

This module provides a single source of truth for time operations,
ensuring consistency across all endpoints and preventing clock drift issues.
"""

from datetime import datetime, timezone, timedelta
from typing import Optional

DUE_THIS_WEEK_DAYS = 7


def utc_now() -> datetime:
    """
    Get current UTC time.
    Single source of truth for "now" throughout the application.

    Returns:
        timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise a datetime to timezone-aware UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def due_this_week_window(now: datetime) -> tuple[datetime, datetime]:
    """
    Calculate the inclusive [now, now + 7 days] window used by the dashboard.

    Args:
        now: Reference instant

    Returns:
        Tuple of (start, end) as timezone-aware datetimes
    """
    start = as_utc(now)
    return start, start + timedelta(days=DUE_THIS_WEEK_DAYS)
