"""
Core Utilities.

Shared utility functions used across the package.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as a timezone-aware datetime.

    The Toggl API stores and returns every timestamp in UTC, so
    comparisons against API values must be made with aware datetimes.
    """
    return datetime.now(timezone.utc)


def to_api_timestamp(value: datetime) -> str:
    """Format a datetime the way the Toggl API expects: UTC, seconds, 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_hours_minutes(delta: timedelta) -> str:
    """Render a duration as HH:MM, clamping negative values to zero."""
    total_minutes = max(int(delta.total_seconds()) // 60, 0)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"
