"""
Datetime utility functions for handling timezone-aware datetimes.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Return the current datetime in UTC timezone.

    Use this instead of ``datetime.now(timezone.utc)`` so tests can patch
    the clock in one place.

    Returns:
        A timezone-aware datetime object representing the current time in UTC.
    """
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Ensure a datetime object is timezone-aware (UTC).
    SQLite returns timezone-naive datetimes even when stored as timezone-aware.

    Args:
        dt: The datetime to ensure is timezone-aware

    Returns:
        A timezone-aware datetime object in UTC

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant ``days`` whole days before ``now`` (default: utc_now())."""
    reference = now if now is not None else utc_now()
    try:
        return reference - timedelta(seconds=days * 86400)
    except OverflowError:
        # Further back than datetime can represent
        return datetime.min.replace(tzinfo=timezone.utc)
