"""
Datetime utility functions for handling timezone-aware datetimes.
"""
from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """
    Return the current datetime in UTC timezone.

    All server-side timestamps (attempt start, attempt completion, token
    expiry checks) go through this function so tests can patch a single
    clock.

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


def from_epoch_seconds(value: Union[int, float]) -> datetime:
    """Convert a JWT NumericDate (seconds since the epoch) to an aware UTC datetime."""
    return datetime.fromtimestamp(value, tz=timezone.utc)
