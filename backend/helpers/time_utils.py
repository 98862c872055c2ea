"""
Time helpers.

All timestamps in the store are timezone-aware UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive datetimes coming from clients are assumed to already be UTC.

    Args:
        dt: The datetime to normalize

    Returns:
        The same instant as an aware UTC datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso8601(dt: datetime) -> str:
    """
    Format a datetime as ISO 8601 string.

    Args:
        dt: The datetime to format

    Returns:
        ISO 8601 formatted string (e.g., "2024-01-15T10:30:00Z")
    """
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
