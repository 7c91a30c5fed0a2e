"""
UTC datetime utilities for consistent timezone handling.

Upload timestamps are stored as epoch milliseconds; these helpers are
the only place that converts between the two representations.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def now_millis() -> int:
    """Return the current time as a millisecond Unix timestamp."""
    return int(utc_now().timestamp() * 1000)


def from_timestamp_ms_utc(timestamp_ms: int) -> datetime:
    """
    Create a UTC-aware datetime from a millisecond Unix timestamp.

    Args:
        timestamp_ms: Unix timestamp in milliseconds

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def month_partition(when: datetime | None = None) -> str:
    """Return the YYYY-MM folder name used for date-partitioned storage."""
    return (when or utc_now()).strftime("%Y-%m")
