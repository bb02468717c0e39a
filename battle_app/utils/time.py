"""
Timestamp utilities for trade records and session reporting.

Wall-clock time is only used for record keeping (trade timestamps,
session completion time). Phase timing is driven entirely by the
scheduler and never reads the wall clock.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp for session records and logging.

    Args:
        ts: Timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return ts.isoformat()


def elapsed_ms(start_time: datetime, end_time: Optional[datetime] = None) -> int:
    """
    Calculate elapsed whole milliseconds between two timestamps.

    Args:
        start_time: Start timestamp
        end_time: End timestamp, defaults to now

    Returns:
        Elapsed time in milliseconds, never negative
    """
    if end_time is None:
        end_time = utc_now()

    return max(0, int((end_time - start_time).total_seconds() * 1000))
