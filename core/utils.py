"""
Core utility functions for the monitor.
"""
from datetime import datetime, timezone

UTC = timezone.utc


def get_utc_now() -> datetime:
    """
    Get current datetime in UTC.

    Always returns a timezone-aware datetime object.
    Use this for webhook timestamps that expect UTC.
    """
    return datetime.now(UTC)
