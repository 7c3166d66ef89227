"""
Time helpers. Timestamps are stored as timezone-aware UTC datetimes.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)
