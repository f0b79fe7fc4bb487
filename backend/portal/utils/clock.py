"""
Server clock. Timestamps are stored as naive UTC datetimes.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current server time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
