"""
Date helpers.

Timestamps are stored as naive UTC datetimes in both stores, so anything
coming in with a timezone is converted before it is compared or saved.
On the way out they are serialized with an explicit UTC offset.
"""

from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 3600


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative if end is earlier)."""
    delta = as_naive_utc(end) - as_naive_utc(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def as_aware_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive values are taken to be UTC already."""
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
