"""Day-window checks used to bucket chats by how recently they were active.

Two kinds of window are mixed:

- ``days == 0`` means "the same calendar day as now" (year/month/day equal).
- ``days > 0`` means a rolling window of ``days * 24h`` ending at now.

So 18:00 yesterday is within the last 1 day, while 23:59 yesterday is
not within the last 0 days. Timestamps later than now never match any window.

All functions expect timezone-aware datetimes. Values arriving as ISO-8601
strings must go through :func:`parse_timestamp` first.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class RecencyBucket(str, Enum):
    """Listing groups, closest first."""

    TODAY = "today"
    PREVIOUS_7_DAYS = "previous7Days"
    PREVIOUS_30_DAYS = "previous30Days"
    OLDER = "older"


# (min_days_ago, max_days_ago); None means "older than min_days_ago"
BUCKET_RANGES: Dict[RecencyBucket, tuple[int, Optional[int]]] = {
    RecencyBucket.TODAY: (0, 0),
    RecencyBucket.PREVIOUS_7_DAYS: (1, 7),
    RecencyBucket.PREVIOUS_30_DAYS: (8, 30),
    RecencyBucket.OLDER: (30, None),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware datetime (naive input is UTC)."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_within_last_days(
    timestamp: datetime, days: int, now: Optional[datetime] = None
) -> bool:
    """Return True if ``timestamp`` falls inside the last ``days`` days."""
    current = now or utc_now()

    if timestamp > current:
        return False

    if days == 0:
        local = timestamp.astimezone(current.tzinfo)
        return local.date() == current.date()

    return current - timestamp <= timedelta(days=days)


def is_between_days_ago(
    timestamp: datetime,
    min_days_ago: int,
    max_days_ago: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Return True if ``timestamp`` is between ``min_days_ago`` and ``max_days_ago``.

    Both bounds are inclusive. Without ``max_days_ago`` the check becomes
    "older than ``min_days_ago``". ``(0, 0)`` is today by calendar day.
    """
    if max_days_ago is None:
        return not is_within_last_days(timestamp, min_days_ago, now=now)

    if min_days_ago == max_days_ago == 0:
        return is_within_last_days(timestamp, 0, now=now)

    return is_within_last_days(
        timestamp, max_days_ago, now=now
    ) and not is_within_last_days(timestamp, min_days_ago - 1, now=now)


def bucket_for(
    timestamp: datetime, now: Optional[datetime] = None
) -> Optional[RecencyBucket]:
    """Classify ``timestamp`` into the first matching bucket.

    Future timestamps belong to no bucket.
    """
    current = now or utc_now()
    if timestamp > current:
        return None
    for bucket, (min_days, max_days) in BUCKET_RANGES.items():
        if is_between_days_ago(timestamp, min_days, max_days, now=current):
            return bucket
    return None


def group_by_recency(
    items: Iterable[T],
    *,
    key,
    now: Optional[datetime] = None,
) -> Dict[RecencyBucket, List[T]]:
    """Group ``items`` by the bucket of ``key(item)``, keeping input order."""
    current = now or utc_now()
    groups: Dict[RecencyBucket, List[T]] = {bucket: [] for bucket in RecencyBucket}
    for item in items:
        bucket = bucket_for(key(item), now=current)
        if bucket is not None:
            groups[bucket].append(item)
    return groups
