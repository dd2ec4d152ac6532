"""Time helpers.

Timestamps are stored as naive UTC. "Today" is always the club's local date
(``settings.TZ``), which is what due dates and overdue counts are measured in.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from .config import settings

LOCAL_TZ = ZoneInfo(settings.TZ) if settings.TZ else None


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_now() -> datetime:
    return datetime.now(LOCAL_TZ) if LOCAL_TZ else datetime.now()


def local_today() -> date:
    return local_now().date()


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_date(value: date | datetime) -> date:
    """Collapse a timestamp to its calendar date, in local time when aware."""

    if isinstance(value, datetime):
        if value.tzinfo is not None and LOCAL_TZ:
            value = value.astimezone(LOCAL_TZ)
        return value.date()
    return value
