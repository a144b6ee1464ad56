"""
Timestamp helpers. Supabase returns ISO-8601 strings; the health engine
works on timezone-aware datetimes.
"""

from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Optional, Union

TimestampLike = Union[str, datetime, date]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: TimestampLike) -> datetime:
    """
    Convert an ISO string, date or datetime to an aware UTC datetime.

    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Injected clock value, or the current UTC time."""
    return parse_timestamp(now) if now is not None else utc_now()
