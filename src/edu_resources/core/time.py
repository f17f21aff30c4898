from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return a timezone-aware UTC datetime.

    Python 3.14+ deprecates datetime.utcnow(); use timezone-aware timestamps instead.
    """

    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` calendar months."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"
