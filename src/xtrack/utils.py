"""Shared date/time and parsing helpers."""

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo

CALENDAR_DATE_FORMAT = "%Y-%m-%d"
_RFC3339 = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})", re.ASCII)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Current wall-clock time in the server's local timezone (naive)."""
    return datetime.now()


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp (offset required) into aware UTC.

    Raises:
        ValueError: if the string is not a valid RFC 3339 timestamp.
    """
    value = value.strip()
    if not _RFC3339.fullmatch(value):
        raise ValueError(f"timestamp {value!r} is not RFC 3339")
    parsed = datetime.fromisoformat(value)
    return parsed.astimezone(timezone.utc)


def parse_calendar_date(value: str) -> date:
    """Parse a YYYY-MM-DD calendar date. Raises ValueError on bad input."""
    return datetime.strptime(value.strip(), CALENDAR_DATE_FORMAT).date()


def start_of_day(day: date) -> datetime:
    """Midnight UTC at the start of ``day``."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """23:59:59 UTC on ``day``; the last second an inclusive range covers."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def day_window(now: datetime) -> tuple[datetime, datetime]:
    """[midnight, next midnight) of the calendar day ``now`` falls on, in UTC.

    Each midnight gets its own offset, so a day with a DST change is 23 or
    25 hours long. Naive ``now`` is read as the server's local time.
    """
    day = now.date()
    return _local_midnight(day, now.tzinfo), _local_midnight(day + timedelta(days=1), now.tzinfo)


def _local_midnight(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.combine(day, time.min).astimezone(timezone.utc)
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


def parse_positive_id(value: str) -> int | None:
    """Parse a path identifier; None unless it is a positive integer."""
    if not (value.isascii() and value.isdigit()):
        return None
    parsed = int(value)
    return parsed if parsed > 0 else None
