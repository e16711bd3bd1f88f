"""
Time and date utilities for maintenance analytics.

Key concepts:
  - Lenient parsing: store timestamps are raw strings from several sources
    (SQLite, the remote database, hand-entered seed data). ``parse_timestamp``
    accepts ISO dates and datetimes and returns ``None`` for anything it
    cannot read, so a malformed field contributes nothing instead of raising.
  - All parsed values are timezone-aware UTC. Naive inputs are taken to be UTC.
  - Calendar windows: "the last 6 months" means calendar months, not 180 days.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp into an aware UTC datetime, or ``None``.

    Accepts ``datetime``, ``date`` (midnight UTC), and strings in ISO 8601
    date or datetime form, including a trailing ``Z``.

    Args:
        value: Raw value from a model field.

    Returns:
        Aware UTC ``datetime``, or ``None`` if missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(parsed)


def parse_year(value: Any) -> Optional[int]:
    """Return the calendar year of a stored date, or ``None`` if unparseable."""
    parsed = parse_timestamp(value)
    return parsed.year if parsed is not None else None


def months_before(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` back by whole calendar months.

    The day of month is clamped to the length of the target month, so
    31 August minus 6 months is 28/29 February.

    Args:
        moment: Reference datetime.
        months: Number of calendar months to subtract (may be 0).

    Returns:
        Datetime with the same time-of-day and tzinfo as ``moment``.
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}.")
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def duration_hours(start: Any, end: Any) -> Optional[float]:
    """Return the hours between two stored timestamps, or ``None``.

    ``None`` when either side is missing/unparseable or ``end`` is not
    strictly after ``start`` ("duration unknown").
    """
    start_dt = parse_timestamp(start)
    end_dt = parse_timestamp(end)
    if start_dt is None or end_dt is None or end_dt <= start_dt:
        return None
    return (end_dt - start_dt).total_seconds() / 3600.0


def iso_utc(moment: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SSZ`` (UTC)."""
    return ensure_utc(moment).strftime("%Y-%m-%dT%H:%M:%SZ")
