from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

from ..core.exceptions import ValidationError

DateLike = Union[date, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_start(value: DateLike) -> date:
    """Calendar day of ``value`` (time of day truncated to midnight)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value: DateLike) -> date:
    """Monday on or before ``value``; a Sunday maps to the preceding Monday."""
    day = day_start(value)
    return day - timedelta(days=day.weekday())
