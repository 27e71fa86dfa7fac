from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value: Optional[str], tz: tzinfo) -> Optional[datetime]:
    """Parse a backend ISO-8601 timestamp into an aware datetime in ``tz``.

    Naive values are taken as UTC, which is how the backend stores them.
    """

    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(tz)


def parse_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS (the backend returns TIME columns with seconds)."""
    v = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time string: {value!r}")


def now_local(tz: tzinfo) -> datetime:
    """Current time in the library timezone."""
    return datetime.now(tz)


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """[day 00:00, next day 00:00) in ``tz``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """[first day 00:00, first day of next month 00:00) around ``now``."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor

