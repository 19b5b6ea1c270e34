from __future__ import annotations

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.errors import ValidationError

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
CLOCK_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def is_date_string(value: str | None) -> bool:
    """True when ``value`` looks like YYYY-MM-DD (format only)."""
    if not value:
        return False
    return DATE_RE.fullmatch(value) is not None


def parse_date(value: str) -> str:
    """Validate a YYYY-MM-DD calendar date and return it unchanged."""
    if not isinstance(value, str) or not is_date_string(value):
        raise ValidationError("date must be formatted YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"date {value!r} is not a valid calendar date") from exc
    return value


def parse_clock(value: str, field: str = "time") -> int:
    """Parse "HH:MM" into minutes since midnight.

    Anything that is not two in-range numeric components is rejected; it
    never silently becomes zero.
    """
    match = CLOCK_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"{field} must be formatted HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"{field} {value!r} is out of range")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_end(value: str | None) -> str | None:
    """Blank end times mean the entry is still open."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def compute_hours(time_start: str, time_end: str | None) -> float:
    """Return the decimal hours between start and end, 0 while open.

    Raises ``ValidationError`` when the end precedes the start.
    """
    start = parse_clock(time_start, "timeStart")
    if time_end is None:
        return 0.0
    end = parse_clock(time_end, "timeEnd")
    if end < start:
        raise ValidationError("timeEnd before timeStart")
    return (end - start) / 60


def current_clock(tz: str, now: datetime | None = None) -> str:
    """Wall-clock HH:MM in ``tz``."""
    moment = now or datetime.now(tz=ZoneInfo(tz))
    if moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(tz))
    return moment.strftime("%H:%M")
