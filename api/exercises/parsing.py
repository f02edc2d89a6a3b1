"""
Input parsing for exercise fields and log query parameters.

Dates are calendar dates (no time of day). Accepted spellings:
- ISO dates: 2024-01-05
- ISO datetimes: 2024-01-05T10:30:00Z (the date part is kept)
- the display format used in responses: Fri Jan 05 2024
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from core.errors import InvalidDate, ValidationError

# English names regardless of process locale.
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Column ranges: exercises.duration is integer, LIMIT takes a bigint.
MAX_DURATION = 2_147_483_647
MAX_LIMIT = 9_223_372_036_854_775_807
MAX_INT_DIGITS = len(str(MAX_LIMIT))

ECHO_CHARS = 40


def format_date(value: date) -> str:
    """
    Render a date like JavaScript's `Date.toDateString()`: "Mon Jan 01 2024".
    """
    return (
        f"{DAY_NAMES[value.weekday()]} {MONTH_NAMES[value.month - 1]} "
        f"{value.day:02d} {value.year:04d}"
    )


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _digits(text: str, max_len: int) -> bool:
    return 0 < len(text) <= max_len and text.isascii() and text.isdigit()


def _parse_display_date(text: str) -> date | None:
    parts = text.split()
    if len(parts) != 4:
        return None
    day_name, month_name, day, year = parts
    if day_name.title() not in DAY_NAMES or month_name.title() not in MONTH_NAMES:
        return None
    if not (_digits(day, 2) and _digits(year, 4)):
        return None
    try:
        return date(int(year), MONTH_NAMES.index(month_name.title()) + 1, int(day))
    except ValueError:
        return None


def _echo(raw: Any) -> str:
    text = raw if isinstance(raw, str) else repr(raw)
    return text if len(text) <= ECHO_CHARS else text[:ECHO_CHARS] + "..."


def parse_date(raw: str | None, *, field: str = "date") -> date | None:
    """
    Parse an optional date string. Blank input means "not given" (None).
    """
    if _blank(raw):
        return None
    text = str(raw).strip()

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text).date()
    except ValueError:
        pass

    parsed = _parse_display_date(text)
    if parsed is not None:
        return parsed

    raise InvalidDate(f"Invalid {field} format.", details={"field": field, "value": _echo(text)})


def _bounded_int(raw: Any, maximum: int) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip().lstrip("0") or "0"
        # Cap the length before int() so huge inputs never reach the conversion.
        if not _digits(text, MAX_INT_DIGITS):
            return None
        value = int(text)
    return value if 0 < value <= maximum else None


def parse_duration(raw: Any) -> int:
    value = _bounded_int(raw, MAX_DURATION)
    if value is None:
        raise ValidationError(
            "Duration must be a positive whole number of minutes.",
            details={"field": "duration", "value": _echo(raw), "max": MAX_DURATION},
        )
    return value


def parse_limit(raw: str | None) -> int | None:
    if _blank(raw):
        return None
    value = _bounded_int(raw, MAX_LIMIT)
    if value is None:
        raise ValidationError(
            "Limit must be a positive integer.",
            details={"field": "limit", "value": _echo(raw), "max": MAX_LIMIT},
        )
    return value
