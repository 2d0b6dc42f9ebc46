"""Month-granularity period parsing for subscription dates."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from .errors import InvalidDateFormat

MONTH_YEAR_FORMAT = "MM-YYYY"

_MONTH_YEAR_RE = re.compile(r"([0-9]{2})-([0-9]{4})")


def parse_month_year(value: object) -> datetime:
    """Return the first instant of the ``MM-YYYY`` month in UTC.

    Raises:
        InvalidDateFormat: If ``value`` does not match the pattern or names a
            month or year outside the calendar.
    """
    if not isinstance(value, str):
        raise InvalidDateFormat(f"invalid date format, want {MONTH_YEAR_FORMAT}")
    match = _MONTH_YEAR_RE.fullmatch(value)
    if not match:
        raise InvalidDateFormat(f"invalid date format {value!r}, want {MONTH_YEAR_FORMAT}")
    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDateFormat(f"month or year out of range in {value!r}")
    return datetime(year, month, 1, tzinfo=timezone.utc)


def format_month_year(value: datetime) -> str:
    return f"{value.month:02d}-{value.year:04d}"
