# File: src/models/common

import re
from datetime import date, datetime
from typing import Union

DAY_FORMAT = "%Y-%m-%d"
_DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DayLike = Union[date, str]


def parse_day(value: DayLike) -> date:
    """
    Parse a calendar day.

    Accepts a ``date`` (a ``datetime`` is truncated to its date) or a strict
    ``YYYY-MM-DD`` string. Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DAY_PATTERN.match(value.strip()):
        raise ValueError(f"Invalid calendar date: {value!r}")
    return datetime.strptime(value.strip(), DAY_FORMAT).date()


def format_day(value: DayLike) -> str:
    """Format a calendar day as YYYY-MM-DD."""
    return parse_day(value).strftime(DAY_FORMAT)


def is_valid_day(value: object) -> bool:
    """Check whether a value is a well-formed YYYY-MM-DD calendar date."""
    try:
        parse_day(value)  # type: ignore[arg-type]
        return True
    except ValueError:
        return False


def is_valid_time(value: object) -> bool:
    """Check whether a value is an HH:MM string."""
    return isinstance(value, str) and bool(_TIME_PATTERN.match(value))


def js_weekday(day: date) -> int:
    """Weekday index with 0 = Sunday, 6 = Saturday."""
    return (day.weekday() + 1) % 7
