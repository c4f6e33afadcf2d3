"""
Calendar-day helpers.

Day-keyed records (journal entries, day summaries) and task schedules are
compared at day granularity. Everything that is used as a key or index
probe goes through to_day_key() first so a stray time-of-day or timezone
never breaks equality.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

DAY_FORMAT = "%Y-%m-%d"

DayLike = Union[date, datetime, str]


def to_day(value: DayLike) -> date:
    """
    Normalise a date, datetime or string to a calendar day.

    Datetimes keep their own wall-clock day; the time component is
    dropped. Strings may be a bare YYYY-MM-DD or any ISO timestamp.

    Raises:
        ValueError: if a string cannot be parsed
        TypeError: for unsupported types
    """
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text, DAY_FORMAT).date()
        except ValueError:
            pass
        try:
            return date_parser.isoparse(text).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid calendar day: {value!r}") from e
    raise TypeError(f"Cannot convert {type(value).__name__} to a calendar day")


def to_day_key(value: DayLike) -> str:
    """Normalise to the YYYY-MM-DD string used as storage key"""
    return to_day(value).strftime(DAY_FORMAT)


def parse_optional_day(value: Optional[DayLike]) -> Optional[date]:
    """to_day() that passes None through"""
    if value is None or value == "":
        return None
    return to_day(value)


def utc_now() -> datetime:
    """Current instant, timezone-aware UTC"""
    return datetime.now(timezone.utc)
