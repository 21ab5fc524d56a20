"""
Calendar utilities - day-granularity date arithmetic
"""
from datetime import date, datetime, timedelta
from typing import Union

from streakkeeper.core.constants import DAY_FORMAT
from streakkeeper.core.exceptions import InvalidHabitDataError
from streakkeeper.utils.timezone import to_local_date


def as_day(value: Union[date, datetime]) -> date:
    """Drop any time-of-day component, converting timestamps to the local day"""
    if isinstance(value, datetime):
        return to_local_date(value)
    return value


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return (as_day(end) - as_day(start)).days


def yesterday_of(day: date) -> date:
    return day - timedelta(days=1)


def format_day(day: date) -> str:
    """Format a day as YYYY-MM-DD"""
    return day.strftime(DAY_FORMAT)


def parse_day(value: str) -> date:
    """
    Parse a YYYY-MM-DD day key

    Args:
        value: Day string

    Returns:
        The parsed date

    Raises:
        InvalidHabitDataError: If the string is not a valid day
    """
    try:
        return datetime.strptime(value, DAY_FORMAT).date()
    except (TypeError, ValueError):
        raise InvalidHabitDataError(f"Invalid day '{value}'. Use YYYY-MM-DD")
