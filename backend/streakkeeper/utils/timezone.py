"""
Timezone Utilities - Centralized timezone handling
The application timezone defines where one "day" ends and the next begins.
"""
from datetime import date, datetime
import pytz

from streakkeeper.core.config import settings


# Application timezone
LOCAL_TZ = pytz.timezone(settings.APP_TIMEZONE)


def get_local_tz():
    """
    Get the application timezone object

    Returns:
        pytz timezone configured by APP_TIMEZONE
    """
    return LOCAL_TZ


def get_local_now() -> datetime:
    """
    Get current datetime in the application timezone

    Returns:
        Timezone-aware datetime object
    """
    return datetime.now(LOCAL_TZ)


def get_local_today_date() -> date:
    """
    Get today's date in the application timezone

    Returns:
        date object for today
    """
    return get_local_now().date()


def to_local(ts: datetime) -> datetime:
    """
    Convert a timestamp to the application timezone.
    Naive timestamps are taken to already be local wall-clock time.

    Args:
        ts: Naive or aware datetime

    Returns:
        Timezone-aware datetime in the application timezone
    """
    if ts.tzinfo is None:
        return LOCAL_TZ.localize(ts)
    return ts.astimezone(LOCAL_TZ)


def day_bounds(day: date):
    """
    Start of `day` and start of the following day in the application timezone

    Args:
        day: Calendar day

    Returns:
        (start, end) aware datetimes; a timestamp is on `day` iff start <= ts < end
    """
    start = LOCAL_TZ.localize(datetime(day.year, day.month, day.day))
    end = LOCAL_TZ.localize(datetime.fromordinal(day.toordinal() + 1))
    return start, end


def to_local_date(ts: datetime) -> date:
    """
    Truncate a timestamp to its calendar day in the application timezone

    Args:
        ts: Naive or aware datetime

    Returns:
        The local calendar date of the timestamp
    """
    return to_local(ts).date()
