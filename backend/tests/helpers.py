"""
Shared test helpers
"""
from datetime import date, datetime

from streakkeeper.utils.timezone import get_local_tz


def local_dt(year, month, day, hour=12, minute=0, second=0, microsecond=0) -> datetime:
    """Aware datetime in the application timezone"""
    return get_local_tz().localize(datetime(year, month, day, hour, minute, second, microsecond))


class FakeClock:
    """Callable clock whose time tests move by hand"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, day: date, hour: int = 12, minute: int = 0):
        self.now = local_dt(day.year, day.month, day.day, hour, minute)
