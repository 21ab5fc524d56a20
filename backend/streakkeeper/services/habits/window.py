"""
Confirmation window - the daily clock-hour range in which a day may be confirmed
Countdowns are for display only; double-confirmation is guarded by day keys.
"""
from datetime import datetime, timedelta
from typing import Optional

from streakkeeper.core.config import settings
from streakkeeper.core.exceptions import ConfirmationWindowClosedError
from streakkeeper.models.habit import WindowState
from streakkeeper.utils.timezone import get_local_now, get_local_tz, to_local


class ConfirmationWindow:
    """
    A [start_hour, end_hour) range of local clock hours.
    end_hour may be 24 (midnight); a start later than the end wraps past midnight.
    """

    def __init__(self, start_hour: int, end_hour: int):
        if not 0 <= start_hour <= 23:
            raise ValueError(f"start_hour must be 0-23, got {start_hour}")
        if not 1 <= end_hour <= 24:
            raise ValueError(f"end_hour must be 1-24, got {end_hour}")
        if start_hour == end_hour % 24:
            raise ValueError("Confirmation window must not be empty or span the whole day")
        self.start_hour = start_hour
        self.end_hour = end_hour

    def is_open(self, now: datetime) -> bool:
        hour = to_local(now).hour
        if self.start_hour < self.end_hour:
            return self.start_hour <= hour < self.end_hour
        return hour >= self.start_hour or hour < self.end_hour

    def _next_boundary(self, now: datetime, hour: int) -> datetime:
        """Next local wall-clock time at `hour`:00 strictly after now"""
        naive = to_local(now).replace(tzinfo=None)
        target = naive.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(hours=hour)
        if target <= naive:
            target += timedelta(days=1)
        # Wall-clock arithmetic, re-localized so DST shifts are respected
        return get_local_tz().localize(target)

    def time_until_open(self, now: datetime) -> Optional[timedelta]:
        """Time left before the window opens, or None while it is open"""
        if self.is_open(now):
            return None
        return self._next_boundary(now, self.start_hour) - to_local(now)

    def time_remaining_in_window(self, now: datetime) -> Optional[timedelta]:
        """Time left before the window closes, or None while it is closed"""
        if not self.is_open(now):
            return None
        return self._next_boundary(now, self.end_hour % 24) - to_local(now)

    def state(self, now: datetime) -> WindowState:
        until = self.time_until_open(now)
        remaining = self.time_remaining_in_window(now)
        return WindowState(
            is_open=self.is_open(now),
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            seconds_until_open=int(until.total_seconds()) if until is not None else None,
            seconds_remaining=int(remaining.total_seconds()) if remaining is not None else None,
        )


# Process-wide window built from settings
confirmation_window = ConfirmationWindow(
    settings.CONFIRMATION_WINDOW_START_HOUR,
    settings.CONFIRMATION_WINDOW_END_HOUR
)


def is_open(now: Optional[datetime] = None) -> bool:
    return confirmation_window.is_open(now or get_local_now())


def window_state(now: Optional[datetime] = None) -> WindowState:
    return confirmation_window.state(now or get_local_now())


def ensure_open(now: Optional[datetime] = None) -> None:
    """
    Reject confirmations outside the window when ENFORCE_CONFIRMATION_WINDOW is set

    Raises:
        ConfirmationWindowClosedError: If enforcement is on and the window is closed
    """
    if not settings.ENFORCE_CONFIRMATION_WINDOW:
        return
    if not is_open(now):
        raise ConfirmationWindowClosedError(
            f"Confirmations are only accepted between "
            f"{confirmation_window.start_hour:02d}:00 and {confirmation_window.end_hour % 24:02d}:00"
        )
