"""
Streak tracking shared by build completions and avoid clean days

apply_outcome() is the whole state machine: a success extends or restarts the
current streak, a failure resets it and closes the longest-streak record if the
broken streak held it. Not idempotent: callers apply at most one outcome per
(habit, day).
"""
from datetime import date

from streakkeeper.models.habit import StreakState
from streakkeeper.utils.dates import yesterday_of


def record_success(streak: StreakState, day: date) -> StreakState:
    """Apply a successful day to the streak"""
    if streak.last_streak_date is not None and streak.last_streak_date == yesterday_of(day):
        new_length = streak.current_length + 1
        new_start = streak.current_start_date or day
    else:
        new_length = 1
        new_start = day

    longest_start = streak.longest_start_date
    longest_end = streak.longest_end_date
    if new_length > streak.longest_length:
        # New record, still open
        longest_start = new_start
        longest_end = None

    return StreakState(
        current_length=new_length,
        current_start_date=new_start,
        longest_length=max(streak.longest_length, new_length),
        longest_start_date=longest_start,
        longest_end_date=longest_end,
        last_streak_date=day,
    )


def record_failure(streak: StreakState) -> StreakState:
    """Break the current streak; last_streak_date is kept for contiguity checks"""
    longest_end = streak.longest_end_date
    if streak.current_length > 0 and streak.current_length == streak.longest_length:
        longest_end = streak.last_streak_date

    return StreakState(
        current_length=0,
        current_start_date=None,
        longest_length=streak.longest_length,
        longest_start_date=streak.longest_start_date,
        longest_end_date=longest_end,
        last_streak_date=streak.last_streak_date,
    )


def apply_outcome(streak: StreakState, day: date, success: bool) -> StreakState:
    """
    Compute the streak state after a day's outcome

    Args:
        streak: Current streak state
        day: The day being confirmed
        success: True for a completed/clean day, False for a miss/violation

    Returns:
        New streak state (the input is not modified)
    """
    if success:
        return record_success(streak, day)
    return record_failure(streak)
