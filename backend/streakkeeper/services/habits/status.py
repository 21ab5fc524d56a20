"""
Habit aggregator - merges stored habit facts with today's derived figures
Pure read: nothing here writes.
"""
from datetime import date
from typing import Iterable, Optional

from streakkeeper.models.habit import (
    AvoidHabit,
    AvoidHabitStatus,
    BuildHabit,
    BuildHabitStatus,
    DailyStatus,
    DebtLedgerEntry,
    HabitEvent,
)
from . import debt, penalties


def build_habit_status(habit: BuildHabit, statuses: Iterable[DailyStatus], today: date,
                       stacking: Optional[str] = None) -> BuildHabitStatus:
    """
    Read-model for a build habit

    Args:
        habit: The build habit
        statuses: Its daily status history
        today: Day to evaluate
        stacking: Optional penalty stacking override

    Returns:
        BuildHabitStatus with penalty, required amount and today's outcome
    """
    statuses = list(statuses)
    level = penalties.penalty_for_day(habit.created_date, today, statuses)
    today_status = next((s for s in statuses if s.date == today), None)

    return BuildHabitStatus(
        **habit.model_dump(),
        penalty_level=level,
        required_task_value=penalties.required_task_value(habit.base_task_value, level, stacking),
        today_completed=today_status.completed if today_status else False,
        today_missed=today_status is not None and not today_status.completed,
    )


def avoid_habit_status(habit: AvoidHabit, ledger: Optional[DebtLedgerEntry],
                       events: Iterable[HabitEvent], today: date) -> AvoidHabitStatus:
    """
    Read-model for an avoid habit

    Args:
        habit: The avoid habit
        ledger: Its debt ledger entry (None is treated as zero debt)
        events: Its violation log
        today: Day to evaluate

    Returns:
        AvoidHabitStatus with debt, today's event count and confirmation flag
    """
    return AvoidHabitStatus(
        **habit.model_dump(),
        debt=ledger.debt_count if ledger else 0,
        today_event_count=debt.count_events_on_day(events, today),
        today_confirmed=ledger is not None and ledger.last_clean_date == today,
    )
