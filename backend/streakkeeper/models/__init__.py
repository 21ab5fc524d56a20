"""
Pydantic models for the application
"""
from streakkeeper.models.habit import (
    StreakState,
    BuildHabit,
    AvoidHabit,
    Habit,
    DailyStatus,
    HabitEvent,
    DebtLedgerEntry,
    BuildHabitStatus,
    AvoidHabitStatus,
    HabitWithStatus,
    CleanDayResult,
    WindowState
)
from streakkeeper.models.requests import (
    CreateHabitRequest,
    LogViolationRequest,
    ConfirmCleanDayRequest,
    CompleteDailyTaskRequest
)

__all__ = [
    "StreakState",
    "BuildHabit",
    "AvoidHabit",
    "Habit",
    "DailyStatus",
    "HabitEvent",
    "DebtLedgerEntry",
    "BuildHabitStatus",
    "AvoidHabitStatus",
    "HabitWithStatus",
    "CleanDayResult",
    "WindowState",
    "CreateHabitRequest",
    "LogViolationRequest",
    "ConfirmCleanDayRequest",
    "CompleteDailyTaskRequest"
]
