"""
Pydantic models for habits and their stored facts
"""
from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from streakkeeper.utils.timezone import to_local_date


class StreakState(BaseModel):
    """Streak bookkeeping embedded in every habit"""
    model_config = ConfigDict(frozen=True)

    current_length: int = Field(0, ge=0)
    current_start_date: Optional[date] = None
    longest_length: int = Field(0, ge=0)
    longest_start_date: Optional[date] = None
    longest_end_date: Optional[date] = None
    last_streak_date: Optional[date] = Field(None, description="Last day that contributed to any streak")

    @model_validator(mode="after")
    def check_invariants(self) -> "StreakState":
        if self.longest_length < self.current_length:
            raise ValueError("longest_length must be >= current_length")
        if (self.current_length > 0) != (self.current_start_date is not None):
            raise ValueError("current_start_date must be set exactly when current_length > 0")
        if (self.longest_end_date is not None and self.longest_start_date is not None
                and self.longest_end_date < self.longest_start_date):
            raise ValueError("longest_end_date must not precede longest_start_date")
        return self


class HabitBase(BaseModel):
    """Fields shared by both habit kinds"""
    model_config = ConfigDict(extra="forbid")

    id: int
    owner_id: str
    name: str = Field(..., min_length=1, max_length=200)
    created_at: datetime
    streak: StreakState = Field(default_factory=StreakState)

    @property
    def created_date(self) -> date:
        """Creation day in the application timezone"""
        return to_local_date(self.created_at)


class BuildHabit(HabitBase):
    """A habit to do every day; missed days stack penalties"""
    kind: Literal["build"] = "build"
    base_task_value: int = Field(..., gt=0)
    unit: str = Field(..., min_length=1, max_length=50)


class AvoidHabit(HabitBase):
    """A habit to abstain from; violations accumulate debt"""
    kind: Literal["avoid"] = "avoid"


Habit = Annotated[Union[BuildHabit, AvoidHabit], Field(discriminator="kind")]


class DailyStatus(BaseModel):
    """One build-habit outcome per (habit, day)"""
    habit_id: int
    date: date
    completed: bool
    penalty_level: int = Field(0, ge=0, description="Penalty level in force when recorded")
    auto_processed: bool = Field(False, description="Written by the day roll-over job")


class HabitEvent(BaseModel):
    """A single logged violation of an avoid habit"""
    id: Optional[int] = Field(None, description="Assigned by the repository on insert")
    habit_id: int
    timestamp: datetime
    notes: Optional[str] = None


class DebtLedgerEntry(BaseModel):
    """Outstanding debt of an avoid habit"""
    habit_id: int
    debt_count: int = Field(0, ge=0)
    last_clean_date: Optional[date] = None


# ============================================================================
# READ MODELS
# ============================================================================

class BuildHabitStatus(BuildHabit):
    """Build habit with today's derived figures"""
    penalty_level: int = 0
    required_task_value: int = 0
    today_completed: bool = False
    today_missed: bool = False


class AvoidHabitStatus(AvoidHabit):
    """Avoid habit with today's derived figures"""
    debt: int = 0
    today_event_count: int = 0
    today_confirmed: bool = False


HabitWithStatus = Annotated[Union[BuildHabitStatus, AvoidHabitStatus], Field(discriminator="kind")]


# ============================================================================
# ACTION RESULTS
# ============================================================================

class CleanDayResult(BaseModel):
    """Result of a clean-day confirmation"""
    debt: int
    already_confirmed: bool = False


class WindowState(BaseModel):
    """Confirmation window snapshot for display"""
    is_open: bool
    start_hour: int
    end_hour: int
    seconds_until_open: Optional[int] = None
    seconds_remaining: Optional[int] = None
