"""
Pydantic request models for habit actions
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from streakkeeper.core.constants import DAY_FORMAT


def _validate_day(v: str) -> str:
    """Validate day format is YYYY-MM-DD"""
    try:
        parsed = datetime.strptime(v, DAY_FORMAT)
    except ValueError:
        raise ValueError(f"Invalid day '{v}'. Use YYYY-MM-DD")
    if parsed.strftime(DAY_FORMAT) != v:
        raise ValueError(f"Invalid day '{v}'. Use YYYY-MM-DD")
    return v


class CreateHabitRequest(BaseModel):
    """Request model for creating a habit"""
    name: str = Field(..., min_length=1, max_length=200, description="Habit name")
    kind: Literal["build", "avoid"] = Field(..., description="'build' to do daily, 'avoid' to abstain from")
    base_task_value: Optional[int] = Field(None, gt=0, description="Daily base amount (build only)")
    unit: Optional[str] = Field(None, min_length=1, max_length=50, description="Unit label, e.g. reps (build only)")

    @model_validator(mode="after")
    def check_kind_fields(self) -> "CreateHabitRequest":
        """Build habits need base_task_value and unit; avoid habits must not have them"""
        if self.kind == "build":
            if self.base_task_value is None or self.unit is None:
                raise ValueError("Build habits require base_task_value and unit")
        elif self.base_task_value is not None or self.unit is not None:
            raise ValueError("Avoid habits do not take base_task_value or unit")
        return self


class LogViolationRequest(BaseModel):
    """Request model for logging a violation of an avoid habit"""
    notes: Optional[str] = Field(None, max_length=500, description="Optional context")


class ConfirmCleanDayRequest(BaseModel):
    """Request model for confirming a clean day"""
    date: str = Field(..., description="Day in YYYY-MM-DD format")

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        return _validate_day(v)


class CompleteDailyTaskRequest(BaseModel):
    """Request model for completing or missing a build habit's daily task"""
    date: str = Field(..., description="Day in YYYY-MM-DD format")
    completed: bool = Field(..., description="True if the task was done, False if missed")

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        return _validate_day(v)
