"""
Habit Routes - Endpoints for habit management
The caller's identity comes from the X-User-Id header; verifying it is left
to whatever sits in front of this service.
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Response

from streakkeeper.core.constants import OWNER_HEADER
from streakkeeper.core.dependencies import get_habit_service
from streakkeeper.core.exceptions import (
    ConfirmationWindowClosedError,
    DatabaseError,
    HabitNotFoundError,
    InvalidHabitDataError,
    InvalidKindOperationError,
    UncleanDayError
)
from streakkeeper.models.requests import (
    CompleteDailyTaskRequest,
    ConfirmCleanDayRequest,
    CreateHabitRequest,
    LogViolationRequest
)
from streakkeeper.services.habits.service import HabitService

router = APIRouter(prefix="/habits", tags=["habits"])


def get_owner_id(x_user_id: str = Header(..., alias=OWNER_HEADER, min_length=1)) -> str:
    """Identity of the caller, threaded into every service call"""
    return x_user_id


@router.get("")
async def list_habits(owner_id: str = Depends(get_owner_id),
                      service: HabitService = Depends(get_habit_service)):
    """Get all of the caller's habits with today's status"""
    try:
        return service.list_habits(owner_id)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/window")
async def get_confirmation_window(service: HabitService = Depends(get_habit_service)):
    """Get the confirmation window state and countdowns"""
    return service.window_state()


@router.post("", status_code=201)
async def create_habit(request: CreateHabitRequest,
                       owner_id: str = Depends(get_owner_id),
                       service: HabitService = Depends(get_habit_service)):
    """Create a build or avoid habit"""
    try:
        return service.create_habit(
            owner_id,
            request.name,
            request.kind,
            base_task_value=request.base_task_value,
            unit=request.unit
        )
    except InvalidHabitDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{habit_id}")
async def get_habit(habit_id: int,
                    owner_id: str = Depends(get_owner_id),
                    service: HabitService = Depends(get_habit_service)):
    """Get one habit with today's status"""
    try:
        return service.get_habit(owner_id, habit_id)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{habit_id}", status_code=204)
async def delete_habit(habit_id: int,
                       owner_id: str = Depends(get_owner_id),
                       service: HabitService = Depends(get_habit_service)):
    """Delete a habit with all of its history"""
    try:
        service.delete_habit(owner_id, habit_id)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(status_code=204)


@router.post("/{habit_id}/events", status_code=201)
async def log_violation(habit_id: int,
                        request: LogViolationRequest,
                        owner_id: str = Depends(get_owner_id),
                        service: HabitService = Depends(get_habit_service)):
    """Log a violation of an avoid habit"""
    try:
        return service.log_violation(owner_id, habit_id, request.notes)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidKindOperationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{habit_id}/clean-day")
async def confirm_clean_day(habit_id: int,
                            request: ConfirmCleanDayRequest,
                            owner_id: str = Depends(get_owner_id),
                            service: HabitService = Depends(get_habit_service)):
    """Confirm a day without violations for an avoid habit"""
    try:
        result = service.confirm_clean_day(owner_id, habit_id, request.date)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidHabitDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (InvalidKindOperationError, UncleanDayError, ConfirmationWindowClosedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))

    message = "Clean day already confirmed" if result.already_confirmed else "Clean day confirmed"
    return {"debt": result.debt, "already_confirmed": result.already_confirmed, "message": message}


@router.post("/{habit_id}/complete")
async def complete_daily_task(habit_id: int,
                              request: CompleteDailyTaskRequest,
                              owner_id: str = Depends(get_owner_id),
                              service: HabitService = Depends(get_habit_service)):
    """Mark a build habit's daily task as completed or missed"""
    try:
        return service.complete_daily_task(owner_id, habit_id, request.date, request.completed)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidHabitDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (InvalidKindOperationError, ConfirmationWindowClosedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
