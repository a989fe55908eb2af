from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional

from core.aggregates import monthly_completion_rate
from core.errors import HabitNotFoundError, InvalidInputError, PersistenceError
from core.habit_service import HabitService
from core.intent import parse_habit_intent
from core.time_utils import Clock
from models.habit import Habit, HabitCreate, HabitDetail, HabitDraft, IntentRequest, ToggleRequest
from routes.dependencies import get_clock, get_habit_service

router = APIRouter(prefix="/habits", tags=["Habits"])

SAVE_FAILED_MESSAGE = "Could not save your change. Please try again."

@router.post("/", response_model=Habit, status_code=201)
async def create_habit(habit_in: HabitCreate, service: HabitService = Depends(get_habit_service)):
    try:
        return await service.create(habit_in.title, habit_in.category, habit_in.frequency, habit_in.goal_per_week)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=503, detail=SAVE_FAILED_MESSAGE)

@router.get("/", response_model=List[Habit])
async def get_habits(service: HabitService = Depends(get_habit_service)):
    return service.list()

@router.post("/parse", response_model=Optional[HabitDraft])
async def parse_habit(request: IntentRequest):
    """Suggests a habit from a chat message; null when the text doesn't describe one."""
    return parse_habit_intent(request.text)

@router.get("/{habit_id}", response_model=HabitDetail)
async def get_habit(habit_id: str, service: HabitService = Depends(get_habit_service), clock: Clock = Depends(get_clock)):
    try:
        habit = service.get(habit_id)
    except HabitNotFoundError:
        raise HTTPException(status_code=404, detail="Habit not found")
    return HabitDetail(habit=habit, monthly_completion_rate=monthly_completion_rate(habit, clock()))

@router.post("/{habit_id}/toggle", response_model=Habit)
async def toggle_habit(habit_id: str, toggle: Optional[ToggleRequest] = None, service: HabitService = Depends(get_habit_service)):
    """
    Flip one day's completion (today when no date is given).

    The change is applied locally, then saved; a failed save restores the
    previous state and answers 503.
    """
    day = toggle.date if toggle else None
    try:
        return await service.toggle(habit_id, day)
    except HabitNotFoundError:
        raise HTTPException(status_code=404, detail="Habit not found")
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=503, detail=SAVE_FAILED_MESSAGE)
