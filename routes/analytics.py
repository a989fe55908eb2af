from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from datetime import date

from core.aggregates import progress_summary, weekly_series
from core.habit_service import HabitService
from core.time_utils import Clock
from models.analytics import DailyProgress, ProgressSummary
from routes.dependencies import get_clock, get_habit_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])

@router.get("/weekly", response_model=List[DailyProgress])
async def get_weekly_progress(
    day: Optional[date] = Query(None, alias="date"),
    service: HabitService = Depends(get_habit_service),
    clock: Clock = Depends(get_clock),
):
    """Habits completed per day, Monday to Sunday, for the week containing `date` (default today)."""
    return weekly_series(service.list(), day or clock())

@router.get("/summary", response_model=ProgressSummary)
async def get_progress_summary(service: HabitService = Depends(get_habit_service), clock: Clock = Depends(get_clock)):
    return progress_summary(service.list(), clock())
