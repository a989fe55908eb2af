from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional
from datetime import date

from core.aggregates import scheduled_events_for_range
from core.errors import PersistenceError
from core.habit_service import HabitService
from core.repository import CalendarRepository
from core.time_utils import Clock, month_bounds
from models.calendar import CalendarEvent, CalendarEventCreate
from models.user import User
from routes.auth import get_current_user
from routes.dependencies import get_calendar_repository, get_clock, get_habit_service

router = APIRouter(prefix="/calendar", tags=["Calendar"])

@router.get("/events", response_model=List[CalendarEvent])
async def get_events(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: HabitService = Depends(get_habit_service),
    repository: CalendarRepository = Depends(get_calendar_repository),
    clock: Clock = Depends(get_clock),
):
    """
    User calendar entries merged with habit occurrences for [start, end].

    Defaults to the current month. Habit occurrences are computed on the
    fly from each habit's weekly schedule and completion history.
    """
    month_start, month_end = month_bounds(clock())
    start = start or month_start
    end = end or month_end
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    if (end - start).days > 366:
        raise HTTPException(status_code=400, detail="Range is limited to one year")

    try:
        stored = await repository.list_events(service.user_id, start, end)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Could not load calendar events")
    events = stored + scheduled_events_for_range(service.list(), start, end)
    return sorted(events, key=lambda e: (e.date, e.is_habit, e.start_time or ""))

@router.post("/events", response_model=CalendarEvent, status_code=201)
async def create_event(
    event_in: CalendarEventCreate,
    current_user: User = Depends(get_current_user),
    repository: CalendarRepository = Depends(get_calendar_repository),
):
    try:
        return await repository.insert_event(str(current_user.id), event_in)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Could not save the event. Please try again.")

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    current_user: User = Depends(get_current_user),
    repository: CalendarRepository = Depends(get_calendar_repository),
):
    try:
        deleted = await repository.delete_event(str(current_user.id), event_id)
    except PersistenceError:
        raise HTTPException(status_code=503, detail="Could not delete the event. Please try again.")
    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"message": "Event deleted"}
