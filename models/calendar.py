import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional

class CalendarEvent(BaseModel):
    """
    A calendar entry as displayed.

    User-created events come from the `calendar_events` collection. Habit
    events (`is_habit=True`) are projected from habit schedules on the fly
    and are never stored.
    """
    id: str
    title: str
    date: dt.date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    color: str
    is_habit: bool = False
    completed: bool = False

class CalendarEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    date: dt.date
    start_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    end_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    description: Optional[str] = None
    color: str = "#4f46e5"
