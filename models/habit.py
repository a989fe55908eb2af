import datetime as dt
from pydantic import BaseModel, Field
from typing import Optional, List, Literal, get_args
from models.common import PyObjectId, new_object_id
from core.time_utils import get_current_time

HabitCategory = Literal[
    "learning",
    "mindfulness",
    "fitness",
    "health",
    "creativity",
    "productivity",
    "sleep",
    "work",
]
HABIT_CATEGORIES = get_args(HabitCategory)

class CompletionEntry(BaseModel):
    date: dt.date
    completed: bool = True

class Habit(BaseModel):
    """
    A tracked recurring activity.

    `frequency` holds weekday indices (0=Sunday..6=Saturday); empty means
    unscheduled. The derived fields (streak, best_streak,
    completions_this_week, total_completions, completed_today) are a pure
    function of `completion_history` and the current day and are only ever
    written by `core.streaks.recompute`.
    """
    id: PyObjectId = Field(default_factory=new_object_id, alias="_id")
    user_id: Optional[str] = None
    title: str = Field(..., max_length=100)
    category: HabitCategory = "productivity"
    frequency: List[int] = []
    goal_per_week: int = 3

    completion_history: List[CompletionEntry] = []

    # Derived
    streak: int = 0
    best_streak: int = 0
    completions_this_week: int = 0
    total_completions: int = 0
    completed_today: bool = False

    created_at: dt.datetime = Field(default_factory=get_current_time)

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

class HabitCreate(BaseModel):
    title: str
    category: HabitCategory = "productivity"
    frequency: List[int] = [1, 3, 5]
    goal_per_week: int = 3

class HabitDraft(BaseModel):
    """A habit proposal parsed from free text, not yet stored."""
    title: str
    category: HabitCategory
    frequency: List[int]
    goal_per_week: int

class ToggleRequest(BaseModel):
    date: Optional[dt.date] = None

class IntentRequest(BaseModel):
    text: str = Field(..., max_length=1000)

class HabitDetail(BaseModel):
    habit: Habit
    monthly_completion_rate: int
