import datetime as dt
from pydantic import BaseModel
from typing import Dict, List, Optional

class DailyProgress(BaseModel):
    day: str # 'Mon'..'Sun'
    date: dt.date
    completed: int = 0

class CategorySummary(BaseModel):
    count: int = 0
    completions_this_week: int = 0

class ProgressSummary(BaseModel):
    total_habits: int
    completed_this_week: int
    weekly_goal: int
    completion_rate: int # percent
    best_day: Optional[str] = None
    current_streak: int = 0
    leading_habit_id: Optional[str] = None
    categories: Dict[str, CategorySummary] = {}
    weekly: List[DailyProgress] = []
