"""
Cross-habit summaries: weekly chart series, completion rates, category
breakdowns and calendar projections. All functions are read-only over the
habits they receive.
"""
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from core.config import settings
from core.time_utils import DAY_NAMES, iter_days, js_weekday, month_bounds, week_bounds
from models.analytics import CategorySummary, DailyProgress, ProgressSummary
from models.calendar import CalendarEvent
from models.habit import Habit

def habit_color(category: str) -> str:
    return settings.HABIT_CATEGORY_COLORS.get(category, settings.DEFAULT_EVENT_COLOR)

def _completed_days(habit: Habit):
    return {e.date for e in habit.completion_history if e.completed}

def weekly_series(habits: Sequence[Habit], reference_date: date) -> List[DailyProgress]:
    """Completed-habit count for each day of the Monday-first week containing `reference_date`."""
    monday, _ = week_bounds(reference_date)
    completed_sets = [_completed_days(h) for h in habits]
    series = []
    for offset, name in enumerate(DAY_NAMES):
        day = monday + timedelta(days=offset)
        series.append(DailyProgress(
            day=name,
            date=day,
            completed=sum(1 for days in completed_sets if day in days),
        ))
    return series

def completion_rate(habits: Sequence[Habit]) -> int:
    """Weekly completions over weekly goals, as a rounded percentage. 0 when there is no goal."""
    goal = sum(h.goal_per_week for h in habits)
    if goal == 0:
        return 0
    done = sum(h.completions_this_week for h in habits)
    return round(done / goal * 100)

def _goal_ratio(habit: Habit) -> float:
    if habit.goal_per_week <= 0:
        return 0.0
    return habit.completions_this_week / habit.goal_per_week

def leading_habit(habits: Sequence[Habit]) -> Optional[Habit]:
    if not habits:
        return None
    # max() keeps the first of equal elements
    return max(habits, key=_goal_ratio)

def category_breakdown(habits: Sequence[Habit]) -> Dict[str, CategorySummary]:
    breakdown: Dict[str, CategorySummary] = {}
    for habit in habits:
        summary = breakdown.setdefault(habit.category, CategorySummary())
        summary.count += 1
        summary.completions_this_week += habit.completions_this_week
    return breakdown

def scheduled_events_for_range(habits: Sequence[Habit], start: date, end: date) -> List[CalendarEvent]:
    """
    Projects habits onto the calendar for every day in [start, end].

    One event per (habit, day) where the day's weekday is in the habit's
    frequency, plus one for any completed day that falls outside the
    schedule. Nothing is written back into the habits.
    """
    events = []
    for habit in habits:
        completed = _completed_days(habit)
        scheduled = set(habit.frequency)
        for day in iter_days(start, end):
            done = day in completed
            if not done and js_weekday(day) not in scheduled:
                continue
            events.append(CalendarEvent(
                id=f"habit-{habit.id}-{day.isoformat()}",
                title=habit.title,
                date=day,
                description=f"{'Completed' if done else 'Scheduled'} habit: {habit.title}",
                color=habit_color(habit.category),
                is_habit=True,
                completed=done,
            ))
    return events

def best_day(habits: Sequence[Habit], reference_date: date) -> Optional[str]:
    """Name of the weekday with the most completions this week, None if nothing was completed."""
    series = weekly_series(habits, reference_date)
    top = max(series, key=lambda point: point.completed)
    return top.day if top.completed > 0 else None

def monthly_completion_rate(habit: Habit, today: date) -> int:
    first, last = month_bounds(today)
    done = sum(1 for d in _completed_days(habit) if first <= d <= last)
    return round(done / last.day * 100)

def progress_summary(habits: Sequence[Habit], today: date) -> ProgressSummary:
    leader = leading_habit(habits)
    return ProgressSummary(
        total_habits=len(habits),
        completed_this_week=sum(h.completions_this_week for h in habits),
        weekly_goal=sum(h.goal_per_week for h in habits),
        completion_rate=completion_rate(habits),
        best_day=best_day(habits, today),
        current_streak=max((h.streak for h in habits), default=0),
        leading_habit_id=leader.id if leader else None,
        categories=category_breakdown(habits),
        weekly=weekly_series(habits, today),
    )
