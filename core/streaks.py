"""
Completion toggling and derived-field math for habits.

Everything here is pure: functions take a Habit and the current day and
return a new Habit, leaving the input untouched. Persistence is the
caller's concern.
"""
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from core.errors import InvalidInputError
from core.time_utils import js_weekday, week_bounds
from models.habit import CompletionEntry, Habit

ALL_WEEKDAYS = frozenset(range(7))

class StreakPolicy(str, Enum):
    # Non-completed days break the streak only when the habit is scheduled on them
    SCHEDULED = "scheduled"
    # Any non-completed calendar day breaks the streak
    CALENDAR = "calendar"

def coerce_day(value) -> date:
    """
    Reduces a date-ish value to a calendar day.

    Accepts `date`, `datetime` (time part dropped) and ISO `YYYY-MM-DD`
    strings. Raises InvalidInputError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInputError(f"Malformed date: {value!r}")
    raise InvalidInputError(f"Malformed date: {value!r}")

def normalize_history(entries: Iterable[CompletionEntry]) -> List[CompletionEntry]:
    """One entry per day (last one wins), ascending by date."""
    by_day = {}
    for entry in entries:
        by_day[entry.date] = entry
    return [by_day[d] for d in sorted(by_day)]

def _qualifying_days(frequency, policy: StreakPolicy):
    if policy == StreakPolicy.CALENDAR or not frequency:
        return ALL_WEEKDAYS
    return frozenset(frequency)

def compute_streaks(history: List[CompletionEntry], frequency, policy=StreakPolicy.SCHEDULED) -> Tuple[int, int]:
    """
    Returns (current, best).

    Walks forward day by day from the first completion. A completed day
    extends the run; a missed day resets it only if it is a qualifying
    (scheduled) weekday. `current` is the run that ends on the most recent
    completed day.
    """
    completed = {e.date for e in history if e.completed}
    if not completed:
        return 0, 0

    qualifying = _qualifying_days(frequency, StreakPolicy(policy))
    day = min(completed)
    last = max(completed)
    run = 0
    best = 0
    while day <= last:
        if day in completed:
            run += 1
            best = max(best, run)
        elif js_weekday(day) in qualifying:
            run = 0
        day += timedelta(days=1)
    return run, best

def count_week_completions(history: List[CompletionEntry], today: date) -> int:
    monday, sunday = week_bounds(today)
    return sum(1 for e in history if e.completed and monday <= e.date <= sunday)

def recompute(habit: Habit, today: date, policy=StreakPolicy.SCHEDULED) -> Habit:
    """Returns `habit` with every derived field recomputed from its history."""
    history = habit.completion_history
    streak, best = compute_streaks(history, habit.frequency, policy)
    return habit.model_copy(update={
        "streak": streak,
        "best_streak": best,
        "completions_this_week": count_week_completions(history, today),
        "total_completions": sum(1 for e in history if e.completed),
        "completed_today": any(e.completed and e.date == today for e in history),
    })

def find_entry(habit: Habit, day: date) -> Optional[CompletionEntry]:
    for entry in habit.completion_history:
        if entry.date == day:
            return entry
    return None

def toggle_completion(
    habit: Habit,
    day=None,
    *,
    today: date,
    policy=StreakPolicy.SCHEDULED,
    remove_unchecked: bool = True,
) -> Habit:
    """
    Flips the completion state of one day and recomputes derived fields.

    - no entry for the day: a completed entry is inserted
    - completed entry: removed (or set to completed=False when
      `remove_unchecked` is off)
    - uncompleted entry: set to completed=True

    `day` defaults to `today`.
    """
    day = today if day is None else coerce_day(day)

    history = [e for e in habit.completion_history if e.date != day]
    existing = find_entry(habit, day)
    if existing is None or not existing.completed:
        history.append(CompletionEntry(date=day, completed=True))
    elif not remove_unchecked:
        history.append(CompletionEntry(date=day, completed=False))

    updated = habit.model_copy(update={"completion_history": normalize_history(history)})
    return recompute(updated, today, policy)
