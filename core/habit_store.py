from typing import Callable, Dict, Iterable, List, Optional

from core.config import settings
from core.errors import HabitNotFoundError, InvalidInputError
from core.streaks import StreakPolicy, normalize_history, recompute, toggle_completion
from core.time_utils import Clock, today as system_today
from models.habit import HABIT_CATEGORIES, Habit

class HabitStore:
    """
    In-memory, insertion-ordered mapping from habit id to Habit.

    Records are immutable pydantic models; every change goes through
    `update`, which swaps the whole record.
    """

    def __init__(self, clock: Clock = system_today, policy=None, remove_unchecked: bool = None):
        self.clock = clock
        self.policy = StreakPolicy(policy or settings.STREAK_POLICY)
        self.remove_unchecked = settings.UNCHECK_REMOVES_ENTRY if remove_unchecked is None else remove_unchecked
        self._habits: Dict[str, Habit] = {}

    def __len__(self):
        return len(self._habits)

    def __contains__(self, habit_id):
        return habit_id in self._habits

    def create(self, title: str, category: str = "productivity", frequency: Iterable[int] = (), goal_per_week: int = 3, user_id: Optional[str] = None) -> Habit:
        habit = self.build(title, category, frequency, goal_per_week, user_id)
        self._habits[habit.id] = habit
        return habit

    def build(self, title, category="productivity", frequency=(), goal_per_week=3, user_id=None) -> Habit:
        """Validates input and returns a fresh Habit without inserting it."""
        title = (title or "").strip()
        if not title:
            raise InvalidInputError("Title must not be empty")
        if len(title) > 100:
            raise InvalidInputError("Title must be at most 100 characters")
        if category not in HABIT_CATEGORIES:
            raise InvalidInputError(f"Unknown category: {category}")
        days = set(frequency or ())
        if any(not isinstance(d, int) or isinstance(d, bool) or not 0 <= d <= 6 for d in days):
            raise InvalidInputError("Frequency must only contain weekday indices 0-6")
        if not isinstance(goal_per_week, int) or not 0 <= goal_per_week <= settings.MAX_GOAL_PER_WEEK:
            raise InvalidInputError(f"goal_per_week must be between 0 and {settings.MAX_GOAL_PER_WEEK}")

        return Habit(
            user_id=user_id,
            title=title,
            category=category,
            frequency=sorted(days),
            goal_per_week=goal_per_week,
        )

    def get(self, habit_id: str) -> Optional[Habit]:
        return self._habits.get(habit_id)

    def require(self, habit_id: str) -> Habit:
        habit = self._habits.get(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def list(self) -> List[Habit]:
        return list(self._habits.values())

    def update(self, habit_id: str, mutator: Callable[[Habit], Habit]) -> Habit:
        """Applies a pure transformation to one habit. The store is untouched if it raises."""
        current = self.require(habit_id)
        updated = mutator(current)
        self._habits[habit_id] = updated
        return updated

    def replace(self, habit: Habit):
        """Puts a record back as-is, keeping its position. Used to roll back."""
        self._habits[habit.id] = habit

    def insert(self, habit: Habit) -> Habit:
        self._habits[habit.id] = habit
        return habit

    def load(self, habits: Iterable[Habit]):
        """Seeds the store from persisted records, recomputing derived fields against the clock."""
        today = self.clock()
        for habit in habits:
            habit = habit.model_copy(update={"completion_history": normalize_history(habit.completion_history)})
            self._habits[habit.id] = recompute(habit, today, self.policy)

    def toggle(self, habit_id: str, day=None) -> Habit:
        today = self.clock()
        return self.update(
            habit_id,
            lambda habit: toggle_completion(
                habit,
                day,
                today=today,
                policy=self.policy,
                remove_unchecked=self.remove_unchecked,
            ),
        )
