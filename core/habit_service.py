import logging
from typing import Iterable, List

from core.errors import PersistenceError
from core.habit_store import HabitStore
from core.repository import HabitRepository
from models.habit import Habit

logger = logging.getLogger(__name__)

class HabitService:
    """
    One user's habits: the in-memory store mirrored to a storage backend.

    Toggles are two-phase. The new state is applied to the store first,
    then sent to the repository; if the repository fails the previous
    record is put back and PersistenceError propagates to the caller.
    """

    def __init__(self, user_id: str, repository: HabitRepository, store: HabitStore):
        self.user_id = user_id
        self.repository = repository
        self.store = store

    async def load(self) -> "HabitService":
        self.store.load(await self.repository.list_habits(self.user_id))
        return self

    def list(self) -> List[Habit]:
        return self.store.list()

    def get(self, habit_id: str) -> Habit:
        return self.store.require(habit_id)

    async def create(self, title: str, category: str, frequency: Iterable[int], goal_per_week: int) -> Habit:
        habit = self.store.build(title, category, frequency, goal_per_week, user_id=self.user_id)
        await self.repository.insert_habit(habit)
        logger.info("Created habit %s for user %s", habit.id, self.user_id)
        return self.store.insert(habit)

    async def toggle(self, habit_id: str, day=None) -> Habit:
        previous = self.store.require(habit_id)
        updated = self.store.toggle(habit_id, day)

        changed = [e for e in updated.completion_history if e not in previous.completion_history]
        try:
            if changed:
                entry = changed[0]
                if entry.completed:
                    await self.repository.insert_completion(self.user_id, habit_id, entry.date)
                else:
                    await self.repository.set_completion(self.user_id, habit_id, entry.date, False)
            else:
                # Entry removed
                removed = next(e for e in previous.completion_history if e not in updated.completion_history)
                await self.repository.delete_completion(self.user_id, habit_id, removed.date)
        except PersistenceError:
            logger.warning("Rolling back toggle of habit %s for user %s", habit_id, self.user_id)
            self.store.replace(previous)
            raise

        try:
            await self.repository.update_derived(updated)
        except PersistenceError:
            # Derived fields are recomputed on every load; the completion itself is saved
            logger.warning("Could not refresh stored derived fields of habit %s", habit_id)
        return updated
