class HabitError(Exception):
    """Base class for errors raised by the habit core."""


class InvalidInputError(HabitError):
    """Rejected before mutation: empty title, malformed date, bad frequency."""


class HabitNotFoundError(HabitError):
    def __init__(self, habit_id: str):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id


class PersistenceError(HabitError):
    """A call to the storage backend failed. In-memory state has been rolled back."""
