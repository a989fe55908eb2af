from datetime import date

import pytest

from core.errors import PersistenceError
from core.habit_store import HabitStore
from core.repository import CalendarRepository, HabitRepository
from models.calendar import CalendarEvent
from models.habit import CompletionEntry, Habit

# Friday; its ISO week runs Mon 2024-05-13 .. Sun 2024-05-19
TODAY = date(2024, 5, 17)
MONDAY = date(2024, 5, 13)
TUESDAY = date(2024, 5, 14)
WEDNESDAY = date(2024, 5, 15)
THURSDAY = date(2024, 5, 16)

USER_ID = "665f1c2e8a1b2c3d4e5f6a7b"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "api: HTTP tests against the FastAPI app with in-memory collaborators")


class FakeHabitRepository(HabitRepository):
    """In-memory stand-in for the Mongo repository. Set `fail` to make every call raise."""

    def __init__(self):
        self.habits = {}
        self.completions = {}
        self.calls = []
        self.fail = False
        self.fail_derived = False

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail:
            raise PersistenceError(f"{name} failed")

    async def insert_habit(self, habit):
        self._record("insert_habit", habit.id)
        self.habits[habit.id] = habit.model_copy(update={"completion_history": []})

    async def list_habits(self, user_id):
        self._record("list_habits", user_id)
        result = []
        for habit in self.habits.values():
            if habit.user_id != user_id:
                continue
            history = [
                CompletionEntry(date=day, completed=completed)
                for (habit_id, day), completed in sorted(self.completions.items())
                if habit_id == habit.id
            ]
            result.append(habit.model_copy(update={"completion_history": history}))
        return result

    async def insert_completion(self, user_id, habit_id, day):
        self._record("insert_completion", habit_id, day)
        self.completions[(habit_id, day)] = True

    async def delete_completion(self, user_id, habit_id, day):
        self._record("delete_completion", habit_id, day)
        self.completions.pop((habit_id, day), None)

    async def set_completion(self, user_id, habit_id, day, completed):
        self._record("set_completion", habit_id, day, completed)
        self.completions[(habit_id, day)] = completed

    async def update_derived(self, habit):
        self.calls.append(("update_derived", habit.id))
        if self.fail or self.fail_derived:
            raise PersistenceError("update_derived failed")
        stored = self.habits[habit.id]
        self.habits[habit.id] = stored.model_copy(update={
            "streak": habit.streak,
            "best_streak": habit.best_streak,
            "completions_this_week": habit.completions_this_week,
            "total_completions": habit.total_completions,
            "completed_today": habit.completed_today,
        })

    async def list_user_ids(self):
        return sorted({h.user_id for h in self.habits.values() if h.user_id})


class FakeCalendarRepository(CalendarRepository):
    def __init__(self):
        self.events = {}
        self.counter = 0

    async def list_events(self, user_id, start, end):
        return [
            event for (owner, _), event in self.events.items()
            if owner == user_id and start <= event.date <= end
        ]

    async def insert_event(self, user_id, event_in):
        self.counter += 1
        event = CalendarEvent(id=f"evt{self.counter}", **event_in.model_dump())
        self.events[(user_id, event.id)] = event
        return event

    async def delete_event(self, user_id, event_id):
        return self.events.pop((user_id, event_id), None) is not None


def make_habit(title="Read", frequency=(1, 3, 5), goal_per_week=3, category="learning", completed=(), uncompleted=()):
    history = [CompletionEntry(date=d, completed=True) for d in completed]
    history += [CompletionEntry(date=d, completed=False) for d in uncompleted]
    history.sort(key=lambda e: e.date)
    return Habit(
        title=title,
        category=category,
        frequency=list(frequency),
        goal_per_week=goal_per_week,
        completion_history=history,
    )


@pytest.fixture
def clock():
    return lambda: TODAY


@pytest.fixture
def store(clock):
    return HabitStore(clock=clock, policy="scheduled", remove_unchecked=True)


@pytest.fixture
def habit_repository():
    return FakeHabitRepository()


@pytest.fixture
def calendar_repository():
    return FakeCalendarRepository()


@pytest.fixture
def client(habit_repository, calendar_repository, clock):
    from fastapi.testclient import TestClient

    from main import app
    from models.user import User
    from routes.auth import get_current_user
    from routes.dependencies import get_calendar_repository, get_clock, get_habit_repository

    user = User(_id=USER_ID, username="tester", email="tester@example.com", hashed_password="x")
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_habit_repository] = lambda: habit_repository
    app.dependency_overrides[get_calendar_repository] = lambda: calendar_repository
    app.dependency_overrides[get_clock] = lambda: clock
    # No context manager: the lifespan (indexes, scheduler) needs a real Mongo
    yield TestClient(app)
    app.dependency_overrides.clear()
