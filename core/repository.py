"""
Storage collaborators for habits and calendar entries.

The abstract classes describe what the core expects from a backend; the
Mongo implementations keep habits in `habits`, one document per completed
(or explicitly unchecked) day in `habit_completions`, and user calendar
entries in `calendar_events`. Days are stored as `YYYY-MM-DD` strings.
"""
import functools
import logging
from datetime import date
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from core.errors import PersistenceError
from models.calendar import CalendarEvent, CalendarEventCreate
from models.habit import CompletionEntry, Habit

logger = logging.getLogger(__name__)

DERIVED_FIELDS = ("streak", "best_streak", "completions_this_week", "total_completions", "completed_today")

def wrap_db_errors(func):
    """Surfaces driver failures as PersistenceError. No retries."""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except PyMongoError as e:
            logger.warning("%s failed: %s", func.__qualname__, e)
            raise PersistenceError(str(e)) from e
    return wrapper

def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None

class HabitRepository:
    async def insert_habit(self, habit: Habit) -> None:
        raise NotImplementedError

    async def list_habits(self, user_id: str) -> List[Habit]:
        raise NotImplementedError

    async def insert_completion(self, user_id: str, habit_id: str, day: date) -> None:
        raise NotImplementedError

    async def delete_completion(self, user_id: str, habit_id: str, day: date) -> None:
        raise NotImplementedError

    async def set_completion(self, user_id: str, habit_id: str, day: date, completed: bool) -> None:
        raise NotImplementedError

    async def update_derived(self, habit: Habit) -> None:
        raise NotImplementedError

    async def list_user_ids(self) -> List[str]:
        raise NotImplementedError

class CalendarRepository:
    async def list_events(self, user_id: str, start: date, end: date) -> List[CalendarEvent]:
        raise NotImplementedError

    async def insert_event(self, user_id: str, event_in: CalendarEventCreate) -> CalendarEvent:
        raise NotImplementedError

    async def delete_event(self, user_id: str, event_id: str) -> bool:
        raise NotImplementedError

class MongoHabitRepository(HabitRepository):
    def __init__(self, database):
        self.db = database

    @wrap_db_errors
    async def insert_habit(self, habit: Habit) -> None:
        doc = habit.model_dump(by_alias=True, exclude={"completion_history"})
        doc["_id"] = ObjectId(habit.id)
        await self.db.habits.insert_one(doc)

    @wrap_db_errors
    async def list_habits(self, user_id: str) -> List[Habit]:
        # ObjectIds grow with insertion time, so _id order is creation order
        habit_docs = await self.db.habits.find({"user_id": user_id}).sort("_id", 1).to_list(length=None)
        habit_ids = [str(doc["_id"]) for doc in habit_docs]

        history = {habit_id: [] for habit_id in habit_ids}
        cursor = self.db.habit_completions.find({"habit_id": {"$in": habit_ids}})
        async for row in cursor:
            history[row["habit_id"]].append(
                CompletionEntry(date=date.fromisoformat(row["date"]), completed=row.get("completed", True))
            )

        return [
            Habit(**{**doc, "completion_history": history[str(doc["_id"])]})
            for doc in habit_docs
        ]

    @wrap_db_errors
    async def insert_completion(self, user_id: str, habit_id: str, day: date) -> None:
        await self.set_completion(user_id, habit_id, day, True)

    @wrap_db_errors
    async def delete_completion(self, user_id: str, habit_id: str, day: date) -> None:
        await self.db.habit_completions.delete_one({"habit_id": habit_id, "date": day.isoformat()})

    @wrap_db_errors
    async def set_completion(self, user_id: str, habit_id: str, day: date, completed: bool) -> None:
        await self.db.habit_completions.update_one(
            {"habit_id": habit_id, "date": day.isoformat()},
            {"$set": {"user_id": user_id, "completed": completed}},
            upsert=True,
        )

    @wrap_db_errors
    async def update_derived(self, habit: Habit) -> None:
        await self.db.habits.update_one(
            {"_id": ObjectId(habit.id)},
            {"$set": {field: getattr(habit, field) for field in DERIVED_FIELDS}},
        )

    @wrap_db_errors
    async def list_user_ids(self) -> List[str]:
        return [str(user_id) for user_id in await self.db.habits.distinct("user_id") if user_id]

class MongoCalendarRepository(CalendarRepository):
    def __init__(self, database):
        self.db = database

    @staticmethod
    def _to_event(doc) -> CalendarEvent:
        return CalendarEvent(
            id=str(doc["_id"]),
            title=doc["title"],
            date=date.fromisoformat(doc["date"]),
            start_time=doc.get("start_time"),
            end_time=doc.get("end_time"),
            description=doc.get("description"),
            color=doc.get("color", "#4f46e5"),
        )

    @wrap_db_errors
    async def list_events(self, user_id: str, start: date, end: date) -> List[CalendarEvent]:
        cursor = self.db.calendar_events.find({
            "user_id": user_id,
            "date": {"$gte": start.isoformat(), "$lte": end.isoformat()},
        }).sort("date", 1)
        return [self._to_event(doc) async for doc in cursor]

    @wrap_db_errors
    async def insert_event(self, user_id: str, event_in: CalendarEventCreate) -> CalendarEvent:
        doc = event_in.model_dump()
        doc["date"] = event_in.date.isoformat()
        doc["user_id"] = user_id
        result = await self.db.calendar_events.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._to_event(doc)

    @wrap_db_errors
    async def delete_event(self, user_id: str, event_id: str) -> bool:
        oid = _object_id(event_id)
        if oid is None:
            return False
        result = await self.db.calendar_events.delete_one({"_id": oid, "user_id": user_id})
        return result.deleted_count > 0
