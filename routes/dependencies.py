from fastapi import Depends

from core.database import db
from core.habit_service import HabitService
from core.habit_store import HabitStore
from core.repository import HabitRepository, CalendarRepository, MongoHabitRepository, MongoCalendarRepository
from core.time_utils import Clock, today
from models.user import User
from routes.auth import get_current_user

def get_clock() -> Clock:
    return today

def get_habit_repository() -> HabitRepository:
    return MongoHabitRepository(db)

def get_calendar_repository() -> CalendarRepository:
    return MongoCalendarRepository(db)

async def get_habit_service(
    current_user: User = Depends(get_current_user),
    repository: HabitRepository = Depends(get_habit_repository),
    clock: Clock = Depends(get_clock),
) -> HabitService:
    """A store scoped to the request, seeded with the user's persisted habits."""
    service = HabitService(str(current_user.id), repository, HabitStore(clock=clock))
    return await service.load()
