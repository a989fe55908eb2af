from motor.motor_asyncio import AsyncIOMotorClient
from core.config import settings

# Motor connects lazily, so importing this module never touches the network
client = AsyncIOMotorClient(settings.MONGO_URI)
db = client[settings.DB_NAME]

async def ensure_indexes():
    await db.habits.create_index([("user_id", 1), ("_id", 1)])
    await db.habit_completions.create_index([("habit_id", 1), ("date", 1)], unique=True)
    await db.calendar_events.create_index([("user_id", 1), ("date", 1)])
    await db.users.create_index("username", unique=True)
