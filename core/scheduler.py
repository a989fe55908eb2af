import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.config import settings
from core.database import db
from core.errors import PersistenceError
from core.habit_store import HabitStore
from core.repository import HabitRepository, MongoHabitRepository, DERIVED_FIELDS
from core.time_utils import Clock, today as system_today

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

async def refresh_derived_fields(repository: HabitRepository, clock: Clock = system_today) -> int:
    """
    Brings stored derived fields in line with the clock.

    `completed_today` and `completions_this_week` go stale at midnight and
    on Mondays without any user action. Every stored habit is recomputed
    and only the ones that changed are written back. A failing user is
    logged and skipped. Returns the number of habits rewritten.
    """
    today = clock()
    logger.info("Refreshing derived habit fields for %s", today.isoformat())

    updated = 0
    for user_id in await repository.list_user_ids():
        try:
            stored = await repository.list_habits(user_id)
            store = HabitStore(clock=lambda: today)
            store.load(stored)
            for before in stored:
                after = store.get(before.id)
                if any(getattr(before, f) != getattr(after, f) for f in DERIVED_FIELDS):
                    await repository.update_derived(after)
                    updated += 1
        except PersistenceError as e:
            logger.error("Error refreshing habits for user %s: %s", user_id, e)

    logger.info("Derived habit refresh completed, %d habit(s) updated", updated)
    return updated

async def run_daily_maintenance():
    await refresh_derived_fields(MongoHabitRepository(db))

def start_scheduler():
    # Periodic so day rollovers are caught without a restart
    scheduler.add_job(run_daily_maintenance, IntervalTrigger(hours=settings.MAINTENANCE_INTERVAL_HOURS))
    scheduler.start()

def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
