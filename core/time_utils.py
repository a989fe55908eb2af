import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, Tuple
from zoneinfo import ZoneInfo

from core.config import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)
UTC = ZoneInfo("UTC")

# A clock returns the current calendar day; routes and the store take one
# so date-sensitive logic can be pinned in tests.
Clock = Callable[[], date]

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

def get_current_time():
    """Returns the current time in the configured timezone."""
    return datetime.now(LOCAL_TZ)

def today() -> date:
    return get_current_time().date()

def to_local(dt: datetime):
    """Converts a datetime object to the configured timezone."""
    if dt.tzinfo is None:
        # Assume naive datetimes from DB are UTC
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(LOCAL_TZ)

def js_weekday(day: date) -> int:
    """Weekday index with 0=Sunday..6=Saturday, the convention of habit frequencies."""
    return day.isoweekday() % 7

def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the ISO week containing `day`."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)

def month_bounds(day: date) -> Tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)

def iter_days(start: date, end: date) -> Iterator[date]:
    """Yields every day in [start, end]; nothing when start > end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
