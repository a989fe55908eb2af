import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    APP_NAME: str = "Bettr"
    SECRET_KEY: str = os.getenv("SECRET_KEY", "supersecretkey123")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

    # Database
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "bettr")

    # Frontend
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Clock: "today" is evaluated in this zone
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Habit Configuration
    # "scheduled": unscheduled weekdays don't break a streak
    # "calendar": any day without a completion breaks it
    STREAK_POLICY: str = os.getenv("STREAK_POLICY", "scheduled")
    # Unchecking a day deletes its entry instead of storing completed=False
    UNCHECK_REMOVES_ENTRY: bool = True
    MAX_GOAL_PER_WEEK: int = 7

    HABIT_CATEGORY_COLORS: dict = {
        "learning": "#3b82f6",
        "mindfulness": "#8b5cf6",
        "fitness": "#ec4899",
        "health": "#10b981",
        "creativity": "#f97316",
        "productivity": "#6366f1",
        "sleep": "#3b82f6",
        "work": "#6b7280",
    }
    DEFAULT_EVENT_COLOR: str = "#6b7280"

    # Maintenance: recompute stored derived fields after day/week rollover
    MAINTENANCE_INTERVAL_HOURS: int = 1

    # Pydantic Settings Config
    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
