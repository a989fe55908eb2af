import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from routes import auth, habits, analytics, calendar
from core.config import settings
from core.database import ensure_indexes
from core.log_config import setup_logging
from core.scheduler import start_scheduler, stop_scheduler

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_indexes()
    start_scheduler()
    logger.info("%s API started (frontend: %s)", settings.APP_NAME, settings.FRONTEND_URL)
    yield
    stop_scheduler()

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = [
    settings.FRONTEND_URL,
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000", # Common alternative
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(habits.router)
app.include_router(analytics.router)
app.include_router(calendar.router)

@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
