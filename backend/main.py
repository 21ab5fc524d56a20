"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
import logging
import os
from fastapi import FastAPI
from streakkeeper.core.config import settings
from streakkeeper.core.dependencies import get_repository
from streakkeeper.routes import habits, health
from streakkeeper.services.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Silence noisy third-party loggers
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('apscheduler.scheduler').setLevel(logging.WARNING)
logging.getLogger('apscheduler.executors').setLevel(logging.WARNING)
logging.getLogger('apscheduler.executors.default').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup/shutdown events
    """
    # Startup
    logger.info(
        f"Local day boundary: {settings.APP_TIMEZONE}, confirmation window "
        f"{settings.CONFIRMATION_WINDOW_START_HOUR:02d}:00-{settings.CONFIRMATION_WINDOW_END_HOUR:02d}:00 "
        f"({'enforced' if settings.ENFORCE_CONFIRMATION_WINDOW else 'not enforced'}), "
        f"penalty stacking: {settings.PENALTY_STACKING}"
    )
    get_repository()

    if settings.SCHEDULER_ENABLED:
        try:
            start_scheduler()
            logger.info("✓ Day roll-over scheduler started")
        except Exception as e:
            logger.warning(f"Could not start scheduler: {e}")
    else:
        logger.info("Day roll-over scheduler disabled (SCHEDULER_ENABLED=false)")

    yield

    # Shutdown
    if settings.SCHEDULER_ENABLED:
        try:
            stop_scheduler()
            logger.info("✓ Day roll-over scheduler stopped")
        except Exception as e:
            logger.warning(f"Error stopping scheduler: {e}")


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="StreakKeeper API",
    description="Penalty stacking, debt and streaks for build and avoid habits",
    version="0.1.0",
    lifespan=lifespan
)

# Register routes
app.include_router(health.router)
app.include_router(habits.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
