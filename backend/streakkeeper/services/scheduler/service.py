"""
Scheduler Service - Background scheduler lifecycle management
Handles starting, stopping, and configuring the APScheduler instance
"""
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from streakkeeper.core.config import settings
from streakkeeper.core.constants import ROLLOVER_JOB_ID
from streakkeeper.utils.timezone import get_local_tz
from .jobs import run_day_rollover

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def start_scheduler():
    """
    Start the background scheduler
    Runs the day roll-over once a day at ROLLOVER_HOUR:ROLLOVER_MINUTE local time
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    scheduler = BackgroundScheduler(timezone=get_local_tz())

    scheduler.add_job(
        func=run_day_rollover,
        trigger=CronTrigger(hour=settings.ROLLOVER_HOUR, minute=settings.ROLLOVER_MINUTE,
                            timezone=get_local_tz()),
        id=ROLLOVER_JOB_ID,
        name='Mark unconfirmed build habits as missed',
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Scheduler started - day roll-over at {settings.ROLLOVER_HOUR:02d}:{settings.ROLLOVER_MINUTE:02d}")


def stop_scheduler():
    """Stop the background scheduler"""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")
