"""
Background job definitions using APScheduler.

Jobs:
- Sync retry: re-push failed mirror writes to the remote database
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from salesnet.config import settings
from salesnet.db import get_db_context
from salesnet.services.backend import get_backend
from salesnet.services.sync import retry_failed

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()


async def sync_retry_job():
    """Retry failed mirror writes."""
    backend = get_backend()
    if not backend.enabled:
        return

    logger.debug("Running sync retry job")
    try:
        async with get_db_context() as db:
            synced = await retry_failed(db, backend)
            if synced:
                logger.info(f"Sync retry job: {synced} entries synced")
    except Exception as e:
        logger.error(f"Sync retry job error: {e}")


def setup_scheduler():
    """
    Configure and add all scheduled jobs.

    Called during application startup.
    """
    scheduler.add_job(
        sync_retry_job,
        trigger=IntervalTrigger(minutes=settings.sync_retry_minutes),
        id="sync_retry",
        name="Retry failed remote sync",
        replace_existing=True,
    )
    logger.info("Scheduler configured with jobs")
