"""
Scheduled Task Module

Uses APScheduler to purge expired OAuth entries periodically. The storage
backends never schedule themselves; the application starts this scheduler
alongside its event loop.
"""

import logging
from typing import Optional, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from atproto_storage.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Global Scheduler Instance
_scheduler: Optional[AsyncIOScheduler] = None


class CleanableStorage(Protocol):
    async def cleanup(self) -> int:
        ...


async def cleanup_expired_task(storage: CleanableStorage) -> int:
    """
    Scheduled Storage Cleanup Task

    Deletes expired entries. Failures are logged, not raised, so one failed
    run does not stop the schedule.

    Returns:
        Number of deleted entries (0 on failure)
    """
    logger.info("Starting scheduled storage cleanup task")

    try:
        deleted_count = await storage.cleanup()
        logger.info(
            f"Storage cleanup task completed: {deleted_count} expired entries deleted"
        )
        return deleted_count

    except Exception as e:
        logger.error(f"Storage cleanup task failed: {str(e)}", exc_info=True)
        return 0


def start_scheduler(
    storage: CleanableStorage, settings: Optional[Settings] = None
) -> Optional[AsyncIOScheduler]:
    """
    Start Scheduled Task Scheduler

    Must be called from within a running event loop.

    Returns:
        The started scheduler, or None when cleanup is disabled
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already started")
        return _scheduler

    settings = settings or get_settings()

    if not settings.CLEANUP_ENABLED:
        logger.info("Storage cleanup disabled, scheduler not started")
        return None

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        cleanup_expired_task,
        trigger=IntervalTrigger(minutes=settings.CLEANUP_INTERVAL_MINUTES),
        args=[storage],
        id="cleanup_expired_storage",
        name="Clean up expired OAuth storage entries",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info(
        "Scheduler started: storage cleanup scheduled every "
        f"{settings.CLEANUP_INTERVAL_MINUTES} minutes"
    )
    return _scheduler


def shutdown_scheduler():
    """
    Shutdown Scheduled Task Scheduler

    Gracefully stops all scheduled tasks.
    """
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Scheduler shutdown completed")


def get_scheduler() -> Optional[AsyncIOScheduler]:
    """
    Get Scheduler Instance

    Returns:
        Optional[AsyncIOScheduler]: Scheduler instance or None
    """
    return _scheduler
