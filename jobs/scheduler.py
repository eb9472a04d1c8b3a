"""
Indexer scheduler.

Drives the event indexer on a fixed interval with APScheduler.
The first cycle runs immediately; a tick that fires while a cycle is
still running is dropped.
"""

import asyncio
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from goal_indexer.config.constants import INDEXER_JOB_ID
from jobs.tasks.event_indexer_task import EventIndexerTask


def create_scheduler(
    task: EventIndexerTask,
    interval_seconds: float,
) -> AsyncIOScheduler:
    """
    Create scheduler with the indexer job registered.

    The scheduler must be started from a running event loop.

    Args:
        task: Indexer task to run
        interval_seconds: Seconds between cycles

    Returns:
        Configured, not yet started scheduler
    """
    scheduler = AsyncIOScheduler(timezone=UTC)
    scheduler.add_job(
        task.run,
        trigger=IntervalTrigger(seconds=interval_seconds),
        id=INDEXER_JOB_ID,
        name="Goal vault event indexer",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(UTC),
    )

    logger.info(f"[Scheduler] Indexer job registered, every {interval_seconds}s")
    return scheduler


async def shutdown_scheduler(
    scheduler: AsyncIOScheduler,
    task: EventIndexerTask,
) -> None:
    """
    Stop scheduling new cycles and let an in-flight cycle finish.

    Args:
        scheduler: Running scheduler
        task: Indexer task driven by the scheduler
    """
    if not scheduler.running:
        await task.wait_idle()
        return

    # Shutting down the executor cancels running jobs, so stop new ticks
    # first and let the current cycle complete
    scheduler.pause()
    if task.is_running:
        logger.info("[Scheduler] Waiting for in-flight cycle to finish...")
    await task.wait_idle()

    scheduler.shutdown(wait=False)
    # Some APScheduler 3.x releases apply shutdown on the next loop iteration
    await asyncio.sleep(0)
    logger.info("[Scheduler] Stopped")
