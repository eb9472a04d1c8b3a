"""
Event Indexer Background Task.

Runs one indexing cycle per scheduler tick:
1. Discover new vaults from factory events
2. Collect new deposits and withdrawals
3. Persist the checkpoint

Cycle errors are logged and contained here; the next tick retries.
"""

import asyncio

from loguru import logger

from goal_indexer.services.event_indexer import EventIndexerService, IndexResult
from goal_indexer.utils.exceptions import SourceUnavailable


class EventIndexerTask:
    """
    Scheduled wrapper around EventIndexerService.index_once().

    At most one cycle runs at a time: a run requested while a cycle is
    in flight is skipped, not queued.
    """

    def __init__(self, indexer: EventIndexerService) -> None:
        self.indexer = indexer
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> IndexResult | None:
        """
        Run one indexing cycle.

        Returns:
            Cycle result, or None if skipped or failed
        """
        if self._lock.locked():
            logger.warning("[Indexer Task] Previous cycle still running, skipping")
            return None

        async with self._lock:
            try:
                return await self.indexer.index_once()
            except asyncio.CancelledError:
                logger.info("[Indexer Task] Task cancelled")
                raise
            except SourceUnavailable as e:
                logger.warning(f"[Indexer Task] Node unavailable, cycle aborted: {e}")
            except Exception as e:
                logger.exception(f"[Indexer Task] Task failed: {e}")

        return None

    async def wait_idle(self) -> None:
        """Wait until an in-flight cycle, if any, has finished."""
        async with self._lock:
            pass
