"""
Indexer main entry point.

Loads the stored checkpoint, starts the scheduled indexer and the query
API on one event loop, and runs until SIGINT/SIGTERM.
"""

import asyncio
import signal
import sys

from loguru import logger
from pydantic import ValidationError

from goal_indexer.config.settings import Settings, get_settings
from goal_indexer.services.event_indexer import EventIndexerService
from jobs.http_api import create_app, start_http_server, stop_http_server
from jobs.initialization.logging import setup_logging
from jobs.scheduler import create_scheduler, shutdown_scheduler
from jobs.tasks.event_indexer_task import EventIndexerTask


async def run(settings: Settings) -> None:
    """Run indexer and API until a stop signal arrives."""
    indexer = await EventIndexerService.create(settings)
    task = EventIndexerTask(indexer)
    scheduler = create_scheduler(task, settings.poll_interval_seconds)

    runner = await start_http_server(
        create_app(indexer, settings.cors_origin),
        host=settings.host,
        port=settings.port,
    )
    scheduler.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            logger.debug(f"Signal handler for {sig.name} not supported here")

    try:
        await stop_event.wait()
    finally:
        logger.info("Graceful shutdown initiated...")
        await shutdown_scheduler(scheduler, task)
        await stop_http_server(runner)
        indexer.fetcher.close()
        logger.info("Graceful shutdown complete")


def main() -> None:
    """Console entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.critical(
            f"Invalid configuration (RPC_URL and FACTORY_ADDRESS are required): {e}"
        )
        sys.exit(1)

    setup_logging(settings)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Indexer stopped by user")


if __name__ == "__main__":
    main()
