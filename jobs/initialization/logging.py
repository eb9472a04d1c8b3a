"""
Indexer Initialization - Logging Module.

Configures loguru logger for the indexer process.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from goal_indexer.config.settings import Settings


def setup_logging(settings: Settings) -> None:
    """Configure stderr sink and rotating file sink."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="7 days",
            level=settings.log_level,
            encoding="utf-8",
        )

    logger.info("Starting goal vault indexer...")
