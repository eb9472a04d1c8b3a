"""
RPC Wrapper with Timeout Logic.

Provides centralized timeout handling for node calls. A call that
exceeds its timeout is reported as an unavailable source.
"""

import asyncio
from typing import Any

from loguru import logger

from goal_indexer.utils.exceptions import SourceUnavailable


async def with_timeout(
    awaitable: Any,
    timeout: float,
    operation_name: str = "RPC call",
) -> Any:
    """
    Await a node call with timeout.

    Args:
        awaitable: Coroutine or future to await
        timeout: Timeout in seconds
        operation_name: Operation name for logging

    Returns:
        Result of the call

    Raises:
        SourceUnavailable: If the call times out
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(f"[RPC] {error_msg}")
        raise SourceUnavailable(error_msg) from e
