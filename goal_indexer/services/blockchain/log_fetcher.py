"""
Log fetcher.

Reads chain head, contract event logs and block timestamps from the node.
Synchronous web3 calls run in a thread pool, bounded by a semaphore and
wrapped in a timeout. Every node failure surfaces as SourceUnavailable.
"""

import asyncio
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger
from web3 import Web3
from web3.exceptions import Web3Exception

from goal_indexer.config.constants import WEB3_EXECUTOR_WORKERS
from goal_indexer.config.settings import Settings
from goal_indexer.models.types import EventName
from goal_indexer.utils.exceptions import SourceUnavailable
from goal_indexer.utils.security import mask_address

from .constants import EVENT_ABIS
from .rpc_wrapper import with_timeout

T = TypeVar("T")

# Failures raised by web3 or its HTTP transport (requests errors are OSError)
NODE_ERRORS = (Web3Exception, OSError)

# Shape errors when reading fields out of a node response
RESPONSE_ERRORS = (KeyError, TypeError, ValueError)


@dataclass(frozen=True)
class RawLogEvent:
    """Decoded event log, independent of web3 types."""

    event: EventName
    address: str
    args: dict[str, Any]
    tx_hash: str
    log_index: int
    block_number: int


def iter_block_chunks(
    from_block: int,
    to_block: int,
    chunk_size: int,
) -> Iterator[tuple[int, int]]:
    """
    Split inclusive block range into inclusive chunks.

    Examples:
        >>> list(iter_block_chunks(0, 4, 2))
        [(0, 1), (2, 3), (4, 4)]
    """
    current = from_block
    while current <= to_block:
        chunk_end = min(current + chunk_size - 1, to_block)
        yield current, chunk_end
        current = chunk_end + 1


class LogFetcher:
    """
    Node reader for the event indexer.

    Handles:
    - Thread pool execution of sync Web3 calls
    - Bounded concurrency against the node endpoint
    - Timeout handling
    - Block range chunking for eth_getLogs
    """

    def __init__(
        self,
        w3: Web3,
        rpc_timeout: float = 30.0,
        max_concurrent: int = 8,
        chunk_size: int = 2000,
        max_workers: int = WEB3_EXECUTOR_WORKERS,
    ) -> None:
        """
        Initialize log fetcher.

        Args:
            w3: Web3 instance
            rpc_timeout: Timeout per node call in seconds
            max_concurrent: Maximum concurrent node calls
            chunk_size: Maximum blocks per log request
            max_workers: Thread pool workers
        """
        self.w3 = w3
        self.rpc_timeout = rpc_timeout
        self.chunk_size = chunk_size
        self._limiter = asyncio.Semaphore(max_concurrent)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="web3"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LogFetcher":
        """Create fetcher with an HTTP provider for the configured node."""
        w3 = Web3(
            Web3.HTTPProvider(
                settings.rpc_url,
                request_kwargs={"timeout": settings.rpc_timeout},
            )
        )
        return cls(
            w3,
            rpc_timeout=settings.rpc_timeout,
            max_concurrent=settings.rpc_max_concurrent,
            chunk_size=settings.log_chunk_size,
        )

    def close(self) -> None:
        """Release the thread pool."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def get_block_number(self) -> int:
        """
        Get current chain head.

        Returns:
            Latest block number
        """
        return int(await self._call(
            lambda: self.w3.eth.block_number,
            "eth_blockNumber",
        ))

    async def fetch(
        self,
        address: str,
        event_name: EventName,
        from_block: int,
        to_block: int,
    ) -> list[RawLogEvent]:
        """
        Fetch decoded logs of one event from one contract.

        Args:
            address: Contract address
            event_name: Event to fetch
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            Events in node order

        Raises:
            SourceUnavailable: On any node failure
        """
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=EVENT_ABIS[event_name],
        )
        event = getattr(contract.events, event_name.value)

        events: list[RawLogEvent] = []
        for chunk_start, chunk_end in iter_block_chunks(
            from_block, to_block, self.chunk_size
        ):
            logs = await self._call(
                lambda s=chunk_start, e=chunk_end: event.get_logs(
                    from_block=s,
                    to_block=e,
                ),
                f"{event_name} logs {mask_address(address)} "
                f"[{chunk_start}, {chunk_end}]",
            )
            for log in logs:
                raw = self._to_raw_event(event_name, log)
                if raw is not None:
                    events.append(raw)

        return events

    async def fetch_many(
        self,
        addresses: Iterable[str],
        event_names: Iterable[EventName],
        from_block: int,
        to_block: int,
    ) -> list[RawLogEvent]:
        """
        Fetch several events from several contracts concurrently.

        Results are ordered by address, then by event name, in the order
        given, regardless of completion order.

        Raises:
            SourceUnavailable: If any fetch fails
        """
        names = list(event_names)
        pairs = [(address, name) for address in addresses for name in names]
        if not pairs:
            return []

        results = await asyncio.gather(*(
            self.fetch(address, name, from_block, to_block)
            for address, name in pairs
        ))
        return [event for batch in results for event in batch]

    async def get_block_timestamps(
        self,
        block_numbers: Iterable[int],
    ) -> dict[int, int]:
        """
        Resolve block timestamps, one header fetch per distinct block.

        Returns:
            Mapping block number -> Unix timestamp (seconds)

        Raises:
            SourceUnavailable: If any block cannot be fetched
        """
        distinct = sorted(set(block_numbers))
        if not distinct:
            return {}

        blocks = await asyncio.gather(*(
            self._call(
                lambda n=number: self.w3.eth.get_block(n),
                f"eth_getBlockByNumber {number}",
            )
            for number in distinct
        ))

        try:
            return {
                int(block["number"]): int(block["timestamp"])
                for block in blocks
            }
        except RESPONSE_ERRORS as e:
            raise SourceUnavailable(f"Malformed block header: {e}") from e

    async def _call(self, sync_func: Callable[[], T], operation_name: str) -> T:
        loop = asyncio.get_running_loop()
        async with self._limiter:
            try:
                return await with_timeout(
                    loop.run_in_executor(self._executor, sync_func),
                    timeout=self.rpc_timeout,
                    operation_name=operation_name,
                )
            except SourceUnavailable:
                raise
            except NODE_ERRORS as e:
                logger.warning(f"[RPC] {operation_name} failed: {e}")
                raise SourceUnavailable(f"{operation_name} failed: {e}") from e

    @staticmethod
    def _to_raw_event(event_name: EventName, log: Any) -> RawLogEvent | None:
        # Pending logs carry no transaction hash or block number
        if log.get("transactionHash") is None or log.get("blockNumber") is None:
            return None

        try:
            return RawLogEvent(
                event=event_name,
                address=Web3.to_checksum_address(log["address"]),
                args=dict(log["args"]),
                tx_hash=Web3.to_hex(log["transactionHash"]),
                log_index=int(log["logIndex"]),
                block_number=int(log["blockNumber"]),
            )
        except RESPONSE_ERRORS as e:
            raise SourceUnavailable(f"Malformed {event_name} log: {e}") from e
