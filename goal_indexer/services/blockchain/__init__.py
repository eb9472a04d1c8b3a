"""
Blockchain services module.

Node access for the event indexer: head height, decoded event logs
and block timestamps.
"""

from .constants import EVENT_ABIS, VAULT_EVENTS
from .log_fetcher import LogFetcher, RawLogEvent, iter_block_chunks

__all__ = [
    "EVENT_ABIS",
    "LogFetcher",
    "RawLogEvent",
    "VAULT_EVENTS",
    "iter_block_chunks",
]
