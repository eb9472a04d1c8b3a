"""
Event Indexer Service.

Incremental indexing of goal factory and goal vault events.
Polls the node for new blocks and keeps an in-memory, persisted
checkpoint that the HTTP API reads.

Key features:
- Dynamic discovery of vaults from GoalCreated events
- Deduplicated, block-ordered deposit/withdraw feed with bounded retention
- Resume from the last persisted block after restart
- Zero RPC calls for queries
"""

from .core import EventIndexerService
from .indexing_mixin import IndexingMixin, IndexResult, merge_activities
from .queries_mixin import QueriesMixin
from .registry import EventSourceRegistry
from .state import IndexerState

__all__ = [
    "EventIndexerService",
    "EventSourceRegistry",
    "IndexResult",
    "IndexerState",
    "IndexingMixin",
    "QueriesMixin",
    "merge_activities",
]
