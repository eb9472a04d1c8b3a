"""
Indexer models.

Exports checkpoint dataclasses and enums for easy imports.
"""

from goal_indexer.models.checkpoint import (
    ActivityEntry,
    Checkpoint,
    VaultRecord,
    make_activity_id,
)
from goal_indexer.models.types import ACTIVITY_BY_EVENT, ActivityType, EventName

__all__ = [
    "ACTIVITY_BY_EVENT",
    "ActivityEntry",
    "ActivityType",
    "Checkpoint",
    "EventName",
    "VaultRecord",
    "make_activity_id",
]
