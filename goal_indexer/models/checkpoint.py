"""
Checkpoint model.

Holds the derived indexer state: last processed block, discovered
vaults and the bounded activity feed. Integers that may exceed 53 bits
are serialized as decimal strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from goal_indexer.config.constants import ACTIVITY_ID_SEPARATOR
from goal_indexer.models.types import ActivityType
from goal_indexer.utils.exceptions import MalformedStoredState
from goal_indexer.utils.validation import canonicalize_address


def _canonical(address: Any) -> str:
    """Stored addresses in EIP-55 form; unparseable values are kept as is."""
    value = str(address)
    return canonicalize_address(value) or value


def make_activity_id(tx_hash: str, log_index: int) -> str:
    """
    Build activity deduplication key.

    Examples:
        >>> make_activity_id("0xabc", 3)
        '0xabc-3'
    """
    return f"{tx_hash}{ACTIVITY_ID_SEPARATOR}{log_index}"


@dataclass(frozen=True)
class VaultRecord:
    """Goal vault discovered from a GoalCreated event."""

    goal_id: int
    owner: str
    name: str
    target_amount: int
    strategy: str

    def to_dict(self) -> dict[str, str]:
        return {
            "goalId": str(self.goal_id),
            "owner": self.owner,
            "name": self.name,
            "targetAmount": str(self.target_amount),
            "strategy": self.strategy,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VaultRecord:
        return cls(
            goal_id=int(data["goalId"]),
            owner=str(data["owner"]),
            name=str(data["name"]),
            target_amount=int(data["targetAmount"]),
            strategy=str(data["strategy"]),
        )


@dataclass(frozen=True)
class ActivityEntry:
    """Single deposit or withdrawal in the activity feed."""

    id: str
    type: ActivityType
    amount: int
    vault: str
    block_number: int
    tx_hash: str
    goal_name: str | None = None
    timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Persisted form, including the block number."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "amount": str(self.amount),
            "vault": self.vault,
            "blockNumber": str(self.block_number),
            "txHash": self.tx_hash,
        }
        if self.goal_name is not None:
            data["goalName"] = self.goal_name
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    def to_public_dict(self) -> dict[str, Any]:
        """API form: block number is internal and never exposed."""
        data = self.to_dict()
        del data["blockNumber"]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityEntry:
        timestamp = data.get("timestamp")
        return cls(
            id=str(data["id"]),
            type=ActivityType(data["type"]),
            amount=int(data["amount"]),
            vault=_canonical(data["vault"]),
            block_number=int(data["blockNumber"]),
            tx_hash=str(data["txHash"]),
            goal_name=data.get("goalName"),
            timestamp=int(timestamp) if timestamp is not None else None,
        )


@dataclass
class Checkpoint:
    """
    Indexer checkpoint.

    Once published to readers a checkpoint is treated as immutable;
    the indexer works on a copy and publishes the copy.
    """

    last_processed_block: int = 0
    vaults: dict[str, VaultRecord] = field(default_factory=dict)
    activities: list[ActivityEntry] = field(default_factory=list)

    def copy(self) -> Checkpoint:
        """Copy containers so the original can stay visible to readers."""
        return Checkpoint(
            last_processed_block=self.last_processed_block,
            vaults=dict(self.vaults),
            activities=list(self.activities),
        )

    def activity_ids(self) -> set[str]:
        return {entry.id for entry in self.activities}

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastBlock": str(self.last_processed_block),
            "vaults": {
                address: record.to_dict()
                for address, record in self.vaults.items()
            },
            "activities": [entry.to_dict() for entry in self.activities],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Checkpoint:
        """
        Parse stored checkpoint.

        Missing top-level keys fall back to their empty defaults.

        Raises:
            MalformedStoredState: If the structure or any value is invalid
        """
        if not isinstance(data, dict):
            raise MalformedStoredState(
                f"Checkpoint must be an object, got {type(data).__name__}"
            )

        try:
            last_block = int(data.get("lastBlock") or 0)
            if last_block < 0:
                raise ValueError(f"negative lastBlock {last_block}")

            vaults: dict[str, VaultRecord] = {}
            for address, record in (data.get("vaults") or {}).items():
                # First entry wins when keys differ only in case
                vaults.setdefault(_canonical(address), VaultRecord.from_dict(record))
            activities = [
                ActivityEntry.from_dict(item)
                for item in (data.get("activities") or [])
            ]
        except (
            KeyError, TypeError, ValueError, AttributeError, OverflowError
        ) as e:
            raise MalformedStoredState(f"Invalid checkpoint data: {e}") from e

        return cls(
            last_processed_block=last_block,
            vaults=vaults,
            activities=activities,
        )
