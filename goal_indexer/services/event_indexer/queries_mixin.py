"""
Event Indexer Queries Mixin.

Provides read-only views of the published checkpoint.
All methods read the in-memory snapshot - zero RPC calls.
"""

from goal_indexer.models.checkpoint import ActivityEntry, VaultRecord
from goal_indexer.utils.validation import parse_limit, parse_vault_filter


class QueriesMixin:
    """Mixin providing query methods for indexed data."""

    def get_status(self) -> dict:
        """
        Get indexer status.

        Returns:
            Dictionary with last processed block, vault and activity counts
        """
        checkpoint = self.state.snapshot()
        return {
            "last_processed_block": checkpoint.last_processed_block,
            "vault_count": len(checkpoint.vaults),
            "activity_count": len(checkpoint.activities),
        }

    def get_activity(
        self,
        limit: str | int | None = None,
        vaults: str | None = None,
    ) -> list[ActivityEntry]:
        """
        Get newest activity entries.

        Both inputs are parsed best effort: an unusable limit falls back
        to the default and invalid filter addresses are ignored.

        Args:
            limit: Maximum number of entries
            vaults: Comma-separated vault addresses to filter by

        Returns:
            Entries in feed order (newest block first)
        """
        count = parse_limit(
            None if limit is None else str(limit),
            maximum=self.max_events,
        )
        vault_set = parse_vault_filter(vaults)

        items = self.state.snapshot().activities
        if vault_set is not None:
            items = [item for item in items if item.vault in vault_set]

        return items[:count]

    def get_vaults(self) -> list[tuple[str, VaultRecord]]:
        """
        Get discovered vaults in discovery order.

        Returns:
            List of (address, record) pairs
        """
        return list(self.state.snapshot().vaults.items())
