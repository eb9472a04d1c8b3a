"""
Event source registry.

Tracks goal vault contracts that must be scanned for Deposited and
Withdrawn events. Grows as GoalCreated events are observed.
"""

from loguru import logger

from goal_indexer.models.checkpoint import VaultRecord
from goal_indexer.utils.security import mask_address
from goal_indexer.utils.validation import canonicalize_address


class EventSourceRegistry:
    """
    Append-only registry of vault sources keyed by canonical address.

    Backed by the vaults mapping of the checkpoint being built, so
    registrations become part of the state committed by the cycle.
    """

    def __init__(self, vaults: dict[str, VaultRecord]) -> None:
        self._vaults = vaults

    def register(self, vault_address: str, record: VaultRecord) -> bool:
        """
        Register vault; first write wins.

        Args:
            vault_address: Vault contract address (any case)
            record: Vault data from the factory event

        Returns:
            True if the vault was not known before
        """
        address = canonicalize_address(vault_address)
        if address is None:
            logger.warning(f"[Indexer] Skipping invalid vault address {vault_address!r}")
            return False

        if address in self._vaults:
            return False

        self._vaults[address] = record
        logger.info(
            f"[Indexer] Registered vault {mask_address(address)} "
            f"(goal {record.goal_id}, {record.name!r})"
        )
        return True

    def list_sources(self) -> list[str]:
        """All registered vault addresses in registration order."""
        return list(self._vaults)

    def get(self, address: str) -> VaultRecord | None:
        canonical = canonicalize_address(address)
        if canonical is None:
            return None
        return self._vaults.get(canonical)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.get(address) is not None

    def __len__(self) -> int:
        return len(self._vaults)
