"""
Event Indexer Indexing Mixin.

Provides the polling cycle: discover vaults from factory events, collect
vault deposits and withdrawals, merge them into the activity feed and
advance the checkpoint.
"""

from dataclasses import dataclass, replace

from loguru import logger

from goal_indexer.models.checkpoint import (
    ActivityEntry,
    Checkpoint,
    VaultRecord,
    make_activity_id,
)
from goal_indexer.models.types import ACTIVITY_BY_EVENT, EventName
from goal_indexer.services.blockchain import VAULT_EVENTS, RawLogEvent
from goal_indexer.utils.exceptions import PersistenceFailure, SourceUnavailable
from goal_indexer.utils.security import mask_activity_id, mask_tx_hash
from goal_indexer.utils.validation import canonicalize_address

from .registry import EventSourceRegistry


@dataclass
class IndexResult:
    """Outcome of one indexing cycle."""

    from_block: int
    to_block: int
    skipped: bool = False
    new_vaults: int = 0
    new_activities: int = 0
    persisted: bool = False


def merge_activities(
    new_entries: list[ActivityEntry],
    existing: list[ActivityEntry],
    max_events: int,
) -> list[ActivityEntry]:
    """
    Merge new entries into the feed, newest block first.

    The sort is stable: entries of the same block keep their relative
    order, with new entries ahead of previously recorded ones.

    Args:
        new_entries: Entries discovered this cycle, in discovery order
        existing: Current feed
        max_events: Retention cap

    Returns:
        Merged feed truncated to max_events
    """
    merged = sorted(new_entries + existing, key=lambda e: -e.block_number)
    return merged[:max_events]


class IndexingMixin:
    """Mixin providing indexing functionality."""

    async def index_once(self) -> IndexResult:
        """
        Run one indexing cycle.

        Node failures while reading head, factory or vault logs abort
        the cycle with the published checkpoint untouched. Timestamp
        lookup and persistence are best effort.

        Returns:
            IndexResult with cycle statistics

        Raises:
            SourceUnavailable: If the node fails before any state changes
        """
        current = self.state.snapshot()
        latest_block = await self.fetcher.get_block_number()

        last_block = current.last_processed_block
        from_block = last_block + 1 if last_block > 0 else self.start_block

        if from_block > latest_block:
            logger.debug(
                f"[Indexer] Up to date at block {last_block} (head {latest_block})"
            )
            return IndexResult(
                from_block=from_block,
                to_block=latest_block,
                skipped=True,
            )

        logger.debug(f"[Indexer] Scanning blocks {from_block} -> {latest_block}")

        working = current.copy()
        registry = EventSourceRegistry(working.vaults)

        # Factory events first so vaults created in this range are scanned
        # over the same range
        goal_logs = await self.fetcher.fetch(
            self.factory_address,
            EventName.GOAL_CREATED,
            from_block,
            latest_block,
        )
        new_vaults = self._register_vaults(registry, goal_logs)

        vault_logs = await self.fetcher.fetch_many(
            registry.list_sources(),
            VAULT_EVENTS,
            from_block,
            latest_block,
        )

        new_entries = self._build_entries(vault_logs, working)
        if new_entries or any(e.timestamp is None for e in working.activities):
            new_entries, working.activities = await self._stamp_timestamps(
                new_entries, working.activities
            )
        if new_entries:
            working.activities = merge_activities(
                new_entries, working.activities, self.max_events
            )

        working.last_processed_block = latest_block
        self.state.publish(working)

        persisted = await self._persist(working)

        result = IndexResult(
            from_block=from_block,
            to_block=latest_block,
            new_vaults=new_vaults,
            new_activities=len(new_entries),
            persisted=persisted,
        )

        if new_vaults or new_entries:
            logger.success(
                f"[Indexer] Blocks {from_block} -> {latest_block}: "
                f"{new_vaults} new vaults, {len(new_entries)} new activities"
            )

        return result

    def _register_vaults(
        self,
        registry: EventSourceRegistry,
        goal_logs: list[RawLogEvent],
    ) -> int:
        registered = 0
        for log in goal_logs:
            args = log.args
            try:
                vault_address = args["vault"]
                record = VaultRecord(
                    goal_id=int(args["goalId"]),
                    owner=canonicalize_address(args["owner"]) or args["owner"],
                    name=str(args["name"]),
                    target_amount=int(args["targetAmount"]),
                    strategy=canonicalize_address(args["strategy"]) or args["strategy"],
                )
            except (KeyError, TypeError, ValueError) as e:
                raise SourceUnavailable(
                    f"Malformed GoalCreated event in tx "
                    f"{mask_tx_hash(log.tx_hash)}: {e}"
                ) from e

            if registry.register(vault_address, record):
                registered += 1

        return registered

    def _build_entries(
        self,
        vault_logs: list[RawLogEvent],
        checkpoint: Checkpoint,
    ) -> list[ActivityEntry]:
        seen_ids = checkpoint.activity_ids()
        entries = []

        for log in vault_logs:
            activity_type = ACTIVITY_BY_EVENT.get(log.event)
            if activity_type is None:
                continue

            activity_id = make_activity_id(log.tx_hash, log.log_index)
            if activity_id in seen_ids:
                continue

            try:
                amount = int(log.args["amount"])
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    f"[Indexer] Skipping {log.event} "
                    f"{mask_activity_id(activity_id)}: bad amount ({e})"
                )
                continue

            seen_ids.add(activity_id)
            vault = canonicalize_address(log.address) or log.address
            record = checkpoint.vaults.get(vault)

            entries.append(
                ActivityEntry(
                    id=activity_id,
                    type=activity_type,
                    amount=amount,
                    vault=vault,
                    block_number=log.block_number,
                    tx_hash=log.tx_hash,
                    goal_name=record.name if record else None,
                )
            )

        return entries

    async def _stamp_timestamps(
        self,
        new_entries: list[ActivityEntry],
        existing: list[ActivityEntry],
    ) -> tuple[list[ActivityEntry], list[ActivityEntry]]:
        """
        Resolve block timestamps in one batch.

        Also retries retained entries whose timestamp is still missing.
        On failure entries are returned unchanged, without timestamps.
        """
        block_numbers = {e.block_number for e in new_entries}
        block_numbers.update(
            e.block_number for e in existing if e.timestamp is None
        )

        try:
            timestamps = await self.fetcher.get_block_timestamps(block_numbers)
        except SourceUnavailable as e:
            logger.warning(
                f"[Indexer] Timestamp lookup failed for {len(block_numbers)} "
                f"blocks, leaving them unresolved: {e}"
            )
            return new_entries, existing

        def stamp(entry: ActivityEntry) -> ActivityEntry:
            if entry.timestamp is not None:
                return entry
            timestamp = timestamps.get(entry.block_number)
            if timestamp is None:
                return entry
            return replace(entry, timestamp=timestamp)

        return [stamp(e) for e in new_entries], [stamp(e) for e in existing]

    async def _persist(self, checkpoint: Checkpoint) -> bool:
        try:
            await self.repository.save(checkpoint)
        except PersistenceFailure as e:
            logger.error(
                f"[Indexer] {e}. In-memory state is at block "
                f"{checkpoint.last_processed_block}; a restart will re-scan "
                f"from the last saved checkpoint"
            )
            return False
        return True
