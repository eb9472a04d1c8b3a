"""
Event Indexer Core Service.

Main service class that combines all indexer functionality.
Inherits from mixins to provide indexing and query methods.
"""

from goal_indexer.config.settings import Settings
from goal_indexer.repositories.checkpoint_repository import CheckpointRepository
from goal_indexer.services.blockchain import LogFetcher
from goal_indexer.utils.validation import canonicalize_address

from .indexing_mixin import IndexingMixin
from .queries_mixin import QueriesMixin
from .state import IndexerState


class EventIndexerService(IndexingMixin, QueriesMixin):
    """
    Incremental indexer for goal vault activity.

    Maintains:
    - Vaults discovered from the factory's GoalCreated events
    - A bounded feed of Deposited / Withdrawn events across all vaults
    - The last processed block, persisted after every cycle

    The published checkpoint is shared with API handlers through
    IndexerState; only index_once() replaces it.
    """

    def __init__(
        self,
        fetcher: LogFetcher,
        repository: CheckpointRepository,
        state: IndexerState,
        factory_address: str,
        start_block: int = 0,
        max_events: int = 1000,
    ):
        """
        Initialize indexer.

        Args:
            fetcher: Node reader
            repository: Checkpoint storage
            state: Shared published checkpoint
            factory_address: GoalFactory contract address
            start_block: First block to scan on a fresh checkpoint
            max_events: Activity feed retention cap
        """
        canonical = canonicalize_address(factory_address)
        if canonical is None:
            raise ValueError(f"Invalid factory address: {factory_address!r}")

        self.fetcher = fetcher
        self.repository = repository
        self.state = state
        self.factory_address = canonical
        self.start_block = start_block
        self.max_events = max_events

    @classmethod
    async def create(
        cls,
        settings: Settings,
        fetcher: LogFetcher | None = None,
    ) -> "EventIndexerService":
        """
        Build indexer from settings, loading the stored checkpoint.

        Args:
            settings: Application settings
            fetcher: Optional node reader (defaults to HTTP provider)

        Returns:
            Ready-to-run indexer
        """
        repository = CheckpointRepository(settings.state_path)
        checkpoint = await repository.load()

        return cls(
            fetcher=fetcher or LogFetcher.from_settings(settings),
            repository=repository,
            state=IndexerState(checkpoint),
            factory_address=settings.factory_address,
            start_block=settings.start_block,
            max_events=settings.max_events,
        )
