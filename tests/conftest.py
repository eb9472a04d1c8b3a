"""Pytest configuration and shared fixtures for all tests."""

import sys
from pathlib import Path

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest  # noqa: E402

from goal_indexer.models.checkpoint import Checkpoint  # noqa: E402
from goal_indexer.repositories.checkpoint_repository import (  # noqa: E402
    CheckpointRepository,
)
from goal_indexer.services.event_indexer import (  # noqa: E402
    EventIndexerService,
    IndexerState,
)
from tests.fakes import FACTORY, FakeNode  # noqa: E402


@pytest.fixture
def fake_node():
    """In-memory node with no logs at block 0."""
    return FakeNode()


@pytest.fixture
def state_path(tmp_path):
    """Checkpoint file location inside the test's temp dir."""
    return tmp_path / "state.json"


@pytest.fixture
def repository(state_path):
    """Checkpoint repository writing to a temp file."""
    return CheckpointRepository(state_path)


@pytest.fixture
def make_indexer(fake_node, repository):
    """
    Factory for indexers wired to the fake node.

    Returns:
        Callable accepting checkpoint, start_block and max_events
    """
    def _make(
        checkpoint: Checkpoint | None = None,
        start_block: int = 0,
        max_events: int = 1000,
        repo: CheckpointRepository | None = None,
    ) -> EventIndexerService:
        return EventIndexerService(
            fetcher=fake_node,
            repository=repo or repository,
            state=IndexerState(checkpoint),
            factory_address=FACTORY,
            start_block=start_block,
            max_events=max_events,
        )

    return _make
