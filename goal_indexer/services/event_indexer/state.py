"""
Shared indexer state.

The checkpoint currently visible to readers. The indexer builds a new
checkpoint from a copy and publishes it in one reference swap, so API
handlers always see either the old or the new state in full.
"""

from goal_indexer.models.checkpoint import Checkpoint


class IndexerState:
    """Holder of the published checkpoint."""

    def __init__(self, checkpoint: Checkpoint | None = None) -> None:
        self._checkpoint = checkpoint if checkpoint is not None else Checkpoint()

    def snapshot(self) -> Checkpoint:
        """
        Current checkpoint.

        Must not be mutated; call copy() before making changes.
        """
        return self._checkpoint

    def publish(self, checkpoint: Checkpoint) -> None:
        """
        Make a new checkpoint visible to readers.

        Raises:
            ValueError: If the checkpoint would move the processed height back
        """
        current = self._checkpoint.last_processed_block
        if checkpoint.last_processed_block < current:
            raise ValueError(
                f"Checkpoint height cannot decrease "
                f"({current} -> {checkpoint.last_processed_block})"
            )
        self._checkpoint = checkpoint
