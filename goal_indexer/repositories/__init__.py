from goal_indexer.repositories.checkpoint_repository import CheckpointRepository

__all__ = ["CheckpointRepository"]
