"""
Checkpoint repository.

Durable storage for the indexer checkpoint as a single JSON document,
rewritten wholesale with atomic replace semantics.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from loguru import logger

from goal_indexer.models.checkpoint import Checkpoint
from goal_indexer.utils.exceptions import MalformedStoredState, PersistenceFailure


class CheckpointRepository:
    """
    Repository for the indexer checkpoint.

    A concurrent reader of the file sees either the previous or the new
    document, never a partial write: the new document is written to a
    temporary file in the same directory and moved over the target.
    """

    def __init__(self, path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            path: Checkpoint file path
        """
        self.path = Path(path)

    async def load(self) -> Checkpoint:
        """
        Load checkpoint from disk.

        Returns:
            Stored checkpoint, or an empty one if no state exists or the
            stored state is unreadable
        """
        return await asyncio.to_thread(self._load_sync)

    async def save(self, checkpoint: Checkpoint) -> None:
        """
        Persist full checkpoint.

        Args:
            checkpoint: Checkpoint to write

        Raises:
            PersistenceFailure: If the file cannot be written
        """
        payload = json.dumps(checkpoint.to_dict(), indent=2)
        await asyncio.to_thread(self._write_sync, payload)

    def _load_sync(self) -> Checkpoint:
        if not self.path.exists():
            logger.info(f"[Checkpoint] No state at {self.path}, starting fresh")
            return Checkpoint()

        try:
            raw = self.path.read_bytes()
            checkpoint = self._parse(raw)
        except (OSError, MalformedStoredState) as e:
            logger.error(
                f"[Checkpoint] Failed to read state file {self.path}: {e}. "
                f"Discarding stored state and indexing from the start block"
            )
            return Checkpoint()

        logger.info(
            f"[Checkpoint] Loaded state: block {checkpoint.last_processed_block}, "
            f"{len(checkpoint.vaults)} vaults, "
            f"{len(checkpoint.activities)} activities"
        )
        return checkpoint

    @staticmethod
    def _parse(raw: bytes) -> Checkpoint:
        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedStoredState(f"State file is not UTF-8: {e}") from e
        except (json.JSONDecodeError, RecursionError) as e:
            raise MalformedStoredState(f"Invalid JSON: {e}") from e
        return Checkpoint.from_dict(data)

    def _write_sync(self, payload: str) -> None:
        directory = self.path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceFailure(
                f"Failed to write checkpoint to {self.path}: {e}"
            ) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError as e:
                    logger.warning(
                        f"[Checkpoint] Could not remove temp file {tmp_path}: {e}"
                    )
