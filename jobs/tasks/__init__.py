from jobs.tasks.event_indexer_task import EventIndexerTask

__all__ = ["EventIndexerTask"]
