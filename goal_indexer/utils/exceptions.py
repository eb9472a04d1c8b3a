"""
Indexer exceptions.

Defines categorized exception types for proper error handling.
"""


class IndexerError(Exception):
    """Base exception for indexer errors."""
    pass


class SourceUnavailable(IndexerError):
    """
    Raised when the node is unreachable, times out, or returns data
    that cannot be decoded.

    Aborts the current cycle; the checkpoint stays as it was.
    """
    pass


class PersistenceFailure(IndexerError):
    """Raised when the checkpoint cannot be written durably."""
    pass


class MalformedStoredState(IndexerError):
    """Raised when the stored checkpoint cannot be parsed."""
    pass

