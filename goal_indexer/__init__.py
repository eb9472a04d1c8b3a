"""
Goal vault activity indexer.

Indexes goal factory and vault events from an EVM node and serves
vault status and an activity feed over HTTP.
"""

__version__ = "0.1.0"
