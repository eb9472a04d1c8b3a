"""
Application constants.

Centralized constants for the indexer.
"""

# ========================================================================
# QUERY API
# ========================================================================

# Number of activity entries returned when limit is missing or unparseable
DEFAULT_ACTIVITY_LIMIT = 8

# Separator for the vaults filter query parameter
VAULT_FILTER_SEPARATOR = ","

# HTTP server cleanup timeout on shutdown (seconds)
HTTP_SHUTDOWN_TIMEOUT = 5

# ========================================================================
# INDEXER
# ========================================================================

# Scheduler job identifier
INDEXER_JOB_ID = "goal_event_indexer"

# Separator between transaction hash and log index in activity ids
ACTIVITY_ID_SEPARATOR = "-"

# Thread pool size for synchronous web3 calls
WEB3_EXECUTOR_WORKERS = 8
