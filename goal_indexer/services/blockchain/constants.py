"""
Blockchain constants.

Event ABI definitions for the goal factory and goal vault contracts.
"""

from goal_indexer.models.types import EventName

GOAL_CREATED_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "name": "goalId", "type": "uint256"},
        {"indexed": True, "name": "owner", "type": "address"},
        {"indexed": False, "name": "vault", "type": "address"},
        {"indexed": False, "name": "name", "type": "string"},
        {"indexed": False, "name": "targetAmount", "type": "uint256"},
        {"indexed": False, "name": "strategy", "type": "address"},
    ],
    "name": "GoalCreated",
    "type": "event",
}

DEPOSITED_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "name": "from", "type": "address"},
        {"indexed": True, "name": "beneficiary", "type": "address"},
        {"indexed": False, "name": "amount", "type": "uint256"},
        {"indexed": False, "name": "sharesMinted", "type": "uint256"},
    ],
    "name": "Deposited",
    "type": "event",
}

WITHDRAWN_EVENT_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "name": "to", "type": "address"},
        {"indexed": False, "name": "amount", "type": "uint256"},
        {"indexed": False, "name": "sharesBurned", "type": "uint256"},
    ],
    "name": "Withdrawn",
    "type": "event",
}

# Single-event ABIs keyed by event name
EVENT_ABIS = {
    EventName.GOAL_CREATED: [GOAL_CREATED_EVENT_ABI],
    EventName.DEPOSITED: [DEPOSITED_EVENT_ABI],
    EventName.WITHDRAWN: [WITHDRAWN_EVENT_ABI],
}

# Events emitted by every goal vault
VAULT_EVENTS = (EventName.DEPOSITED, EventName.WITHDRAWN)
