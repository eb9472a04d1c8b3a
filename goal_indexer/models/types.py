"""
Standard type definitions for indexer models.
"""

from enum import StrEnum


class ActivityType(StrEnum):
    """Kind of vault activity recorded in the feed."""

    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"


class EventName(StrEnum):
    """Contract event names consumed by the indexer."""

    GOAL_CREATED = "GoalCreated"
    DEPOSITED = "Deposited"
    WITHDRAWN = "Withdrawn"


# Vault event -> activity type
ACTIVITY_BY_EVENT = {
    EventName.DEPOSITED: ActivityType.DEPOSIT,
    EventName.WITHDRAWN: ActivityType.WITHDRAW,
}
