"""
Reputation change data models.

This module contains the user action types, the entities they target and the
Pydantic model describing how an action changes reputations.
"""

from enum import Enum, IntEnum
from pydantic import BaseModel, Field


class UserActionType(Enum):
    """Types of user actions that can change reputations."""
    CREATE = "create"
    REMOVE = "remove"
    UPDATE = "update"
    DELETE = "delete"
    ADD = "add"
    RESTORE = "restore"
    APPROVE = "approve"
    FLAG = "flag"
    VOTE_UP = "vote_up"
    VOTE_DOWN = "vote_down"
    SELF_VOTE = "self_vote"
    REVERT_VOTE_UP = "revert_vote_up"
    REVERT_VOTE_DOWN = "revert_vote_down"
    REVERT_SELF_VOTE = "revert_self_vote"
    EMAIL_CONFIRMED = "email_confirmed"
    COLLECTIVE_MODERATION = "collective_moderation"
    ABUSED_FLAG = "abused_flag"
    CONFIRMED_FLAG = "confirmed_flag"
    ACTION_BANNED = "action_banned"

    @classmethod
    def is_valid(cls, action_type: str) -> bool:
        """Check if an action type string is valid."""
        try:
            cls(action_type)
            return True
        except ValueError:
            return False


class ActionEntity(IntEnum):
    """Entities a user action can target."""
    VIDEO = 1
    SPEAKER = 2
    STATEMENT = 3
    COMMENT = 4
    FACT = 5

    @classmethod
    def from_name(cls, name: str) -> "ActionEntity":
        """Get an entity from its lowercase name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown action entity: {name}")


class ReputationChange(BaseModel):
    """Reputation deltas applied when an action is performed."""
    author: int = Field(description="Change applied to the user performing the action")
    target: int = Field(description="Change applied to the user owning the targeted entity")

    @classmethod
    def from_pair(cls, pair) -> "ReputationChange":
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ValueError(f"Reputation change must be a [author, target] pair, got {pair!r}")
        return cls(author=pair[0], target=pair[1])
