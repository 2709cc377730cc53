"""
Data models for the user permissions system.
"""

from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import Any, Optional, Union


class ActionKind(Enum):
    """Mutating user actions gated by reputation and daily quotas."""

    # Comments
    ADD_COMMENT = "add_comment"
    FLAG_COMMENT = "flag_comment"

    # Videos
    ADD_VIDEO = "add_video"

    # Votes
    VOTE_UP = "vote_up"
    VOTE_DOWN = "vote_down"

    # History moderation
    APPROVE_HISTORY_ACTION = "approve_history_action"
    FLAG_HISTORY_ACTION = "flag_history_action"

    # Statements
    ADD_STATEMENT = "add_statement"
    EDIT_OTHER_STATEMENT = "edit_other_statement"
    REMOVE_STATEMENT = "remove_statement"
    RESTORE_STATEMENT = "restore_statement"

    # Speakers
    ADD_SPEAKER = "add_speaker"
    REMOVE_SPEAKER = "remove_speaker"
    EDIT_SPEAKER = "edit_speaker"
    RESTORE_SPEAKER = "restore_speaker"

    @classmethod
    def parse(cls, action: Union["ActionKind", str]) -> Optional["ActionKind"]:
        """Return the matching ActionKind, or None for an unknown action."""
        if isinstance(action, cls):
            return action
        try:
            return cls(action)
        except ValueError:
            return None

    @classmethod
    def get_allowed_actions(cls) -> set[str]:
        """Get all allowed action strings."""
        return {a.value for a in cls}


class QuotaTier(IntEnum):
    """Reputation bands, also the index into a limitation triple."""
    NEGATIVE = 0    # Reputation below zero
    NEW_USER = 1    # Between zero and the confirmed threshold
    CONFIRMED = 2   # Above the confirmed threshold


class PermissionDenial(Enum):
    """Reasons a permission check can fail."""
    UNKNOWN_ACTION = "unknown action"
    INSUFFICIENT_REPUTATION = "not enough reputation"
    LIMIT_REACHED = "limit reached"


@dataclass(frozen=True)
class User:
    """The part of a user the permissions system reads."""
    id: int
    reputation: int = 0


@dataclass
class PermissionResult:
    """Result of a permission check operation."""
    allowed: bool
    action: Optional[str] = None
    reason: Optional[PermissionDenial] = None
    value: Any = None  # Return value of the effect for check_and_execute
    limit: Optional[int] = None
    used: Optional[int] = None

    @property
    def message(self) -> str:
        return self.reason.value if self.reason else "ok"

    @property
    def remaining(self) -> Optional[int]:
        if self.limit is None or self.used is None:
            return None
        return max(0, self.limit - self.used)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "allowed": self.allowed,
            "action": self.action,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "limit": self.limit,
            "used": self.used,
            "remaining": self.remaining,
        }


class PermissionsError(Exception):
    """Raised by the raising entry points when a user lacks a permission."""

    def __init__(self, reason: PermissionDenial, action: Optional[str] = None):
        self.reason = reason
        self.action = action
        super().__init__(reason.value)


class UnknownActionError(PermissionsError, KeyError):
    """Raised when a policy lookup is made for an action outside the catalog."""

    def __init__(self, action: Any):
        name = action.value if isinstance(action, ActionKind) else str(action)
        super().__init__(PermissionDenial.UNKNOWN_ACTION, action=name)

    def __str__(self) -> str:
        return f"unknown action: {self.action}"


class UserNotFoundError(LookupError):
    """Raised when a user id cannot be resolved."""

    def __init__(self, user_id: Any):
        self.user_id = user_id
        super().__init__(f"user {user_id} not found")
