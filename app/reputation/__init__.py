"""
Reputation change configuration and vote classification.
"""

from .models import UserActionType, ActionEntity, ReputationChange
from .config_loader import ReputationChanges, convert, load
from .votes import get_vote_type, get_vote_direction, permission_action_for_vote

__all__ = [
    "UserActionType",
    "ActionEntity",
    "ReputationChange",
    "ReputationChanges",
    "convert",
    "load",
    "get_vote_type",
    "get_vote_direction",
    "permission_action_for_vote",
]
