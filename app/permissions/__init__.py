"""
User permissions module: reputation floors and daily action quotas.
Users are split in Negative, New and Confirmed tiers based on their reputation.
"""

from .models import (
    ActionKind,
    QuotaTier,
    PermissionDenial,
    PermissionResult,
    PermissionsError,
    UnknownActionError,
    User,
    UserNotFoundError,
)
from .policy import PolicyTable
from .manager import UserPermissions

__all__ = [
    "ActionKind",
    "QuotaTier",
    "PermissionDenial",
    "PermissionResult",
    "PermissionsError",
    "UnknownActionError",
    "User",
    "UserNotFoundError",
    "PolicyTable",
    "UserPermissions",
]
