"""
Factory for creating user permissions components.
"""

from typing import Optional

from .manager import UserPermissions
from .policy import PolicyTable, CONFIRMED_USER_THRESHOLD, MAX_LIMIT
from .routes import create_permissions_routes
from .scheduler import DailyResetScheduler


def create_permissions_module(
    user_loader,
    user_service,
    confirmed_user_threshold: int = CONFIRMED_USER_THRESHOLD,
    max_limit: int = MAX_LIMIT,
    limitation_overrides: Optional[dict] = None,
    reset_hour: int = 0,
) -> dict:
    """
    Create user permissions module.

    Args:
        user_loader: Resolves user ids to users
        user_service: UserService used by the routes to identify the caller
        confirmed_user_threshold: Reputation above which users are confirmed
        max_limit: Value used for "no practical limit" entries
        limitation_overrides: Per-action limitation overrides from configuration
        reset_hour: UTC hour of the daily quota reset

    Returns:
        Dictionary with:
        - manager: UserPermissions instance
        - policy: PolicyTable instance
        - scheduler: DailyResetScheduler (not started)
        - blueprint: Flask blueprint
    """
    policy = PolicyTable.from_config(
        confirmed_user_threshold=confirmed_user_threshold,
        max_limit=max_limit,
        limitation_overrides=limitation_overrides,
    )

    manager = UserPermissions(policy=policy, user_loader=user_loader)
    scheduler = DailyResetScheduler(manager.reset, reset_hour=reset_hour)
    blueprint = create_permissions_routes(manager, user_service)

    return {
        "manager": manager,
        "policy": policy,
        "scheduler": scheduler,
        "blueprint": blueprint,
    }
