"""
Factory for creating user management module.
"""
from pathlib import Path
from typing import List, Optional
from .loader import JsonUserLoader, UserLoader
from .services import UserService
from .routes import create_user_routes


def create_user_management_module(
    user_data_dir: Path,
    admin_user_ids: List[str],
    user_loader: Optional[UserLoader] = None,
    tier_of=None
) -> dict:
    """Create user management module with loader, service and routes.

    Args:
        user_data_dir: Directory holding one JSON file per user
        admin_user_ids: List of admin user IDs
        user_loader: Loader to use instead of the JSON files in user_data_dir
        tier_of: Optional callable mapping a reputation to its QuotaTier

    Returns:
        Dictionary containing the loader, service and blueprint
    """
    if user_loader is None:
        # Create user data directory
        user_data_dir.mkdir(parents=True, exist_ok=True)
        user_loader = JsonUserLoader(user_data_dir)

    # Create user service
    user_service = UserService(user_loader, admin_user_ids)

    # Create routes
    blueprint = create_user_routes(user_service, tier_of=tier_of)

    return {
        "loader": user_loader,
        "service": user_service,
        "blueprint": blueprint
    }
