"""
User management services for identifying the current user.
"""
from typing import Optional, List
from flask import request

from app.permissions.models import User
from .loader import UserLoader


class UserService:
    """Service for resolving the current user and admin rights."""

    def __init__(self, user_loader: UserLoader, admin_user_ids: List[str]):
        self.user_loader = user_loader
        self.admin_user_ids = admin_user_ids

    def get_current_user_id(self) -> Optional[int]:
        """Get the current user ID from cookies."""
        uid = (request.cookies.get("uid") or "").strip()
        if not uid.isdigit():
            return None
        return int(uid)

    def is_authenticated(self) -> bool:
        """Check if the current user is authenticated."""
        return self.get_current_user_id() is not None

    def is_admin_user(self, uid) -> bool:
        """Check if the user is an admin based on configuration."""
        return str(uid).strip() in self.admin_user_ids

    def get_user(self, uid: int) -> User:
        """Load a user, raising UserNotFoundError if absent."""
        return self.user_loader.load_by_id(uid)

    def require_auth_json(self) -> tuple[Optional[int], Optional[dict]]:
        """Require authentication for JSON endpoints, return error if not authenticated."""
        uid = self.get_current_user_id()
        if uid is None:
            return None, {"error": "no-uid"}
        return uid, None
