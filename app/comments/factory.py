from typing import Dict, Any

from app.permissions.manager import UserPermissions
from .services import CommentService
from .routes import create_comments_routes


def create_comments_module(permissions: UserPermissions, user_service) -> Dict[str, Any]:
    """Create and configure the comment components."""

    comment_service = CommentService(permissions)
    comments_bp = create_comments_routes(comment_service, user_service)

    return {
        "blueprint": comments_bp,
        "service": comment_service
    }
