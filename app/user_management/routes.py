"""
User management routes.
"""
from flask import Blueprint, jsonify

from app.permissions.models import UserNotFoundError
from .services import UserService


def create_user_routes(user_service: UserService, tier_of=None) -> Blueprint:
    """Create user management routes.

    Args:
        user_service: Service resolving the current user
        tier_of: Optional callable mapping a reputation to its QuotaTier
    """
    bp = Blueprint('user_management', __name__)

    @bp.route("/me", methods=["GET"])
    def me():
        """Get the current user's id and reputation."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401

        try:
            user = user_service.get_user(uid)
        except UserNotFoundError:
            return jsonify({"error": "unknown-user"}), 404

        body = {
            "id": user.id,
            "reputation": user.reputation,
            "is_admin": user_service.is_admin_user(uid),
        }
        if tier_of is not None:
            body["tier"] = tier_of(user.reputation).name.lower()
        return jsonify(body)

    return bp
