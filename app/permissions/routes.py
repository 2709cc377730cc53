"""
Permission routes for displaying limitations and the current user's quota.
"""

import logging
from flask import Blueprint, jsonify

from .manager import UserPermissions
from .models import UserNotFoundError

logger = logging.getLogger(__name__)


def create_permissions_routes(permissions: UserPermissions, user_service) -> Blueprint:
    """Create Flask routes for permission information."""

    bp = Blueprint('permissions', __name__, url_prefix="/permissions")

    @bp.route("/limitations", methods=["GET"])
    def get_limitations():
        """Get reputation floors and per-tier limits for every action."""
        return jsonify(permissions.policy.to_dict())

    @bp.route("/quota", methods=["GET"])
    def get_user_quota():
        """Get the current user's quota for every action."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401

        try:
            user = user_service.get_user(uid)
        except UserNotFoundError:
            return jsonify({"error": "unknown-user"}), 404

        return jsonify({
            "success": True,
            "user_id": user.id,
            "reputation": user.reputation,
            "tier": permissions.policy.tier_index(user.reputation).name.lower(),
            "quota": permissions.quota_overview(user),
        })

    @bp.route("/reset", methods=["POST"])
    def reset_quotas():
        """Reset every user's quota. Admin only."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401
        if not user_service.is_admin_user(uid):
            return jsonify({"error": "forbidden"}), 403

        logger.info(f"Quotas reset requested by admin {uid}")
        permissions.reset()
        return jsonify({"status": "ok"})

    @bp.route("/usage", methods=["GET"])
    def get_usage():
        """Get all usage statistics for the admin dashboard."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401
        if not user_service.is_admin_user(uid):
            return jsonify({"error": "forbidden"}), 403

        usage = permissions.usage_snapshot()
        return jsonify({
            "tracked_users": len(usage),
            "usage": {str(k): v for k, v in usage.items()},
        })

    return bp
