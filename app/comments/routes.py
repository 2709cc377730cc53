from flask import Blueprint, request, jsonify

from .services import CommentService

ERROR_STATUS = {
    "forbidden": 403,
    "unknown-user": 404,
    "not-found": 404,
    "Already flagged": 409,
}


def _error_response(result):
    status_code = ERROR_STATUS.get(result.error, 400)
    body = {"error": result.error, "message": result.message}
    if result.error == "forbidden":
        body["reason"] = result.message
    return jsonify(body), status_code


def create_comments_routes(comment_service: CommentService, user_service):
    """Create Flask routes for comment actions."""

    comments_bp = Blueprint('comments', __name__)

    @comments_bp.route("/statements/<int:statement_id>/comments", methods=["GET"])
    def list_comments(statement_id):
        """List comments posted on a statement."""
        comments = comment_service.list_comments(statement_id)
        return jsonify({"comments": [comment_service.render(c) for c in comments]})

    @comments_bp.route("/comments", methods=["POST"])
    def add_comment():
        """Post a comment on a statement."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401

        data = request.get_json(silent=True)
        if not data or not isinstance(data.get("statement_id"), int):
            return jsonify({"error": "Missing statement_id"}), 400

        result = comment_service.add_comment(
            uid,
            data["statement_id"],
            data.get("text", ""),
            source_url=data.get("source_url")
        )
        if not result.success:
            return _error_response(result)
        return jsonify({"success": True, "comment": comment_service.render(result.comment)}), 201

    @comments_bp.route("/comments/<int:comment_id>/flag", methods=["POST"])
    def flag_comment(comment_id):
        """Flag a comment."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401

        result = comment_service.flag_comment(uid, comment_id)
        if not result.success:
            return _error_response(result)
        return jsonify({"success": True, "comment": comment_service.render(result.comment)})

    @comments_bp.route("/comments/<int:comment_id>/vote", methods=["POST"])
    def vote(comment_id):
        """Vote on a comment."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 401

        data = request.get_json(silent=True) or {}
        value = data.get("value")
        if not isinstance(value, int) or isinstance(value, bool):
            return jsonify({"error": "Missing vote value"}), 400

        result = comment_service.vote(uid, comment_id, value)
        if not result.success:
            return _error_response(result)
        return jsonify({
            "success": True,
            "vote_type": result.vote_type,
            "comment": comment_service.render(result.comment)
        })

    return comments_bp
