"""
Comment services: posting, flagging and voting, gated by user permissions.
"""
import logging
from itertools import count
from threading import Lock
from typing import Any, Dict, List, Optional

from app.permissions.manager import UserPermissions
from app.permissions.models import ActionKind, PermissionsError, UserNotFoundError
from app.reputation.votes import get_vote_type, permission_action_for_vote, VALID_VOTE_VALUES
from .models import Comment, CommentActionResult, CommentError

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 512


class CommentService:
    """
    In-memory comment store exposing the permission-gated comment actions.

    Adding and flagging comments go through the atomic permission path since their
    limits are low. Votes have high limits and are checked then recorded, so their
    effects don't serialize on the permissions lock.
    """

    def __init__(self, permissions: UserPermissions):
        self.permissions = permissions
        self._lock = Lock()
        self._comments: Dict[int, Comment] = {}
        self._ids = count(1)

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        with self._lock:
            return self._comments.get(comment_id)

    def list_comments(self, statement_id: int) -> List[Comment]:
        with self._lock:
            return [c for c in self._comments.values() if c.statement_id == statement_id]

    def render(self, comment: Comment) -> Dict[str, Any]:
        """Serialize a comment while no flag or vote can change it."""
        with self._lock:
            return comment.to_dict()

    def add_comment(
        self,
        user_id: int,
        statement_id: int,
        text: str,
        source_url: Optional[str] = None
    ) -> CommentActionResult:
        """Post a comment if the user has the add_comment permission."""
        text = (text or "").strip()
        if not text and not source_url:
            return CommentActionResult(success=False, error="Empty comment", message="Comment is empty")
        if len(text) > MAX_COMMENT_LENGTH:
            return CommentActionResult(
                success=False,
                error="Comment too long",
                message=f"Comments are limited to {MAX_COMMENT_LENGTH} characters"
            )

        try:
            result = self.permissions.check_and_execute(
                user_id,
                ActionKind.ADD_COMMENT,
                lambda: self._store_comment(user_id, statement_id, text, source_url)
            )
        except UserNotFoundError:
            return CommentActionResult(success=False, error="unknown-user", message="Unknown user")

        if not result.allowed:
            return CommentActionResult(success=False, error="forbidden", message=result.message)

        logger.info(f"User {user_id} commented on statement {statement_id}")
        return CommentActionResult(success=True, message="ok", comment=result.value)

    def flag_comment(self, user_id: int, comment_id: int) -> CommentActionResult:
        """Flag a comment if the user has the flag_comment permission."""
        try:
            comment = self.permissions.lock(
                user_id,
                ActionKind.FLAG_COMMENT,
                lambda user: self._apply_flag(user.id, comment_id)
            )
        except PermissionsError as e:
            return CommentActionResult(success=False, error="forbidden", message=e.reason.value)
        except UserNotFoundError:
            return CommentActionResult(success=False, error="unknown-user", message="Unknown user")
        except CommentError as e:
            return CommentActionResult(success=False, error=e.error, message=e.message)

        logger.info(f"User {user_id} flagged comment {comment_id}")
        return CommentActionResult(success=True, message="ok", comment=comment)

    def vote(self, user_id: int, comment_id: int, value: int) -> CommentActionResult:
        """Vote on a comment. A value of 0 removes the user's vote."""
        if value not in VALID_VOTE_VALUES:
            return CommentActionResult(success=False, error="Invalid vote", message="Vote must be -1, 0 or 1")

        comment = self.get_comment(comment_id)
        if comment is None:
            return CommentActionResult(success=False, error="not-found", message="Comment not found")
        if comment.user_id == user_id:
            return CommentActionResult(success=False, error="Own comment", message="Cannot vote for your own comment")

        with self._lock:
            base_value = comment.votes.get(user_id)
        vote_type = get_vote_type(comment.is_fact, base_value, value)
        if vote_type is None:
            return CommentActionResult(success=True, message="unchanged", comment=comment)

        action = permission_action_for_vote(base_value, value)
        try:
            if action is not None:
                self.permissions.ensure(user_id, action)
        except PermissionsError as e:
            return CommentActionResult(success=False, error="forbidden", message=e.reason.value)
        except UserNotFoundError:
            return CommentActionResult(success=False, error="unknown-user", message="Unknown user")

        with self._lock:
            if value == 0:
                comment.votes.pop(user_id, None)
            else:
                comment.votes[user_id] = value

        if action is not None:
            self.permissions.record(user_id, action)

        logger.info(f"User {user_id} vote on comment {comment_id}: {vote_type}")
        return CommentActionResult(success=True, message="ok", comment=comment, vote_type=vote_type)

    # =====================
    # Effects
    # =====================

    def _store_comment(self, user_id: int, statement_id: int, text: str, source_url: Optional[str]) -> Comment:
        with self._lock:
            comment = Comment(
                id=next(self._ids),
                user_id=user_id,
                statement_id=statement_id,
                text=text,
                source_url=source_url
            )
            self._comments[comment.id] = comment
            return comment

    def _apply_flag(self, user_id: int, comment_id: int) -> Comment:
        with self._lock:
            comment = self._comments.get(comment_id)
            if comment is None:
                raise CommentError("not-found", "Comment not found")
            if comment.user_id == user_id:
                raise CommentError("Own comment", "Cannot flag your own comment")
            if user_id in comment.flags:
                raise CommentError("Already flagged", "Comment already flagged")
            comment.flags.add(user_id)
            return comment
