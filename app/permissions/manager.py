"""
User permissions manager: reputation checks and daily action quotas.
"""

import copy
import logging
from threading import RLock
from typing import Callable, Dict, Optional, TypeVar, Union

from .models import (
    ActionKind,
    PermissionDenial,
    PermissionResult,
    PermissionsError,
    User,
)
from .policy import PolicyTable

logger = logging.getLogger(__name__)

T = TypeVar("T")
UserRef = Union[User, int]


class UserPermissions:
    """
    Checks and records user actions against the permission policy.

    State is a dict looking like this:

        {
            user_id: {
                ActionKind.ADD_COMMENT: 42,  # Occurrences in the current period
            }
        }

    One instance is created at startup by ``create_permissions_module`` and shared
    by every call site. ``reset`` is meant to be called once a day by the reset
    scheduler. The state is held in memory only, a restart starts a fresh period.

    Every operation runs under a single lock. ``check_and_execute`` holds it while
    the caller's effect runs, so a slow effect delays every other permission check
    in the process and an effect that never returns stalls them all.
    """

    def __init__(self, policy: Optional[PolicyTable] = None, user_loader=None):
        """
        Initialize UserPermissions.

        Args:
            policy: PolicyTable with reputation floors and limits
            user_loader: Object with ``load_by_id(user_id) -> User``, used when
                operations are given a bare user id
        """
        self.policy = policy or PolicyTable()
        self.user_loader = user_loader
        self._lock = RLock()  # Re-entrant so effects may query occurrences
        self._state: Dict[int, Dict[ActionKind, int]] = {}
        logger.info("User permissions / limitations watcher starting")

    # =====================
    # Public API
    # =====================

    def check(self, user: UserRef, action: Union[ActionKind, str]) -> PermissionResult:
        """
        Check whether a user may perform an action. Never modifies state.

        Examples:
            >>> permissions = UserPermissions()
            >>> user = User(id=1, reputation=42)
            >>> permissions.check(user, "add_comment").allowed
            True
            >>> permissions.check(user, "eat_unicorn").message
            'unknown action'
            >>> permissions.check(User(id=1, reputation=-42), "remove_statement").message
            'not enough reputation'
        """
        user = self._resolve_user(user)
        with self._lock:
            return self._ensure_permissions(self._state, user, action)

    def ensure(self, user: UserRef, action: Union[ActionKind, str]) -> PermissionResult:
        """
        Same as ``check`` but raises on denial.

        Raises:
            PermissionsError: If the user doesn't have the permission
        """
        result = self.check(user, action)
        if not result.allowed:
            raise PermissionsError(result.reason, action=result.action)
        return result

    def record(self, user: UserRef, action: Union[ActionKind, str]) -> int:
        """
        Record one occurrence of an action.

        Doesn't verify the user's limitation nor reputation, callers must check that
        themselves or use ``check_and_execute``.

        Returns:
            The new occurrence count
        """
        user = self._resolve_user(user)
        kind = self._require_action(action)
        with self._lock:
            count = self._record_action(self._state, user, kind)
        logger.debug(f"Recorded {kind.value} for user {user.id} -> {count}")
        return count

    def check_and_execute(
        self,
        user: UserRef,
        action: Union[ActionKind, str],
        effect: Callable[[], T],
    ) -> PermissionResult:
        """
        The safe way to enforce limitations: state stays locked while ``effect`` runs.

        The action is recorded only if the check passes and ``effect`` returns.
        If ``effect`` raises, nothing is recorded and the exception propagates
        unchanged. Should be used for sensitive actions; actions with high limits
        can use ``check`` + ``record`` instead to avoid serializing their effects.

        Returns:
            PermissionResult, with ``value`` set to the effect's return value when allowed
        """
        user = self._resolve_user(user)
        with self._lock:
            result = self._ensure_permissions(self._state, user, action)
            if not result.allowed:
                logger.info(
                    f"Denied {result.action} for user {user.id}: {result.message}"
                )
                return result

            try:
                value = effect()
            except Exception:
                logger.warning(
                    f"Effect for {result.action} failed for user {user.id}, nothing recorded"
                )
                raise

            count = self._record_action(self._state, user, ActionKind(result.action))

        result.value = value
        result.used = count
        return result

    def lock(self, user: UserRef, action: Union[ActionKind, str], func: Callable[[User], T]) -> T:
        """
        Raising variant of ``check_and_execute``; ``func`` receives the resolved user.

        If user is an integer, it will be loaded through the user loader.

        Raises:
            PermissionsError: If the user doesn't have the permission
        """
        resolved = self._resolve_user(user)
        result = self.check_and_execute(resolved, action, lambda: func(resolved))
        if not result.allowed:
            raise PermissionsError(result.reason, action=result.action)
        return result.value

    def occurrences(self, user: UserRef, action: Union[ActionKind, str]) -> int:
        """Number of times the user performed the action in the current period."""
        user_id = user.id if isinstance(user, User) else self._resolve_user(user).id
        kind = ActionKind.parse(action)
        with self._lock:
            return self._state.get(user_id, {}).get(kind, 0)

    def limitation(self, user: UserRef, action: Union[ActionKind, str]) -> int:
        return self.policy.limitation(self._resolve_user(user), action)

    def remaining(self, user: UserRef, action: Union[ActionKind, str]) -> int:
        """Occurrences left in the current period, 0 when the action is not allowed."""
        result = self.check(user, action)
        if result.reason in (PermissionDenial.UNKNOWN_ACTION, PermissionDenial.INSUFFICIENT_REPUTATION):
            return 0
        return result.remaining

    def quota_overview(self, user: UserRef) -> Dict[str, dict]:
        """
        Get the status of every action for a user, for display.

        Returns a dict keyed by action string with:
        - min_reputation: Reputation floor
        - limit: Limit for the user's tier
        - used: Occurrences this period
        - remaining: Occurrences left
        - allowed / reason: Result of ``check``
        """
        user = self._resolve_user(user)
        overview = {}
        with self._lock:
            for kind in ActionKind:
                if not self.policy.is_known(kind):
                    continue
                result = self._ensure_permissions(self._state, user, kind)
                overview[kind.value] = {
                    "min_reputation": self.policy.min_reputation(kind),
                    "limit": result.limit,
                    "used": result.used,
                    "remaining": 0 if result.reason == PermissionDenial.INSUFFICIENT_REPUTATION else result.remaining,
                    "allowed": result.allowed,
                    "reason": result.reason.value if result.reason else None,
                }
        return overview

    def reset(self) -> None:
        """
        Reset today's quotas.

        Only intended to be called by the daily reset scheduler (or an admin).
        """
        with self._lock:
            users = len(self._state)
            self._state = {}
        logger.info(f"Reset today's quotas ({users} users tracked)")

    def usage_snapshot(self) -> Dict[int, Dict[str, int]]:
        """Copy of the current usage, keyed by user id then action string."""
        with self._lock:
            state = copy.deepcopy(self._state)
        return {
            user_id: {kind.value: count for kind, count in actions.items()}
            for user_id, actions in state.items()
        }

    # =====================
    # Private helper methods
    # =====================

    def _resolve_user(self, user: UserRef) -> User:
        if isinstance(user, User):
            return user
        if isinstance(user, int) and not isinstance(user, bool):
            if self.user_loader is None:
                raise ValueError("A user loader is required to check permissions by user id")
            return self.user_loader.load_by_id(user)
        raise TypeError(f"Expected a User or an integer user id, got {type(user).__name__}")

    def _require_action(self, action: Union[ActionKind, str]) -> ActionKind:
        kind = ActionKind.parse(action)
        if kind is None or not self.policy.is_known(kind):
            raise PermissionsError(PermissionDenial.UNKNOWN_ACTION, action=str(action))
        return kind

    def _ensure_permissions(
        self,
        state: Dict[int, Dict[ActionKind, int]],
        user: User,
        action: Union[ActionKind, str],
    ) -> PermissionResult:
        kind = ActionKind.parse(action)
        action_min_reputation = self.policy.min_reputation(kind) if kind else None
        if action_min_reputation is None:
            name = action.value if isinstance(action, ActionKind) else str(action)
            return PermissionResult(
                allowed=False, action=name, reason=PermissionDenial.UNKNOWN_ACTION
            )

        limit = self.policy.limitation(user, kind)
        used = state.get(user.id, {}).get(kind, 0)

        if user.reputation < action_min_reputation:
            reason = PermissionDenial.INSUFFICIENT_REPUTATION
        elif used >= limit:
            reason = PermissionDenial.LIMIT_REACHED
        else:
            reason = None

        return PermissionResult(
            allowed=reason is None,
            action=kind.value,
            reason=reason,
            limit=limit,
            used=used,
        )

    def _record_action(
        self,
        state: Dict[int, Dict[ActionKind, int]],
        user: User,
        action: ActionKind,
    ) -> int:
        user_actions = state.setdefault(user.id, {})
        user_actions[action] = user_actions.get(action, 0) + 1
        return user_actions[action]
