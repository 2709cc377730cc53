"""
Static permission policy: reputation floors and tiered daily limits per action.
"""

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from .models import ActionKind, QuotaTier, User, UnknownActionError

logger = logging.getLogger(__name__)

CONFIRMED_USER_THRESHOLD = 50
MAX_LIMIT = 100  # A reasonable limit that users should never exceed

MIN_REPUTATIONS: Dict[ActionKind, int] = {
    ActionKind.ADD_COMMENT: -25,
    ActionKind.ADD_VIDEO: 15,
    ActionKind.ADD_SPEAKER: 15,
    ActionKind.EDIT_SPEAKER: 30,
    ActionKind.ADD_STATEMENT: 15,
    ActionKind.VOTE_UP: 15,
    ActionKind.APPROVE_HISTORY_ACTION: 0,
    ActionKind.FLAG_COMMENT: 40,
    ActionKind.FLAG_HISTORY_ACTION: 40,
    ActionKind.VOTE_DOWN: 80,
    ActionKind.EDIT_OTHER_STATEMENT: 0,
    ActionKind.REMOVE_STATEMENT: 0,
    ActionKind.RESTORE_STATEMENT: 0,
    ActionKind.REMOVE_SPEAKER: 0,
    ActionKind.RESTORE_SPEAKER: 0,
}


def default_limitations(max_limit: int = MAX_LIMIT) -> Dict[ActionKind, Tuple[int, int, int]]:
    """
    Build the default limitation table.

    Each entry reads (negative_users_limit, new_users_limit, confirmed_users_limit).
    """
    return {
        ActionKind.ADD_COMMENT: (3, 10, max_limit),
        ActionKind.ADD_VIDEO: (0, 3, 10),
        # Vote
        ActionKind.VOTE_UP: (0, 10, max_limit),
        ActionKind.VOTE_DOWN: (0, 10, max_limit),
        # Flag / Approve
        ActionKind.APPROVE_HISTORY_ACTION: (0, 10, max_limit),
        ActionKind.FLAG_HISTORY_ACTION: (0, 5, max_limit),
        ActionKind.FLAG_COMMENT: (0, 1, max_limit),
        # Statements
        ActionKind.ADD_STATEMENT: (0, 10, max_limit),
        ActionKind.EDIT_OTHER_STATEMENT: (0, 3, max_limit),
        ActionKind.REMOVE_STATEMENT: (0, 1, max_limit),
        ActionKind.RESTORE_STATEMENT: (0, 2, max_limit),
        # Speakers
        ActionKind.ADD_SPEAKER: (0, 10, 50),
        ActionKind.REMOVE_SPEAKER: (0, 0, max_limit),
        ActionKind.EDIT_SPEAKER: (0, 5, max_limit),
        ActionKind.RESTORE_SPEAKER: (0, 2, max_limit),
    }


def _as_action(key: Union[ActionKind, str]) -> ActionKind:
    action = ActionKind.parse(key)
    if action is None:
        raise ValueError(f"Unknown action in policy table: {key}")
    return action


def validate_limitation(action: str, value) -> Tuple[int, int, int]:
    """
    Check a limitation entry and return it as a tuple.

    Raises:
        ValueError: If the entry is not three non-negative integers
    """
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 3
        or not all(isinstance(v, int) and not isinstance(v, bool) and v >= 0 for v in value)
    ):
        raise ValueError(
            f"Limitation for {action} must be three non-negative integers, got {value!r}"
        )
    return tuple(value)


class PolicyTable:
    """
    Read-only permission policy.

    Holds the minimum reputation needed for each action and the per-tier daily
    limits. Instances are never mutated after construction, so they can be shared
    between threads without locking.

    Both tables must name the same actions: an action with a reputation floor
    always has a limitation entry.
    """

    def __init__(
        self,
        min_reputations: Optional[Mapping[ActionKind, int]] = None,
        limitations: Optional[Mapping[ActionKind, Tuple[int, int, int]]] = None,
        confirmed_user_threshold: int = CONFIRMED_USER_THRESHOLD,
        max_limit: int = MAX_LIMIT,
    ):
        """
        Raises:
            ValueError: If the tables name different actions or a limitation is malformed
        """
        if min_reputations is None:
            min_reputations = MIN_REPUTATIONS
        if limitations is None:
            limitations = default_limitations(max_limit)

        min_reputations = {_as_action(k): v for k, v in min_reputations.items()}
        checked_limitations = {}
        for key, value in limitations.items():
            action = _as_action(key)
            checked_limitations[action] = validate_limitation(action.value, value)
        limitations = checked_limitations

        mismatched = set(min_reputations) ^ set(limitations)
        if mismatched:
            names = ", ".join(sorted(a.value for a in mismatched))
            raise ValueError(
                f"Reputation and limitation tables must list the same actions, mismatched: {names}"
            )

        self.confirmed_user_threshold = confirmed_user_threshold
        self.max_limit = max_limit
        self._min_reputations = MappingProxyType(min_reputations)
        self._limitations = MappingProxyType(limitations)

    @classmethod
    def from_config(
        cls,
        confirmed_user_threshold: int = CONFIRMED_USER_THRESHOLD,
        max_limit: int = MAX_LIMIT,
        limitation_overrides: Optional[Mapping[str, list]] = None,
    ) -> "PolicyTable":
        """
        Create a PolicyTable from configuration values.

        Args:
            confirmed_user_threshold: Reputation above which users are confirmed
            max_limit: Value used for "no practical limit" entries
            limitation_overrides: Mapping of action string to a three item list

        Raises:
            ValueError: If an override names an unknown action or is malformed
        """
        limitations = default_limitations(max_limit)
        for key, value in (limitation_overrides or {}).items():
            action = ActionKind.parse(key)
            if action is None:
                raise ValueError(f"Unknown action in limitations config: {key}")
            limitations[action] = validate_limitation(key, value)
            logger.info(f"Overriding limitation for {key}: {limitations[action]}")

        return cls(
            limitations=limitations,
            confirmed_user_threshold=confirmed_user_threshold,
            max_limit=max_limit,
        )

    def tier_index(self, reputation: int) -> QuotaTier:
        """Get the quota tier for a reputation score."""
        if reputation > self.confirmed_user_threshold:
            return QuotaTier.CONFIRMED
        if reputation >= 0:
            return QuotaTier.NEW_USER
        return QuotaTier.NEGATIVE

    def min_reputation(self, action: Union[ActionKind, str]) -> Optional[int]:
        """Get the reputation needed for an action, or None if the action is unknown."""
        kind = ActionKind.parse(action)
        if kind is None:
            return None
        return self._min_reputations.get(kind)

    def limitation(self, user: User, action: Union[ActionKind, str]) -> int:
        """
        Get the number of times a user may perform an action per period.

        Raises:
            UnknownActionError: If the action has no limitation entry
        """
        kind = ActionKind.parse(action)
        if kind is None or kind not in self._limitations:
            raise UnknownActionError(action)
        return self._limitations[kind][self.tier_index(user.reputation)]

    def is_known(self, action: Union[ActionKind, str]) -> bool:
        return self.min_reputation(action) is not None

    def limitations(self) -> Dict[str, Tuple[int, int, int]]:
        """Limitation table keyed by action string, for display."""
        return {k.value: v for k, v in self._limitations.items()}

    def min_reputations(self) -> Dict[str, int]:
        """Minimum reputation table keyed by action string, for display."""
        return {k.value: v for k, v in self._min_reputations.items()}

    def to_dict(self) -> dict:
        return {
            "confirmed_user_threshold": self.confirmed_user_threshold,
            "max_limit": self.max_limit,
            "min_reputations": self.min_reputations(),
            "limitations": {k: list(v) for k, v in self.limitations().items()},
        }
