"""
Vote classification.

Vote values are -1 (down), 0 (none) and 1 (up). A vote on a comment that carries a
source counts as a fact vote.
"""

from typing import Optional

from app.permissions.models import ActionKind

VALID_VOTE_VALUES = (-1, 0, 1)


def get_vote_direction(base_value: Optional[int], value: int) -> str:
    """
    Get the direction of a vote change.

    Examples:
        >>> get_vote_direction(None, 1)
        'up'
        >>> get_vote_direction(1, -1)
        'up_to_down'
    """
    if base_value is None or base_value == 0 or value == 0:
        return "up" if value > (base_value or 0) else "down"
    if base_value < value:
        return "down_to_up"
    return "up_to_down"


def get_vote_type(is_fact: bool, base_value: Optional[int], value: int) -> Optional[str]:
    """
    Get a string describing the vote, or None if nothing changed.

    Examples:
        >>> get_vote_type(False, None, 0) is None
        True
        >>> get_vote_type(True, 0, 0) is None
        True
        >>> get_vote_type(False, 0, 1)
        'comment_vote_up'
        >>> get_vote_type(True, 1, 0)
        'fact_vote_down'
        >>> get_vote_type(False, -1, 1)
        'comment_vote_down_to_up'
        >>> get_vote_type(True, 1, -1)
        'fact_vote_up_to_down'
    """
    if value not in VALID_VOTE_VALUES:
        raise ValueError(f"Invalid vote value: {value}")
    if (base_value is None and value == 0) or base_value == value:
        return None
    base = "fact_vote_" if is_fact else "comment_vote_"
    return base + get_vote_direction(base_value, value)


def permission_action_for_vote(base_value: Optional[int], value: int) -> Optional[ActionKind]:
    """Action a user needs the permission for to move a vote from base_value to value."""
    # Removing a vote needs no permission
    if value == 0 or base_value == value:
        return None
    if value > 0:
        return ActionKind.VOTE_UP
    return ActionKind.VOTE_DOWN
