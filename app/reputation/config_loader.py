"""
Config loader for reputation changes.

The config maps action types to either a single ``[author, target]`` pair or to
a mapping of entity name to pair:

    {
      "abused_flag": [0, -5],
      "vote_up": {"comment": [0, 2], "fact": [0, 3]}
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .models import ActionEntity, ReputationChange, UserActionType

logger = logging.getLogger(__name__)

ChangeValue = Union[ReputationChange, Dict[ActionEntity, ReputationChange]]


def load(filename: Path) -> Dict[UserActionType, ChangeValue]:
    """Load a JSON config and convert it using ``convert``."""
    with open(filename, 'r', encoding='utf-8') as f:
        config = convert(json.load(f))
    logger.info(f"Loaded {len(config)} reputation change rules from {filename}")
    return config


def convert(base_config: dict) -> Dict[UserActionType, ChangeValue]:
    """
    Convert a raw config to a config keyed by UserActionType.

    Pairs become ReputationChange instances and entity names become ActionEntity.

    Raises:
        ValueError: On unknown action types, unknown entities or malformed pairs
    """
    actions_map = {}
    for action_type, value in base_config.items():
        if not UserActionType.is_valid(action_type):
            raise ValueError(f"Unknown action type in reputation changes config: {action_type}")
        actions_map[UserActionType(action_type)] = _convert_value(value)
    return actions_map


def _convert_value(value) -> ChangeValue:
    if isinstance(value, dict):
        return {
            ActionEntity.from_name(entity): ReputationChange.from_pair(change)
            for entity, change in value.items()
        }
    return ReputationChange.from_pair(value)


class ReputationChanges:
    """Lookup over a converted reputation change config."""

    def __init__(self, config: Dict[UserActionType, ChangeValue]):
        self._config = config

    @classmethod
    def from_file(cls, filename: Path) -> "ReputationChanges":
        return cls(load(filename))

    def change_for(
        self, action_type: UserActionType, entity: Optional[ActionEntity] = None
    ) -> Optional[ReputationChange]:
        """Get the change for an action (and entity when the rule is per entity)."""
        value = self._config.get(action_type)
        if isinstance(value, dict):
            return value.get(entity) if entity is not None else None
        return value
