"""
User loaders resolving numeric user ids to their reputation.
"""
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Protocol

from app.permissions.models import User, UserNotFoundError

logger = logging.getLogger(__name__)


class UserLoader(Protocol):
    """Resolves a user id to a User, raising UserNotFoundError if absent."""

    def load_by_id(self, user_id: int) -> User:
        ...


class InMemoryUserLoader:
    """Thread-safe dict backed user loader."""

    def __init__(self, users: Iterable[User] = ()):
        self._lock = Lock()
        self._users: Dict[int, User] = {u.id: u for u in users}

    def load_by_id(self, user_id: int) -> User:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def set_reputation(self, user_id: int, reputation: int) -> User:
        """Replace a user's reputation and return the updated user."""
        with self._lock:
            if user_id not in self._users:
                raise UserNotFoundError(user_id)
            user = User(id=user_id, reputation=reputation)
            self._users[user_id] = user
            return user


class JsonUserLoader:
    """
    Loads users from per-user JSON files.

    Each user lives in ``<user_data_dir>/<user_id>.json``. Only the ``reputation``
    field is read; the rest of the file is left to other subsystems.
    """

    def __init__(self, user_data_dir: Path):
        self.user_data_dir = user_data_dir

    def _user_file(self, user_id: int) -> Path:
        return self.user_data_dir / f"{user_id}.json"

    def load_by_id(self, user_id: int) -> User:
        user_file = self._user_file(user_id)
        try:
            data = json.loads(user_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise UserNotFoundError(user_id)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid user file {user_file}: {e}")
            raise UserNotFoundError(user_id) from e

        reputation = data.get("reputation", 0) if isinstance(data, dict) else None
        if not isinstance(reputation, int) or isinstance(reputation, bool):
            logger.error(f"User file {user_file} has no valid reputation: {reputation!r}")
            raise UserNotFoundError(user_id)

        return User(id=user_id, reputation=reputation)

    def save_user(self, user: User) -> None:
        """Write or update a user's reputation, keeping other fields."""
        user_file = self._user_file(user.id)
        try:
            data = json.loads(user_file.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                data = {}
        except (FileNotFoundError, json.JSONDecodeError):
            data = {}
        data["reputation"] = user.reputation
        self.user_data_dir.mkdir(parents=True, exist_ok=True)
        user_file.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def list_user_ids(self) -> list[int]:
        """Ids of every user file in the directory."""
        ids = []
        for path in self.user_data_dir.glob("*.json"):
            if path.stem.isdigit():
                ids.append(int(path.stem))
        return sorted(ids)
