from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any


@dataclass
class Comment:
    """
    A comment posted on a video statement.

    ``flags`` and ``votes`` change under ``CommentService._lock``; serialize
    through ``CommentService.render``.
    """
    id: int
    user_id: int
    statement_id: int
    text: str
    source_url: Optional[str] = None
    inserted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    flags: set = field(default_factory=set)  # Ids of users who flagged it
    votes: Dict[int, int] = field(default_factory=dict)  # user_id -> -1 / 1

    @property
    def is_fact(self) -> bool:
        return bool(self.source_url)

    @property
    def score(self) -> int:
        return sum(self.votes.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "statement_id": self.statement_id,
            "text": self.text,
            "source_url": self.source_url,
            "inserted_at": self.inserted_at.isoformat(),
            "flags": len(self.flags),
            "score": self.score,
        }


@dataclass
class CommentActionResult:
    """Result of a comment action."""
    success: bool
    message: str
    error: Optional[str] = None
    comment: Optional[Comment] = None
    vote_type: Optional[str] = None


class CommentError(Exception):
    """Raised when a comment action cannot be applied."""

    def __init__(self, error: str, message: str):
        self.error = error
        self.message = message
        super().__init__(message)
