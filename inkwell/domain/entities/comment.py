"""
Domain entities: Comment and Like

Embedded collections of an article. Comments form a tree through
``parent_comment_id``; root comments have none.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from inkwell.shared.exceptions.domain_exceptions import DomainValidationError

MAX_COMMENT_LENGTH = 1000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Like:
    """A single user's like, at most one per user in any like-set."""

    user_id: str
    liked_at: datetime = field(default_factory=utcnow)


@dataclass
class Comment:
    """
    Comment on an article.

    Invariants:
    - content is non-empty and at most 1000 chars
    - a user appears at most once in ``likes``
    """

    user_id: str
    content: str
    id: UUID = field(default_factory=uuid4)
    parent_comment_id: Optional[UUID] = None
    likes: List[Like] = field(default_factory=list)
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        validate_comment_content(self.content)

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def is_root(self) -> bool:
        return self.parent_comment_id is None

    def is_liked_by(self, user_id: str) -> bool:
        return any(like.user_id == str(user_id) for like in self.likes)


def validate_comment_content(content: str) -> None:
    """
    Raises:
        DomainValidationError: if content is blank or longer than 1000 chars
    """
    if not content or not content.strip():
        raise DomainValidationError("Comment content cannot be empty")
    if len(content) > MAX_COMMENT_LENGTH:
        raise DomainValidationError(
            f"Comment cannot be more than {MAX_COMMENT_LENGTH} characters",
            {"length": len(content)},
        )
