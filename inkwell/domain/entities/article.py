# -*- coding: utf-8 -*-
"""
Domain entity: Article

An article is owned by its author, moves through the publication workflow
and accrues engagement once published:
- likes: one per user
- comments: threaded via parent_comment_id
- views, trending_score, engagement_rate: ranking inputs

Derived fields (slug, excerpt, reading_time_minutes, published_at) are not
computed here; writers call ``recompute_derived_fields`` explicitly.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID, uuid4

from inkwell.domain.entities.comment import Comment, Like, utcnow
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.shared.exceptions.domain_exceptions import DomainValidationError

MAX_TITLE_LENGTH = 100
MIN_CONTENT_LENGTH = 50
MAX_EXCERPT_LENGTH = 300
MAX_MODERATION_NOTE_LENGTH = 500


@dataclass
class ArticleImage:
    """Image reference attached to an article."""

    url: str
    alt: Optional[str] = None
    caption: Optional[str] = None


@dataclass
class SeoMetadata:
    """Search-engine metadata supplied by the author."""

    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: List[str] = field(default_factory=list)
    og_image: Optional[str] = None


def normalize_labels(values: Optional[Iterable[str]]) -> List[str]:
    """Lower-case, trim and de-duplicate tags/categories, keeping first-seen order."""
    result: List[str] = []
    for value in values or []:
        label = str(value).strip().lower()
        if label and label not in result:
            result.append(label)
    return result


@dataclass
class Article:
    """
    Article aggregate.

    Invariants:
    - title is 1-100 chars, content at least 50 chars
    - excerpt at most 300 chars
    - a user appears at most once in ``likes``
    - every ``parent_comment_id`` resolves within this article
    - reading_time_minutes >= 1, views >= 0
    """

    # =========================================================================
    # Identity
    # =========================================================================
    title: str = ""
    content: str = ""
    author_id: str = ""
    id: UUID = field(default_factory=uuid4)
    slug: str = ""

    # =========================================================================
    # Derived content
    # =========================================================================
    excerpt: str = ""
    custom_excerpt: bool = False
    reading_time_minutes: int = 1

    # =========================================================================
    # Workflow
    # =========================================================================
    status: ArticleStatus = ArticleStatus.DRAFT
    published_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    last_modified: datetime = field(default_factory=utcnow)

    # =========================================================================
    # Classification and media
    # =========================================================================
    tags: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    featured_image: Optional[ArticleImage] = None
    images: List[ArticleImage] = field(default_factory=list)
    seo: SeoMetadata = field(default_factory=SeoMetadata)

    # =========================================================================
    # Engagement
    # =========================================================================
    likes: List[Like] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    views: int = 0
    trending_score: float = 0.0
    engagement_rate: float = 0.0

    # =========================================================================
    # Moderation (never exposed to non-moderator readers)
    # =========================================================================
    is_featured: bool = False
    priority: int = 0
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None

    def __post_init__(self):
        self.title = (self.title or "").strip()
        self.tags = normalize_labels(self.tags)
        self.categories = normalize_labels(self.categories)
        self.validate()

    def validate(self) -> None:
        """
        Check entity invariants.

        Raises:
            DomainValidationError: if an invariant is violated
        """
        if not self.title:
            raise DomainValidationError("Title is required")
        if len(self.title) > MAX_TITLE_LENGTH:
            raise DomainValidationError(
                f"Title cannot be more than {MAX_TITLE_LENGTH} characters",
                {"length": len(self.title)},
            )
        if not self.content:
            raise DomainValidationError("Content is required")
        if len(self.content) < MIN_CONTENT_LENGTH:
            raise DomainValidationError(
                f"Content must be at least {MIN_CONTENT_LENGTH} characters",
                {"length": len(self.content)},
            )
        if not self.author_id:
            raise DomainValidationError("Author is required")
        if self.excerpt and len(self.excerpt) > MAX_EXCERPT_LENGTH:
            raise DomainValidationError(
                f"Excerpt cannot be more than {MAX_EXCERPT_LENGTH} characters",
                {"length": len(self.excerpt)},
            )
        for name in ("admin_notes", "rejection_reason"):
            value = getattr(self, name)
            if value and len(value) > MAX_MODERATION_NOTE_LENGTH:
                raise DomainValidationError(
                    f"{name} cannot be more than {MAX_MODERATION_NOTE_LENGTH} characters",
                    {"field": name},
                )
        if self.views < 0:
            raise DomainValidationError("views cannot be negative")
        if self.reading_time_minutes < 1:
            raise DomainValidationError("reading_time_minutes must be at least 1")

        liked_by = [like.user_id for like in self.likes]
        if len(liked_by) != len(set(liked_by)):
            raise DomainValidationError("A user can like an article only once")

        comment_ids = {comment.id for comment in self.comments}
        for comment in self.comments:
            if comment.parent_comment_id is not None and comment.parent_comment_id not in comment_ids:
                raise DomainValidationError(
                    "Comment parent does not belong to this article",
                    {"comment_id": str(comment.id)},
                )

    # =========================================================================
    # Read-only helpers
    # =========================================================================

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def comment_count(self) -> int:
        return len(self.comments)

    @property
    def url(self) -> str:
        return f"/article/{self.slug}"

    @property
    def has_been_published(self) -> bool:
        return self.published_at is not None

    def is_liked_by(self, user_id: str) -> bool:
        return any(like.user_id == str(user_id) for like in self.likes)

    def find_comment(self, comment_id: UUID) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def public_view(self) -> 'Article':
        """Copy with moderation-only fields stripped."""
        return replace(self, admin_notes=None, rejection_reason=None)

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or utcnow()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Article(id={self.id}, slug='{self.slug}', status={self.status.value})"
