"""
CQRS Commands for articles.

Commands are immutable (frozen=True). Optional fields left as None mean
"leave unchanged" on update.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

from inkwell.domain.entities.article import ArticleImage, SeoMetadata
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import Identity


@dataclass(frozen=True)
class CreateArticleCommand:
    """Author creates a draft."""

    # Required
    author: Identity
    title: str
    content: str

    # Optional
    excerpt: Optional[str] = None
    tags: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()
    featured_image: Optional[ArticleImage] = None
    images: Tuple[ArticleImage, ...] = ()
    seo: Optional[SeoMetadata] = None


@dataclass(frozen=True)
class UpdateArticleCommand:
    """
    Partial update.

    is_featured, priority and admin_notes are moderator-only.
    """

    article_id: UUID
    actor: Identity
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    categories: Optional[Tuple[str, ...]] = None
    featured_image: Optional[ArticleImage] = None
    images: Optional[Tuple[ArticleImage, ...]] = None
    seo: Optional[SeoMetadata] = None
    is_featured: Optional[bool] = None
    priority: Optional[int] = None
    admin_notes: Optional[str] = None

    @property
    def touches_moderation(self) -> bool:
        return any(v is not None for v in (self.is_featured, self.priority, self.admin_notes))

    @property
    def touches_content(self) -> bool:
        return any(v is not None for v in (
            self.title, self.content, self.excerpt, self.tags, self.categories,
            self.featured_image, self.images, self.seo,
        ))


@dataclass(frozen=True)
class TransitionStatusCommand:
    article_id: UUID
    actor: Identity
    target_status: ArticleStatus
    reason: Optional[str] = None


@dataclass(frozen=True)
class ToggleLikeCommand:
    article_id: UUID
    actor: Identity


@dataclass(frozen=True)
class AddCommentCommand:
    article_id: UUID
    actor: Identity
    content: str
    parent_comment_id: Optional[str] = None


@dataclass(frozen=True)
class EditCommentCommand:
    article_id: UUID
    comment_id: str
    actor: Identity
    content: str


@dataclass(frozen=True)
class ToggleCommentLikeCommand:
    article_id: UUID
    comment_id: str
    actor: Identity


@dataclass(frozen=True)
class RecordViewCommand:
    article_id: UUID
