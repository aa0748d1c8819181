"""
Pydantic schemas for the API.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from inkwell.domain.entities.article import Article, ArticleImage, SeoMetadata
from inkwell.domain.entities.comment import Comment
from inkwell.domain.services.engagement import CommentNode
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import Page


class ImageSchema(BaseModel):
    url: str = Field(..., max_length=2048)
    alt: Optional[str] = None
    caption: Optional[str] = None

    def to_entity(self) -> ArticleImage:
        return ArticleImage(url=self.url, alt=self.alt, caption=self.caption)

    @classmethod
    def from_entity(cls, image: Optional[ArticleImage]) -> Optional["ImageSchema"]:
        if image is None:
            return None
        return cls(url=image.url, alt=image.alt, caption=image.caption)


class SeoSchema(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: List[str] = []
    og_image: Optional[str] = None

    def to_entity(self) -> SeoMetadata:
        return SeoMetadata(
            meta_title=self.meta_title,
            meta_description=self.meta_description,
            meta_keywords=list(self.meta_keywords),
            og_image=self.og_image,
        )


# =============================================================================
# Requests
# =============================================================================

class CreateArticleRequest(BaseModel):
    """Request to create a draft."""

    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=50)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    tags: List[str] = []
    categories: List[str] = []
    featured_image: Optional[ImageSchema] = None
    images: List[ImageSchema] = []
    seo: Optional[SeoSchema] = None


class UpdateArticleRequest(BaseModel):
    """Partial update; omitted fields stay unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=50)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    tags: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    featured_image: Optional[ImageSchema] = None
    images: Optional[List[ImageSchema]] = None
    seo: Optional[SeoSchema] = None
    is_featured: Optional[bool] = None
    priority: Optional[int] = None
    admin_notes: Optional[str] = Field(default=None, max_length=500)


class TransitionRequest(BaseModel):
    status: ArticleStatus
    reason: Optional[str] = Field(default=None, max_length=500)


class CommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    parent_comment_id: Optional[str] = None


class EditCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


# =============================================================================
# Responses
# =============================================================================

class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class CommentResponse(BaseModel):
    id: UUID
    user_id: str
    content: str
    parent_comment_id: Optional[UUID]
    like_count: int
    is_edited: bool
    edited_at: Optional[datetime]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: Comment) -> "CommentResponse":
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            content=entity.content,
            parent_comment_id=entity.parent_comment_id,
            like_count=entity.like_count,
            is_edited=entity.is_edited,
            edited_at=entity.edited_at,
            created_at=entity.created_at,
        )


class CommentNodeResponse(CommentResponse):
    replies: List["CommentNodeResponse"] = []

    @classmethod
    def from_node(cls, node: CommentNode) -> "CommentNodeResponse":
        base = CommentResponse.from_entity(node.comment).model_dump()
        return cls(**base, replies=[cls.from_node(child) for child in node.replies])


class ArticleResponse(BaseModel):
    """Article as seen by the caller; moderation fields are null unless visible."""

    id: UUID
    title: str
    slug: str
    url: str
    excerpt: str
    content: str
    author_id: str
    status: ArticleStatus
    tags: List[str]
    categories: List[str]
    featured_image: Optional[ImageSchema]
    images: List[ImageSchema]
    seo: SeoSchema
    like_count: int
    comment_count: int
    views: int
    reading_time_minutes: int
    trending_score: float
    engagement_rate: float
    is_featured: bool
    priority: int
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, entity: Article) -> "ArticleResponse":
        return cls(
            id=entity.id,
            title=entity.title,
            slug=entity.slug,
            url=entity.url,
            excerpt=entity.excerpt,
            content=entity.content,
            author_id=entity.author_id,
            status=entity.status,
            tags=entity.tags,
            categories=entity.categories,
            featured_image=ImageSchema.from_entity(entity.featured_image),
            images=[ImageSchema.from_entity(image) for image in entity.images],
            seo=SeoSchema(
                meta_title=entity.seo.meta_title,
                meta_description=entity.seo.meta_description,
                meta_keywords=entity.seo.meta_keywords,
                og_image=entity.seo.og_image,
            ),
            like_count=entity.like_count,
            comment_count=entity.comment_count,
            views=entity.views,
            reading_time_minutes=entity.reading_time_minutes,
            trending_score=entity.trending_score,
            engagement_rate=entity.engagement_rate,
            is_featured=entity.is_featured,
            priority=entity.priority,
            published_at=entity.published_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            admin_notes=entity.admin_notes,
            rejection_reason=entity.rejection_reason,
        )


class ArticlePageResponse(BaseModel):
    items: List[ArticleResponse]
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page) -> "ArticlePageResponse":
        return cls(
            items=[ArticleResponse.from_entity(a) for a in page.items],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        )
