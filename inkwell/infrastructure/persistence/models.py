# -*- coding: utf-8 -*-
"""
SQLAlchemy models - infrastructure layer.

Likes and comments are embedded in the article row as JSON documents, so a
single row update covers every engagement mutation of one article.
"""

from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleModel(Base):
    """
    SQLAlchemy article row.

    Mapping notes:
    - entity.likes / entity.comments <-> JSON arrays
    - entity.seo / featured_image / images <-> JSON objects
    """

    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_status_published_at", "status", "published_at"),
        Index("ix_articles_author_status", "author_id", "status"),
        Index("ix_articles_trending", "trending_score", "status"),
        Index("ix_articles_featured", "is_featured", "priority", "published_at"),
    )

    # =========================================================================
    # Identity
    # =========================================================================
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    slug = Column(String(50), nullable=False, unique=True, index=True)
    author_id = Column(String(64), nullable=False, index=True)

    # =========================================================================
    # Content
    # =========================================================================
    content = Column(Text, nullable=False)
    excerpt = Column(String(300))
    custom_excerpt = Column(Boolean, default=False)
    reading_time_minutes = Column(Integer, default=1)

    # =========================================================================
    # Workflow
    # =========================================================================
    status = Column(String(20), default="draft", index=True)
    published_at = Column(DateTime(timezone=True), index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    last_modified = Column(DateTime(timezone=True), default=_utcnow)

    # =========================================================================
    # Classification and media
    # =========================================================================
    tags = Column(ARRAY(String), default=list)
    categories = Column(ARRAY(String), default=list)
    featured_image = Column(JSON, comment="{url, alt, caption}")
    images = Column(JSON, default=list)
    seo = Column(JSON, default=dict, comment="{meta_title, meta_description, meta_keywords, og_image}")

    # =========================================================================
    # Engagement
    # =========================================================================
    likes = Column(JSON, default=list, comment="[{user_id, liked_at}]")
    comments = Column(JSON, default=list)
    views = Column(Integer, default=0, index=True)
    trending_score = Column(Float, default=0.0)
    engagement_rate = Column(Float, default=0.0)

    # =========================================================================
    # Moderation
    # =========================================================================
    is_featured = Column(Boolean, default=False)
    priority = Column(Integer, default=0)
    admin_notes = Column(String(500))
    rejection_reason = Column(String(500))

    def __repr__(self):
        return f"<ArticleModel(id={self.id}, slug='{self.slug}')>"
