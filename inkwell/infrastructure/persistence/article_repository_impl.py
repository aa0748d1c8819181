# -*- coding: utf-8 -*-
"""
PostgreSQL Repository implementation.

Maps Article entities to ArticleModel rows and back. Slug uniqueness is
enforced by the unique index; writes to one article are serialized by a
row lock (SELECT ... FOR UPDATE) held until the session commits.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.domain.entities.article import Article, ArticleImage, SeoMetadata, normalize_labels
from inkwell.domain.entities.comment import Comment, Like
from inkwell.domain.repositories.article_repository import IArticleRepository
from inkwell.domain.services import ranking
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, Page, PageRequest
from inkwell.infrastructure.persistence.models import ArticleModel
from inkwell.shared.exceptions.domain_exceptions import SlugCollisionError
from inkwell.shared.exceptions.infrastructure_exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Upper bound on rows pulled into the relevance scorer per search.
SEARCH_CANDIDATE_LIMIT = 1000

ORDERINGS = {
    ListingSort.RECENT: (ArticleModel.published_at.desc(),),
    ListingSort.TRENDING: (ArticleModel.trending_score.desc(), ArticleModel.published_at.desc()),
    ListingSort.FEATURED: (ArticleModel.priority.desc(), ArticleModel.published_at.desc()),
    ListingSort.POPULAR: (ArticleModel.views.desc(), ArticleModel.published_at.desc()),
}


class ArticleRepositoryImpl(IArticleRepository):
    """
    Repository for PostgreSQL.

    Adapter in the hexagonal architecture.
    """

    def __init__(self, session: AsyncSession):
        """
        Args:
            session: async SQLAlchemy session
        """
        self.session = session

    async def save(self, article: Article) -> Article:
        """Insert or update an article."""
        try:
            model = await self.session.merge(self._to_model(article))
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if "slug" in str(exc.orig):
                logger.warning("Slug collision on save: %s", article.slug)
                raise SlugCollisionError(article.slug) from exc
            raise DatabaseError(f"Failed to save article {article.id}: {exc}") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise DatabaseError(f"Failed to save article {article.id}: {exc}") from exc
        return self._to_entity(model)

    async def find_by_id(self, article_id: UUID) -> Optional[Article]:
        """Always reads the committed row, never a copy cached by the session."""
        result = await self._execute(
            select(ArticleModel)
            .where(ArticleModel.id == article_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_slug(self, slug: str) -> Optional[Article]:
        result = await self._execute(select(ArticleModel).where(ArticleModel.slug == slug))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        query = select(func.count(ArticleModel.id)).where(ArticleModel.slug == slug)
        if exclude_id is not None:
            query = query.where(ArticleModel.id != exclude_id)
        result = await self._execute(query)
        return result.scalar() > 0

    async def find_all(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Article]:
        query = self._filtered(select(ArticleModel), status, author_id)
        query = query.order_by(ArticleModel.created_at.desc()).limit(limit).offset(offset)
        result = await self._execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
    ) -> int:
        query = self._filtered(select(func.count(ArticleModel.id)), status, author_id)
        result = await self._execute(query)
        return result.scalar()

    async def find_published(
        self,
        sort: ListingSort,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        sort = ListingSort(sort)
        conditions = self._published_conditions(tags, categories)
        if sort is ListingSort.FEATURED:
            conditions.append(ArticleModel.is_featured.is_(True))

        total = (await self._execute(select(func.count(ArticleModel.id)).where(*conditions))).scalar()
        query = (
            select(ArticleModel)
            .where(*conditions)
            .order_by(*ORDERINGS[sort])
            .limit(page.limit)
            .offset(page.start)
        )
        result = await self._execute(query)
        items = [self._to_entity(m).public_view() for m in result.scalars().all()]
        return Page(items=items, total=total, limit=page.limit, offset=page.start)

    async def search_published(
        self,
        query: str,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        """
        Prefilter candidates in SQL (any term as a substring of any searchable
        field), then rank them with the weighted relevance scorer. Only the
        newest SEARCH_CANDIDATE_LIMIT candidates are ranked.
        """
        terms = ranking.tokenize(query)
        conditions = self._published_conditions(tags, categories)
        if terms:
            matchers = []
            for term in set(terms):
                pattern = f"%{term}%"
                matchers.extend([
                    ArticleModel.title.ilike(pattern),
                    ArticleModel.excerpt.ilike(pattern),
                    ArticleModel.content.ilike(pattern),
                    func.array_to_string(ArticleModel.tags, " ").ilike(pattern),
                    func.array_to_string(ArticleModel.categories, " ").ilike(pattern),
                ])
            conditions.append(or_(*matchers))

        result = await self._execute(
            select(ArticleModel)
            .where(*conditions)
            .order_by(ArticleModel.published_at.desc())
            .limit(SEARCH_CANDIDATE_LIMIT)
        )
        candidates = [self._to_entity(m) for m in result.scalars().all()]
        return ranking.search_published(candidates, query, page, tags, categories)

    async def delete(self, article_id: UUID) -> bool:
        model = await self.session.get(ArticleModel, article_id)
        if model:
            await self.session.delete(model)
            await self.session.commit()
            return True
        return False

    @asynccontextmanager
    async def _row_lock(self, article_id: UUID) -> AsyncIterator[None]:
        await self._execute(
            select(ArticleModel)
            .where(ArticleModel.id == article_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        try:
            yield
        except BaseException:
            await self.session.rollback()
            raise
        else:
            await self.session.commit()

    def lock(self, article_id: UUID):
        return self._row_lock(article_id)

    # =========================================================================
    # Query helpers
    # =========================================================================

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            logger.error("Query failed: %s", exc)
            raise DatabaseError(str(exc)) from exc

    @staticmethod
    def _filtered(query, status: Optional[ArticleStatus], author_id: Optional[str]):
        if status:
            query = query.where(ArticleModel.status == ArticleStatus(status).value)
        if author_id:
            query = query.where(ArticleModel.author_id == str(author_id))
        return query

    @staticmethod
    def _published_conditions(
        tags: Optional[Sequence[str]],
        categories: Optional[Sequence[str]],
    ) -> list:
        conditions = [ArticleModel.status == ArticleStatus.PUBLISHED.value]
        wanted_tags = normalize_labels(tags)
        if wanted_tags:
            conditions.append(ArticleModel.tags.overlap(wanted_tags))
        wanted_categories = normalize_labels(categories)
        if wanted_categories:
            conditions.append(ArticleModel.categories.overlap(wanted_categories))
        return conditions

    # =========================================================================
    # Entity <-> Model mapping
    # =========================================================================

    def _to_model(self, entity: Article) -> ArticleModel:
        return ArticleModel(
            id=entity.id,
            title=entity.title,
            slug=entity.slug,
            author_id=entity.author_id,

            content=entity.content,
            excerpt=entity.excerpt,
            custom_excerpt=entity.custom_excerpt,
            reading_time_minutes=entity.reading_time_minutes,

            status=entity.status.value,
            published_at=entity.published_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            last_modified=entity.last_modified,

            tags=entity.tags,
            categories=entity.categories,
            featured_image=_image_to_dict(entity.featured_image),
            images=[_image_to_dict(image) for image in entity.images],
            seo={
                "meta_title": entity.seo.meta_title,
                "meta_description": entity.seo.meta_description,
                "meta_keywords": entity.seo.meta_keywords,
                "og_image": entity.seo.og_image,
            },

            likes=[_like_to_dict(like) for like in entity.likes],
            comments=[_comment_to_dict(comment) for comment in entity.comments],
            views=entity.views,
            trending_score=entity.trending_score,
            engagement_rate=entity.engagement_rate,

            is_featured=entity.is_featured,
            priority=entity.priority,
            admin_notes=entity.admin_notes,
            rejection_reason=entity.rejection_reason,
        )

    def _to_entity(self, model: ArticleModel) -> Article:
        """None collections from legacy rows become empty ones."""
        return Article(
            id=model.id,
            title=model.title,
            slug=model.slug,
            author_id=model.author_id,

            content=model.content,
            excerpt=model.excerpt or "",
            custom_excerpt=bool(model.custom_excerpt),
            reading_time_minutes=model.reading_time_minutes or 1,

            status=ArticleStatus(model.status),
            published_at=model.published_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_modified=model.last_modified or model.updated_at,

            tags=model.tags or [],
            categories=model.categories or [],
            featured_image=_image_from_dict(model.featured_image),
            images=[_image_from_dict(image) for image in model.images or []],
            seo=SeoMetadata(**(model.seo or {})),

            likes=[_like_from_dict(like) for like in model.likes or []],
            comments=[_comment_from_dict(comment) for comment in model.comments or []],
            views=model.views or 0,
            trending_score=model.trending_score or 0.0,
            engagement_rate=model.engagement_rate or 0.0,

            is_featured=bool(model.is_featured),
            priority=model.priority or 0,
            admin_notes=model.admin_notes,
            rejection_reason=model.rejection_reason,
        )


# =============================================================================
# Embedded document codecs
# =============================================================================

def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _image_to_dict(image: Optional[ArticleImage]) -> Optional[Dict[str, Any]]:
    if image is None:
        return None
    return {"url": image.url, "alt": image.alt, "caption": image.caption}


def _image_from_dict(data: Optional[Dict[str, Any]]) -> Optional[ArticleImage]:
    return ArticleImage(**data) if data else None


def _like_to_dict(like: Like) -> Dict[str, Any]:
    return {"user_id": like.user_id, "liked_at": _dt(like.liked_at)}


def _like_from_dict(data: Dict[str, Any]) -> Like:
    return Like(user_id=data["user_id"], liked_at=_parse_dt(data.get("liked_at")))


def _comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": str(comment.id),
        "user_id": comment.user_id,
        "content": comment.content,
        "parent_comment_id": str(comment.parent_comment_id) if comment.parent_comment_id else None,
        "likes": [_like_to_dict(like) for like in comment.likes],
        "is_edited": comment.is_edited,
        "edited_at": _dt(comment.edited_at),
        "created_at": _dt(comment.created_at),
    }


def _comment_from_dict(data: Dict[str, Any]) -> Comment:
    parent = data.get("parent_comment_id")
    return Comment(
        id=UUID(data["id"]),
        user_id=data["user_id"],
        content=data["content"],
        parent_comment_id=UUID(parent) if parent else None,
        likes=[_like_from_dict(like) for like in data.get("likes") or []],
        is_edited=bool(data.get("is_edited")),
        edited_at=_parse_dt(data.get("edited_at")),
        created_at=_parse_dt(data.get("created_at")),
    )
