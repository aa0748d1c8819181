"""
In-memory article repository.

Document-store semantics for local runs and tests: articles are stored as
independent copies, the slug index is unique and writes to one article are
serialized through ``lock``.
"""

import copy
import logging
from typing import AsyncContextManager, Dict, List, Optional, Sequence
from uuid import UUID

from inkwell.domain.entities.article import Article
from inkwell.domain.repositories.article_repository import IArticleRepository
from inkwell.domain.services import ranking
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, Page, PageRequest
from inkwell.infrastructure.persistence.locks import ArticleLockRegistry
from inkwell.shared.exceptions.domain_exceptions import SlugCollisionError

logger = logging.getLogger(__name__)


class InMemoryArticleRepository(IArticleRepository):

    def __init__(self, articles: Optional[Sequence[Article]] = None):
        self._articles: Dict[UUID, Article] = {}
        self._slugs: Dict[str, UUID] = {}
        self._locks = ArticleLockRegistry()
        for article in articles or []:
            self._store(article)

    def _store(self, article: Article) -> Article:
        owner = self._slugs.get(article.slug)
        if owner is not None and owner != article.id:
            raise SlugCollisionError(article.slug)

        previous = self._articles.get(article.id)
        if previous is not None and previous.slug != article.slug:
            self._slugs.pop(previous.slug, None)

        self._articles[article.id] = copy.deepcopy(article)
        self._slugs[article.slug] = article.id
        return copy.deepcopy(article)

    async def save(self, article: Article) -> Article:
        return self._store(article)

    async def find_by_id(self, article_id: UUID) -> Optional[Article]:
        article = self._articles.get(article_id)
        return copy.deepcopy(article) if article else None

    async def find_by_slug(self, slug: str) -> Optional[Article]:
        article_id = self._slugs.get(slug)
        return await self.find_by_id(article_id) if article_id else None

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        owner = self._slugs.get(slug)
        return owner is not None and owner != exclude_id

    def _select(self, status: Optional[ArticleStatus], author_id: Optional[str]) -> List[Article]:
        selected = [
            a for a in self._articles.values()
            if (status is None or a.status is status)
            and (author_id is None or a.author_id == str(author_id))
        ]
        return sorted(selected, key=lambda a: a.created_at, reverse=True)

    async def find_all(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Article]:
        selected = self._select(status, author_id)[offset:offset + limit]
        return [copy.deepcopy(a) for a in selected]

    async def count(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
    ) -> int:
        return len(self._select(status, author_id))

    async def find_published(
        self,
        sort: ListingSort,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        snapshot = copy.deepcopy(list(self._articles.values()))
        return ranking.list_published(snapshot, sort, page, tags, categories)

    async def search_published(
        self,
        query: str,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        snapshot = copy.deepcopy(list(self._articles.values()))
        return ranking.search_published(snapshot, query, page, tags, categories)

    async def delete(self, article_id: UUID) -> bool:
        article = self._articles.pop(article_id, None)
        if article is None:
            return False
        self._slugs.pop(article.slug, None)
        logger.info("Deleted article %s", article_id)
        return True

    def lock(self, article_id: UUID) -> AsyncContextManager[None]:
        return self._locks.hold(article_id)
