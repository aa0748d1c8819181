"""
Repository Interface: IArticleRepository

Port for article storage. Adapters live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional, Sequence
from uuid import UUID

from inkwell.domain.entities.article import Article
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, Page, PageRequest


class IArticleRepository(ABC):
    """
    Article repository.

    Adapters must enforce slug uniqueness on save and serialize writes to
    the same article through ``lock``.
    """

    @abstractmethod
    async def save(self, article: Article) -> Article:
        """
        Insert or replace an article.

        Raises:
            SlugCollisionError: another article already holds the slug
        """
        pass

    @abstractmethod
    async def find_by_id(self, article_id: UUID) -> Optional[Article]:
        pass

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[Article]:
        pass

    @abstractmethod
    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        """
        Check whether a slug is taken.

        Args:
            slug: Candidate slug
            exclude_id: Article whose own slug does not count as a collision
        """
        pass

    @abstractmethod
    async def find_all(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Article]:
        """Articles filtered by status and/or author, newest first."""
        pass

    @abstractmethod
    async def count(
        self,
        status: Optional[ArticleStatus] = None,
        author_id: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    async def find_published(
        self,
        sort: ListingSort,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        """Page of published articles in the requested order."""
        pass

    @abstractmethod
    async def search_published(
        self,
        query: str,
        page: PageRequest,
        tags: Optional[Sequence[str]] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> Page:
        """Page of published articles matching ``query`` by relevance."""
        pass

    @abstractmethod
    async def delete(self, article_id: UUID) -> bool:
        pass

    @abstractmethod
    def lock(self, article_id: UUID) -> AsyncContextManager[None]:
        """
        Exclusive write section for one article.

        Example:
            async with repo.lock(article_id):
                article = await repo.find_by_id(article_id)
                toggle_like(article, user_id)
                await repo.save(article)
        """
        pass
