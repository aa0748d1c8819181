"""
CQRS Queries for articles.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import Identity
from inkwell.domain.value_objects.listing import ListingSort, PageRequest


@dataclass(frozen=True)
class GetArticleQuery:
    """Article by id; unpublished work is visible to its author and moderators only."""

    article_id: UUID
    viewer: Optional[Identity] = None


@dataclass(frozen=True)
class GetArticleBySlugQuery:
    """Published article by slug. Counts a view."""

    slug: str


@dataclass(frozen=True)
class ListPublishedQuery:
    sort: ListingSort = ListingSort.RECENT
    page: PageRequest = PageRequest()
    tags: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchPublishedQuery:
    query: str
    page: PageRequest = PageRequest()
    tags: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ListByAuthorQuery:
    author_id: str
    viewer: Identity
    status: Optional[ArticleStatus] = None
    page: PageRequest = PageRequest()


@dataclass(frozen=True)
class ListPendingQuery:
    viewer: Identity
    page: PageRequest = PageRequest()
