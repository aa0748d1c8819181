"""
Value Objects: listing sort orders and pagination.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from inkwell.shared.exceptions.domain_exceptions import DomainValidationError

T = TypeVar("T")


class ListingSort(str, Enum):
    """Orderings available over the published set."""

    RECENT = "recent"
    TRENDING = "trending"
    FEATURED = "featured"
    POPULAR = "popular"


@dataclass(frozen=True)
class PageRequest:
    """
    Page of results.

    Either ``offset`` or a 1-based ``page`` number may be given; ``page``
    wins when both are set.
    """

    limit: int = 10
    offset: int = 0
    page: Optional[int] = None

    def __post_init__(self):
        if self.limit < 1:
            raise DomainValidationError("limit must be at least 1", {"limit": self.limit})
        if self.offset < 0:
            raise DomainValidationError("offset cannot be negative", {"offset": self.offset})
        if self.page is not None and self.page < 1:
            raise DomainValidationError("page must be at least 1", {"page": self.page})

    @property
    def start(self) -> int:
        if self.page is not None:
            return (self.page - 1) * self.limit
        return self.offset

    def capped(self, max_limit: int) -> 'PageRequest':
        """Same request with ``limit`` clamped to ``max_limit``."""
        if self.limit <= max_limit:
            return self
        return PageRequest(limit=max_limit, offset=self.offset, page=self.page)


@dataclass
class Page(Generic[T]):
    """A slice of an ordered result set."""

    items: List[T] = field(default_factory=list)
    total: int = 0
    limit: int = 10
    offset: int = 0

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
