"""
Ranking and search over published articles.

Only ``published`` articles are ever returned and every result is a public
view with moderation fields stripped. Text relevance is pluggable through
``RelevanceScorer``; the default scorer weighs fields so that a title match
always outranks a match found only in the content.
"""

import re
from dataclasses import dataclass
from datetime import timezone
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from inkwell.domain.entities.article import Article, normalize_labels
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, Page, PageRequest
from inkwell.shared.exceptions.domain_exceptions import DomainValidationError

FIELD_WEIGHTS: Dict[str, int] = {
    "title": 10,
    "excerpt": 5,
    "tags": 3,
    "categories": 2,
    "content": 1,
}

_TOKEN = re.compile(r"\w+")


def tokenize(text: str) -> List[str]:
    """Case-folded word tokens in any script."""
    return _TOKEN.findall((text or "").casefold())


def _published_key(article: Article) -> float:
    published = article.published_at
    if published is None:
        return float("-inf")
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published.timestamp()


# =============================================================================
# Filtering
# =============================================================================

def published_only(articles: Iterable[Article]) -> List[Article]:
    return [a for a in articles if a.status is ArticleStatus.PUBLISHED]


def matches_filters(
    article: Article,
    tags: Optional[Sequence[str]] = None,
    categories: Optional[Sequence[str]] = None,
) -> bool:
    """AND across dimensions, OR within each dimension's set."""
    wanted_tags = normalize_labels(tags)
    if wanted_tags and not set(wanted_tags) & set(article.tags):
        return False
    wanted_categories = normalize_labels(categories)
    if wanted_categories and not set(wanted_categories) & set(article.categories):
        return False
    return True


# =============================================================================
# Orderings
# =============================================================================

SORT_KEYS: Dict[ListingSort, Callable[[Article], Tuple]] = {
    ListingSort.RECENT: lambda a: (_published_key(a),),
    ListingSort.TRENDING: lambda a: (a.trending_score, _published_key(a)),
    ListingSort.FEATURED: lambda a: (a.priority, _published_key(a)),
    ListingSort.POPULAR: lambda a: (a.views, _published_key(a)),
}


def rank(articles: Iterable[Article], sort: ListingSort = ListingSort.RECENT) -> List[Article]:
    """
    Order published articles.

    featured keeps only ``is_featured`` articles ordered by priority; every
    ordering falls back to publish time, newest first.
    """
    sort = ListingSort(sort)
    candidates = published_only(articles)
    if sort is ListingSort.FEATURED:
        candidates = [a for a in candidates if a.is_featured]
    return sorted(candidates, key=SORT_KEYS[sort], reverse=True)


def paginate(items: Sequence, page: PageRequest) -> Page:
    start = page.start
    return Page(
        items=list(items[start:start + page.limit]),
        total=len(items),
        limit=page.limit,
        offset=start,
    )


def list_published(
    articles: Iterable[Article],
    sort: ListingSort = ListingSort.RECENT,
    page: Optional[PageRequest] = None,
    tags: Optional[Sequence[str]] = None,
    categories: Optional[Sequence[str]] = None,
) -> Page:
    page = page or PageRequest()
    filtered = [a for a in articles if matches_filters(a, tags, categories)]
    ordered = [a.public_view() for a in rank(filtered, sort)]
    return paginate(ordered, page)


# =============================================================================
# Relevance
# =============================================================================

class RelevanceScorer(Protocol):
    """Scores an article against query terms; 0 means no match."""

    def score(self, article: Article, terms: Sequence[str]) -> float:
        ...


class WeightedTokenScorer:
    """
    Token-overlap relevance weighted per field.

    A field that matches any term contributes between half and all of its
    weight depending on how many distinct terms it covers, so a single
    title hit (>= 5) beats full coverage of the content alone (<= 1).
    """

    def __init__(self, weights: Optional[Dict[str, int]] = None):
        self.weights = weights or FIELD_WEIGHTS

    @staticmethod
    def field_tokens(article: Article) -> Dict[str, set]:
        return {
            "title": set(tokenize(article.title)),
            "excerpt": set(tokenize(article.excerpt)),
            "tags": set(tokenize(" ".join(article.tags))),
            "categories": set(tokenize(" ".join(article.categories))),
            "content": set(tokenize(article.content)),
        }

    def score(self, article: Article, terms: Sequence[str]) -> float:
        unique_terms = set(terms)
        if not unique_terms:
            return 0.0
        total = 0.0
        for name, tokens in self.field_tokens(article).items():
            matched = len(unique_terms & tokens)
            if matched:
                coverage = matched / len(unique_terms)
                total += self.weights.get(name, 0) * (0.5 + 0.5 * coverage)
        return total


@dataclass
class SearchHit:
    article: Article
    score: float


def search(
    articles: Iterable[Article],
    query: str,
    tags: Optional[Sequence[str]] = None,
    categories: Optional[Sequence[str]] = None,
    scorer: Optional[RelevanceScorer] = None,
) -> List[SearchHit]:
    """
    Published articles matching ``query``, most relevant first, ties broken
    by publish time.

    Raises:
        DomainValidationError: query has no searchable terms
    """
    terms = tokenize(query)
    if not terms:
        raise DomainValidationError("Search query cannot be empty")
    scorer = scorer or WeightedTokenScorer()

    hits = []
    for article in published_only(articles):
        if not matches_filters(article, tags, categories):
            continue
        relevance = scorer.score(article, terms)
        if relevance > 0:
            hits.append(SearchHit(article.public_view(), relevance))
    hits.sort(key=lambda hit: (hit.score, _published_key(hit.article)), reverse=True)
    return hits


def search_published(
    articles: Iterable[Article],
    query: str,
    page: Optional[PageRequest] = None,
    tags: Optional[Sequence[str]] = None,
    categories: Optional[Sequence[str]] = None,
    scorer: Optional[RelevanceScorer] = None,
) -> Page:
    page = page or PageRequest()
    hits = search(articles, query, tags, categories, scorer)
    return paginate([hit.article for hit in hits], page)
