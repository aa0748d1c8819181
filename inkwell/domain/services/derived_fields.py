"""
Explicit recomputation of an article's derived fields.

Every writer calls ``recompute_derived_fields`` after mutating title,
content or status and before persisting.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from inkwell.domain.entities.article import Article
from inkwell.domain.entities.comment import utcnow
from inkwell.domain.services.content_transformer import derive_excerpt, estimate_reading_time
from inkwell.domain.services.slug_generator import generate_slug
from inkwell.domain.value_objects.article_status import ArticleStatus


@dataclass(frozen=True)
class DerivedChanges:
    """Which derived fields were recomputed."""

    slug: bool = False
    excerpt: bool = False
    reading_time: bool = False
    published_at: bool = False


def recompute_derived_fields(
    article: Article,
    *,
    title_changed: bool = False,
    content_changed: bool = False,
    status_changed: bool = False,
    now: Optional[datetime] = None,
) -> DerivedChanges:
    """
    Bring slug, excerpt, reading time and publish time in line with the
    article's current title, content and status.

    The slug is re-derived only while the article has never been published,
    so links to published work stay stable. The returned slug is the base
    candidate; the caller makes it unique.
    """
    now = now or utcnow()
    slug_changed = excerpt_changed = reading_changed = published_changed = False

    if (title_changed or not article.slug) and not article.has_been_published:
        slug = generate_slug(article.title)
        slug_changed = slug != article.slug
        article.slug = slug

    if content_changed or not article.excerpt:
        if not article.custom_excerpt:
            article.excerpt = derive_excerpt(article.content)
            excerpt_changed = True
        article.reading_time_minutes = estimate_reading_time(article.content)
        reading_changed = True

    if status_changed and article.status is ArticleStatus.PUBLISHED and article.published_at is None:
        article.published_at = now
        published_changed = True

    article.last_modified = now
    article.validate()
    return DerivedChanges(slug_changed, excerpt_changed, reading_changed, published_changed)
