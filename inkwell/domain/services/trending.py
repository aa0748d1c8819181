"""
Trending score: engagement weighted by a 72-hour half-life decay.

    age_hours = (now - (published_at or created_at)) / 3600
    score = (likes * 4 + comments * 3 + views * 0.15) * 0.5 ** (age_hours / 72)

The calculator holds no schedule; callers decide when to recompute.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from inkwell.domain.entities.article import Article
from inkwell.domain.entities.comment import utcnow

LIKE_WEIGHT = 4
COMMENT_WEIGHT = 3
VIEW_WEIGHT = 0.15
HALF_LIFE_HOURS = 72


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def age_in_hours(article: Article, now: Optional[datetime] = None) -> float:
    """Hours since publication (or creation), never negative."""
    reference = article.published_at or article.created_at
    now = _as_utc(now or utcnow())
    hours = (now - _as_utc(reference)).total_seconds() / 3600
    return max(0.0, hours)


def decay_factor(age_hours: float) -> float:
    return 0.5 ** (max(0.0, age_hours) / HALF_LIFE_HOURS)


def raw_engagement(article: Article) -> float:
    return (
        article.like_count * LIKE_WEIGHT
        + article.comment_count * COMMENT_WEIGHT
        + max(0, article.views) * VIEW_WEIGHT
    )


def compute_trending_score(article: Article, now: Optional[datetime] = None) -> float:
    score = raw_engagement(article) * decay_factor(age_in_hours(article, now))
    if math.isnan(score) or score < 0:
        return 0.0
    return score


def compute_engagement_rate(article: Article) -> float:
    """(likes + comments) / views, 0 when there are no views."""
    if article.views <= 0:
        return 0.0
    return (article.like_count + article.comment_count) / article.views


def refresh_analytics(article: Article, now: Optional[datetime] = None) -> float:
    """Store a fresh trending score and engagement rate on the article."""
    article.trending_score = compute_trending_score(article, now)
    article.engagement_rate = compute_engagement_rate(article)
    return article.trending_score
