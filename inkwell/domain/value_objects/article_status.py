"""
Value Object: ArticleStatus

Publication status of an article.
"""

from enum import Enum


class ArticleStatus(str, Enum):
    """Article lifecycle statuses."""

    DRAFT = "draft"              # Being written by the author
    PENDING = "pending"          # Waiting for moderation
    PUBLISHED = "published"      # Publicly visible
    REJECTED = "rejected"        # Declined by a moderator
    HIDDEN = "hidden"            # Pulled from public view by a moderator

    @property
    def is_public(self) -> bool:
        """Visible to non-moderator readers."""
        return self is ArticleStatus.PUBLISHED

    @property
    def requires_moderator(self) -> bool:
        """Entering this status is a moderation action."""
        return self in (
            ArticleStatus.PUBLISHED,
            ArticleStatus.REJECTED,
            ArticleStatus.HIDDEN,
        )

    def can_transition_to(self, new_status: 'ArticleStatus') -> bool:
        """
        Check whether the transition is allowed.

        Transition rules:
        - DRAFT -> PENDING (submit for review)
        - PENDING -> PUBLISHED, REJECTED (approve / reject)
        - PUBLISHED -> HIDDEN, HIDDEN -> PUBLISHED (moderation toggle)
        - REJECTED -> DRAFT (author revises)
        """
        return new_status in ALLOWED_TRANSITIONS.get(self, ())


ALLOWED_TRANSITIONS = {
    ArticleStatus.DRAFT: (ArticleStatus.PENDING,),
    ArticleStatus.PENDING: (ArticleStatus.PUBLISHED, ArticleStatus.REJECTED),
    ArticleStatus.PUBLISHED: (ArticleStatus.HIDDEN,),
    ArticleStatus.HIDDEN: (ArticleStatus.PUBLISHED,),
    ArticleStatus.REJECTED: (ArticleStatus.DRAFT,),
}
