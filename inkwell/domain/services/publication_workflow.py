"""
Publication state machine.

    draft -> pending -> published <-> hidden
                 \
                  -> rejected -> draft

Transitions outside the table raise InvalidTransitionError reporting the
current and requested status. Entering published, rejected or hidden is a
moderation action; submitting and revising belong to the author.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from inkwell.domain.entities.article import Article, MAX_MODERATION_NOTE_LENGTH
from inkwell.domain.entities.comment import utcnow
from inkwell.domain.services.derived_fields import recompute_derived_fields
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import DEFAULT_MODERATOR_ROLES, Identity, UserRole
from inkwell.shared.exceptions.domain_exceptions import (
    DomainValidationError,
    InvalidTransitionError,
    NotAuthorizedError,
)


@dataclass(frozen=True)
class TransitionRecord:
    """Result of an applied transition."""

    article_id: str
    previous: ArticleStatus
    current: ArticleStatus
    actor_id: str
    at: datetime


def authorize_transition(
    article: Article,
    target: ArticleStatus,
    actor: Identity,
    moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES,
) -> None:
    """
    Raises:
        NotAuthorizedError: if the actor may not move the article to ``target``
    """
    if actor.is_moderator(moderator_roles):
        return
    if target.requires_moderator:
        raise NotAuthorizedError(
            f"Only moderators can move an article to '{target.value}'",
            {"role": actor.role.value},
        )
    if not actor.owns(article.author_id):
        raise NotAuthorizedError("Only the author can submit or revise this article")


def transition(
    article: Article,
    target: ArticleStatus,
    actor: Identity,
    *,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
    moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES,
) -> TransitionRecord:
    """
    Move ``article`` to ``target`` and recompute the derived fields.

    publish time is set on the first approval only; hiding and unhiding
    leave it untouched.

    Raises:
        InvalidTransitionError: transition not in the table
        NotAuthorizedError: actor lacks the role or ownership
        DomainValidationError: rejecting without a reason
    """
    target = ArticleStatus(target)
    current = article.status
    if not current.can_transition_to(target):
        raise InvalidTransitionError(current.value, target.value)

    authorize_transition(article, target, actor, moderator_roles)

    if target is ArticleStatus.REJECTED:
        reason = (reason or "").strip()
        if not reason:
            raise DomainValidationError("A rejection reason is required")
        if len(reason) > MAX_MODERATION_NOTE_LENGTH:
            raise DomainValidationError(
                f"Rejection reason cannot be more than {MAX_MODERATION_NOTE_LENGTH} characters"
            )
        article.rejection_reason = reason
    elif target is ArticleStatus.DRAFT:
        article.rejection_reason = None

    now = now or utcnow()
    article.status = target
    recompute_derived_fields(article, status_changed=True, now=now)
    article.touch(now)

    return TransitionRecord(
        article_id=str(article.id),
        previous=current,
        current=target,
        actor_id=str(actor.user_id),
        at=now,
    )


def submit(article: Article, actor: Identity, **kwargs) -> TransitionRecord:
    """Author submits a draft for review."""
    return transition(article, ArticleStatus.PENDING, actor, **kwargs)


def approve(article: Article, actor: Identity, **kwargs) -> TransitionRecord:
    return transition(article, ArticleStatus.PUBLISHED, actor, **kwargs)


def reject(article: Article, actor: Identity, reason: str, **kwargs) -> TransitionRecord:
    return transition(article, ArticleStatus.REJECTED, actor, reason=reason, **kwargs)


def hide(article: Article, actor: Identity, **kwargs) -> TransitionRecord:
    return transition(article, ArticleStatus.HIDDEN, actor, **kwargs)


def unhide(article: Article, actor: Identity, **kwargs) -> TransitionRecord:
    return transition(article, ArticleStatus.PUBLISHED, actor, **kwargs)


def revise(article: Article, actor: Identity, **kwargs) -> TransitionRecord:
    """Rejected article goes back to draft for the author to rework."""
    return transition(article, ArticleStatus.DRAFT, actor, **kwargs)
