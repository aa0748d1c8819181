"""
Unit tests for the publication state machine.
"""

from datetime import timedelta

import pytest

from inkwell.domain.services import publication_workflow as workflow
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.shared.exceptions.domain_exceptions import (
    DomainValidationError,
    InvalidTransitionError,
    NotAuthorizedError,
)
from tests.factories import NOW, make_article


def test_draft_cannot_be_published_directly(admin):
    article = make_article()

    with pytest.raises(InvalidTransitionError) as exc_info:
        workflow.transition(article, ArticleStatus.PUBLISHED, admin, now=NOW)

    assert exc_info.value.current == "draft"
    assert exc_info.value.requested == "published"
    assert article.status == ArticleStatus.DRAFT


def test_full_lifecycle(author, moderator):
    article = make_article()

    workflow.submit(article, author, now=NOW)
    assert article.status == ArticleStatus.PENDING
    assert article.published_at is None

    record = workflow.approve(article, moderator, now=NOW)
    assert article.status == ArticleStatus.PUBLISHED
    assert article.published_at == NOW
    assert record.previous == ArticleStatus.PENDING
    assert record.actor_id == "mod-1"


def test_publish_time_survives_hide_and_unhide(author, moderator):
    article = make_article()
    workflow.submit(article, author, now=NOW)
    workflow.approve(article, moderator, now=NOW)

    later = NOW + timedelta(days=2)
    workflow.hide(article, moderator, now=later)
    assert article.status == ArticleStatus.HIDDEN
    workflow.unhide(article, moderator, now=later)

    assert article.status == ArticleStatus.PUBLISHED
    assert article.published_at == NOW


def test_second_approval_keeps_original_publish_time(author, moderator):
    article = make_article()
    workflow.submit(article, author, now=NOW)
    workflow.approve(article, moderator, now=NOW)

    with pytest.raises(InvalidTransitionError):
        workflow.approve(article, moderator, now=NOW + timedelta(hours=5))

    assert article.published_at == NOW


def test_reject_requires_reason(author, moderator):
    article = make_article()
    workflow.submit(article, author, now=NOW)

    with pytest.raises(DomainValidationError):
        workflow.reject(article, moderator, reason="   ", now=NOW)

    workflow.reject(article, moderator, reason="Needs sources", now=NOW)
    assert article.status == ArticleStatus.REJECTED
    assert article.rejection_reason == "Needs sources"


def test_revise_returns_rejected_article_to_draft(author, moderator):
    article = make_article()
    workflow.submit(article, author, now=NOW)
    workflow.reject(article, moderator, reason="Needs sources", now=NOW)

    workflow.revise(article, author, now=NOW)

    assert article.status == ArticleStatus.DRAFT
    assert article.rejection_reason is None


def test_only_moderators_can_approve(author):
    article = make_article()
    workflow.submit(article, author, now=NOW)

    with pytest.raises(NotAuthorizedError):
        workflow.approve(article, author, now=NOW)


def test_only_author_can_submit(other_user):
    article = make_article()

    with pytest.raises(NotAuthorizedError):
        workflow.submit(article, other_user, now=NOW)


def test_moderator_can_submit_on_behalf_of_author(moderator):
    article = make_article()

    workflow.submit(article, moderator, now=NOW)

    assert article.status == ArticleStatus.PENDING


@pytest.mark.parametrize("current,target", [
    (ArticleStatus.DRAFT, ArticleStatus.HIDDEN),
    (ArticleStatus.PENDING, ArticleStatus.HIDDEN),
    (ArticleStatus.PUBLISHED, ArticleStatus.DRAFT),
    (ArticleStatus.HIDDEN, ArticleStatus.REJECTED),
    (ArticleStatus.REJECTED, ArticleStatus.PUBLISHED),
])
def test_transitions_outside_table_fail(current, target, admin):
    article = make_article(status=current)

    with pytest.raises(InvalidTransitionError):
        workflow.transition(article, target, admin, reason="r", now=NOW)

    assert article.status == current
