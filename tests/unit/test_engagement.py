"""
Unit tests for likes, comments and views.
"""

from uuid import uuid4

import pytest

from inkwell.domain.entities.comment import Comment
from inkwell.domain.services import engagement
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.shared.exceptions.domain_exceptions import (
    CommentNotFoundError,
    DomainValidationError,
    EntityNotFoundError,
    NotAuthorizedError,
)
from tests.factories import NOW, make_article


@pytest.fixture
def article():
    return make_article(status=ArticleStatus.PUBLISHED)


def test_toggle_like_twice_restores_state(article):
    before = [like.user_id for like in article.likes]

    assert engagement.toggle_like(article, "u1", NOW) is True
    assert article.is_liked_by("u1")
    assert engagement.toggle_like(article, "u1", NOW) is False

    assert [like.user_id for like in article.likes] == before


def test_likes_from_different_users_accumulate(article):
    engagement.toggle_like(article, "u1", NOW)
    engagement.toggle_like(article, "u2", NOW)

    assert article.like_count == 2
    assert article.likes[0].liked_at == NOW


def test_add_root_comment_and_reply(article):
    root = engagement.add_comment(article, "u1", "First!", now=NOW)
    reply = engagement.add_comment(article, "u2", "Welcome", parent_comment_id=str(root.id), now=NOW)

    assert root.is_root
    assert reply.parent_comment_id == root.id
    assert [c.id for c in article.comments] == [root.id, reply.id]


def test_reply_to_comment_from_other_article_fails(article):
    other = make_article(title="Other", status=ArticleStatus.PUBLISHED)
    foreign = engagement.add_comment(other, "u1", "Elsewhere", now=NOW)

    with pytest.raises(CommentNotFoundError):
        engagement.add_comment(article, "u2", "Reply", parent_comment_id=foreign.id, now=NOW)

    assert article.comments == []


def test_reply_with_malformed_parent_id_fails(article):
    with pytest.raises(CommentNotFoundError):
        engagement.add_comment(article, "u2", "Reply", parent_comment_id="not-a-uuid")


@pytest.mark.parametrize("content", ["", "   ", "x" * 1001])
def test_comment_content_is_validated(article, content):
    with pytest.raises(DomainValidationError):
        engagement.add_comment(article, "u1", content)


def test_edit_comment_marks_edited(article, other_user):
    comment = engagement.add_comment(article, other_user.user_id, "Tpyo", now=NOW)

    edited = engagement.edit_comment(article, comment.id, other_user, "Typo", now=NOW)

    assert edited.content == "Typo"
    assert edited.is_edited is True
    assert edited.edited_at == NOW


def test_edit_comment_by_someone_else_fails(article, author):
    comment = engagement.add_comment(article, "u1", "Mine", now=NOW)

    with pytest.raises(NotAuthorizedError):
        engagement.edit_comment(article, comment.id, author, "Hijacked")


def test_edit_unknown_comment_fails(article, moderator):
    with pytest.raises(CommentNotFoundError):
        engagement.edit_comment(article, uuid4(), moderator, "Anything")


def test_toggle_comment_like(article):
    comment = engagement.add_comment(article, "u1", "Like me", now=NOW)

    assert engagement.toggle_comment_like(article, comment.id, "u2", NOW) is True
    assert comment.like_count == 1
    assert engagement.toggle_comment_like(article, comment.id, "u2", NOW) is False
    assert comment.like_count == 0


def test_record_view(article):
    assert engagement.record_view(article) == 1
    assert engagement.record_view(article, 4) == 5


def test_engagement_requires_published_article():
    draft = make_article()

    with pytest.raises(EntityNotFoundError):
        engagement.ensure_engageable(draft)


def test_build_comment_tree(article):
    first = engagement.add_comment(article, "u1", "first", now=NOW)
    second = engagement.add_comment(article, "u2", "second", now=NOW)
    reply_a = engagement.add_comment(article, "u3", "reply a", parent_comment_id=first.id, now=NOW)
    nested = engagement.add_comment(article, "u4", "nested", parent_comment_id=reply_a.id, now=NOW)
    reply_b = engagement.add_comment(article, "u5", "reply b", parent_comment_id=first.id, now=NOW)

    tree = engagement.build_comment_tree(article)

    assert [node.comment.id for node in tree] == [first.id, second.id]
    assert [node.comment.id for node in tree[0].replies] == [reply_a.id, reply_b.id]
    assert tree[0].replies[0].replies[0].comment.id == nested.id
    assert tree[1].replies == []


def test_comment_entity_validates_length():
    with pytest.raises(DomainValidationError):
        Comment(user_id="u1", content="y" * 1001)
