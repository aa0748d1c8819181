"""
Engagement on a published article: likes, threaded comments and views.

All operations mutate the article in place. The caller is responsible for
applying them inside a per-article write lock so concurrent likes from
different users are never lost.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Union
from uuid import UUID

from inkwell.domain.entities.article import Article
from inkwell.domain.entities.comment import Comment, Like, utcnow, validate_comment_content
from inkwell.domain.value_objects.identity import DEFAULT_MODERATOR_ROLES, Identity, UserRole
from inkwell.shared.exceptions.domain_exceptions import (
    CommentNotFoundError,
    DomainValidationError,
    EntityNotFoundError,
    NotAuthorizedError,
)

CommentRef = Union[UUID, str]


def ensure_engageable(article: Article) -> None:
    """
    Raises:
        EntityNotFoundError: if the article is not publicly visible
    """
    if not article.status.is_public:
        raise EntityNotFoundError("Article not found", {"article_id": str(article.id)})


def _toggle(likes: List[Like], user_id: str, now: Optional[datetime]) -> bool:
    user_id = str(user_id)
    for index, like in enumerate(likes):
        if like.user_id == user_id:
            del likes[index]
            return False
    likes.append(Like(user_id=user_id, liked_at=now or utcnow()))
    return True


def _resolve_comment(article: Article, comment_id: CommentRef) -> Comment:
    try:
        key = comment_id if isinstance(comment_id, UUID) else UUID(str(comment_id))
    except ValueError:
        raise CommentNotFoundError(comment_id)
    comment = article.find_comment(key)
    if comment is None:
        raise CommentNotFoundError(comment_id)
    return comment


def toggle_like(article: Article, user_id: str, now: Optional[datetime] = None) -> bool:
    """Like or unlike. Returns True when the article is now liked by the user."""
    return _toggle(article.likes, user_id, now)


def add_comment(
    article: Article,
    user_id: str,
    content: str,
    parent_comment_id: Optional[CommentRef] = None,
    now: Optional[datetime] = None,
) -> Comment:
    """
    Append a comment, optionally as a reply.

    Raises:
        DomainValidationError: empty or over-long content
        CommentNotFoundError: parent does not resolve within this article
    """
    validate_comment_content(content)
    parent_id = None
    if parent_comment_id is not None:
        parent_id = _resolve_comment(article, parent_comment_id).id
    comment = Comment(
        user_id=str(user_id),
        content=content,
        parent_comment_id=parent_id,
        created_at=now or utcnow(),
    )
    article.comments.append(comment)
    return comment


def edit_comment(
    article: Article,
    comment_id: CommentRef,
    actor: Identity,
    content: str,
    now: Optional[datetime] = None,
    moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES,
) -> Comment:
    """
    Replace a comment's content and mark it edited.

    Raises:
        CommentNotFoundError: unknown comment
        NotAuthorizedError: actor is neither the commenter nor a moderator
        DomainValidationError: empty or over-long content
    """
    comment = _resolve_comment(article, comment_id)
    if not actor.owns(comment.user_id) and not actor.is_moderator(moderator_roles):
        raise NotAuthorizedError("Only the commenter can edit this comment")
    validate_comment_content(content)
    comment.content = content
    comment.is_edited = True
    comment.edited_at = now or utcnow()
    return comment


def toggle_comment_like(
    article: Article,
    comment_id: CommentRef,
    user_id: str,
    now: Optional[datetime] = None,
) -> bool:
    """Like or unlike a comment. Returns True when the comment is now liked."""
    comment = _resolve_comment(article, comment_id)
    return _toggle(comment.likes, user_id, now)


def record_view(article: Article, count: int = 1) -> int:
    """Increase the view counter and return the new total."""
    if count < 0:
        raise DomainValidationError("View increment cannot be negative")
    article.views += count
    return article.views


@dataclass
class CommentNode:
    """A comment with its replies, for threaded display."""

    comment: Comment
    replies: List['CommentNode'] = field(default_factory=list)


def build_comment_tree(article: Article) -> List[CommentNode]:
    """
    Rebuild the comment tree from ``parent_comment_id`` links.

    Roots and siblings keep insertion order.
    """
    nodes = {comment.id: CommentNode(comment) for comment in article.comments}
    roots: List[CommentNode] = []
    for comment in article.comments:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_comment_id) if comment.parent_comment_id else None
        if parent is None:
            roots.append(node)
        else:
            parent.replies.append(node)
    return roots
