"""
Command Handler for articles.

Every write is a single read-modify-write of one article performed inside
the repository's per-article lock, followed by an explicit recompute of the
derived fields before the article is persisted.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional
from uuid import UUID

from inkwell.application.commands.article_commands import (
    AddCommentCommand,
    CreateArticleCommand,
    EditCommentCommand,
    RecordViewCommand,
    ToggleCommentLikeCommand,
    ToggleLikeCommand,
    TransitionStatusCommand,
    UpdateArticleCommand,
)
from inkwell.domain.entities.article import Article, SeoMetadata, normalize_labels
from inkwell.domain.entities.comment import Comment, utcnow
from inkwell.domain.repositories.article_repository import IArticleRepository
from inkwell.domain.services import engagement, publication_workflow
from inkwell.domain.services.derived_fields import recompute_derived_fields
from inkwell.domain.services.slug_generator import find_available_slug, generate_slug
from inkwell.domain.services.trending import refresh_analytics
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import DEFAULT_MODERATOR_ROLES, UserRole
from inkwell.shared.exceptions.domain_exceptions import (
    EntityNotFoundError,
    NotAuthorizedError,
    SlugCollisionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeResult:
    liked: bool
    like_count: int


class ArticleCommandHandler:
    """Handler for article commands."""

    def __init__(
        self,
        repository: IArticleRepository,
        moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES,
        slug_max_attempts: int = 5,
        recompute_on_write: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.moderator_roles = tuple(moderator_roles)
        self.slug_max_attempts = max(1, slug_max_attempts)
        self.recompute_on_write = recompute_on_write
        self.clock = clock

    # =========================================================================
    # Authoring
    # =========================================================================

    async def handle_create_article(self, command: CreateArticleCommand) -> Article:
        """
        Create a draft owned by the command's author.

        Raises:
            DomainValidationError: field constraints violated
            SlugCollisionError: no free slug within the retry budget
        """
        now = self.clock()
        excerpt = (command.excerpt or "").strip()
        article = Article(
            title=command.title,
            content=command.content,
            author_id=str(command.author.user_id),
            excerpt=excerpt,
            custom_excerpt=bool(excerpt),
            tags=list(command.tags),
            categories=list(command.categories),
            featured_image=command.featured_image,
            images=list(command.images),
            seo=command.seo or SeoMetadata(),
            created_at=now,
            updated_at=now,
        )
        recompute_derived_fields(article, title_changed=True, content_changed=True, now=now)

        saved = await self._save_with_unique_slug(article)
        logger.info("Created article %s (%s) by %s", saved.id, saved.slug, saved.author_id)
        return saved

    async def handle_update_article(self, command: UpdateArticleCommand) -> Article:
        """
        Apply a partial update and recompute derived fields.

        A content or title change to a rejected article sends it back to
        draft. The slug follows the title only until first publication.

        Raises:
            EntityNotFoundError, NotAuthorizedError, DomainValidationError,
            SlugCollisionError
        """
        actor = command.actor
        async with self.repository.lock(command.article_id):
            article = await self._get(command.article_id)
            is_moderator = actor.is_moderator(self.moderator_roles)

            if command.touches_moderation and not is_moderator:
                raise NotAuthorizedError("Only moderators can change featured status or notes")
            if command.touches_content and not (is_moderator or actor.owns(article.author_id)):
                raise NotAuthorizedError("Only the author can edit this article")

            now = self.clock()
            title_changed = command.title is not None and command.title.strip() != article.title
            content_changed = command.content is not None and command.content != article.content

            if command.title is not None:
                article.title = command.title.strip()
            if command.content is not None:
                article.content = command.content
            if command.excerpt is not None:
                article.excerpt = command.excerpt.strip()
                article.custom_excerpt = bool(article.excerpt)
            if command.tags is not None:
                article.tags = normalize_labels(command.tags)
            if command.categories is not None:
                article.categories = normalize_labels(command.categories)
            if command.featured_image is not None:
                article.featured_image = command.featured_image
            if command.images is not None:
                article.images = list(command.images)
            if command.seo is not None:
                article.seo = command.seo
            if command.is_featured is not None:
                article.is_featured = command.is_featured
            if command.priority is not None:
                article.priority = command.priority
            if command.admin_notes is not None:
                article.admin_notes = command.admin_notes.strip() or None

            if article.status is ArticleStatus.REJECTED and (title_changed or content_changed):
                publication_workflow.revise(
                    article, actor, now=now, moderator_roles=self.moderator_roles
                )
                logger.info("Article %s revised after rejection, back to draft", article.id)

            changes = recompute_derived_fields(
                article,
                title_changed=title_changed,
                content_changed=content_changed,
                now=now,
            )
            article.touch(now)

            if changes.slug:
                saved = await self._save_with_unique_slug(article)
            else:
                saved = await self.repository.save(article)

        logger.info("Updated article %s by %s", saved.id, actor.user_id)
        return saved

    async def handle_transition_status(self, command: TransitionStatusCommand) -> Article:
        """
        Raises:
            EntityNotFoundError, InvalidTransitionError, NotAuthorizedError,
            DomainValidationError
        """
        async with self.repository.lock(command.article_id):
            article = await self._get(command.article_id)
            record = publication_workflow.transition(
                article,
                ArticleStatus(command.target_status),
                command.actor,
                reason=command.reason,
                now=self.clock(),
                moderator_roles=self.moderator_roles,
            )
            if self.recompute_on_write and record.current is ArticleStatus.PUBLISHED:
                refresh_analytics(article, record.at)
            saved = await self.repository.save(article)

        logger.info(
            "Article %s: %s -> %s by %s",
            record.article_id, record.previous.value, record.current.value, record.actor_id,
        )
        return saved

    # =========================================================================
    # Engagement
    # =========================================================================

    async def handle_toggle_like(self, command: ToggleLikeCommand) -> LikeResult:
        async with self.repository.lock(command.article_id):
            article = await self._get_engageable(command.article_id)
            now = self.clock()
            liked = engagement.toggle_like(article, command.actor.user_id, now)
            await self._save_engagement(article, now)
        return LikeResult(liked=liked, like_count=article.like_count)

    async def handle_add_comment(self, command: AddCommentCommand) -> Comment:
        """
        Raises:
            EntityNotFoundError: article missing or not published
            CommentNotFoundError: parent comment not on this article
            DomainValidationError: empty or over-long content
        """
        async with self.repository.lock(command.article_id):
            article = await self._get_engageable(command.article_id)
            now = self.clock()
            comment = engagement.add_comment(
                article,
                command.actor.user_id,
                command.content,
                parent_comment_id=command.parent_comment_id,
                now=now,
            )
            await self._save_engagement(article, now)
        logger.info("Comment %s added to article %s", comment.id, article.id)
        return comment

    async def handle_edit_comment(self, command: EditCommentCommand) -> Comment:
        async with self.repository.lock(command.article_id):
            article = await self._get_engageable(command.article_id)
            comment = engagement.edit_comment(
                article,
                command.comment_id,
                command.actor,
                command.content,
                now=self.clock(),
                moderator_roles=self.moderator_roles,
            )
            await self.repository.save(article)
        return comment

    async def handle_toggle_comment_like(self, command: ToggleCommentLikeCommand) -> LikeResult:
        async with self.repository.lock(command.article_id):
            article = await self._get_engageable(command.article_id)
            liked = engagement.toggle_comment_like(
                article, command.comment_id, command.actor.user_id, self.clock()
            )
            await self.repository.save(article)
        comment = article.find_comment(UUID(str(command.comment_id)))
        return LikeResult(liked=liked, like_count=comment.like_count)

    async def handle_record_view(self, command: RecordViewCommand) -> int:
        async with self.repository.lock(command.article_id):
            article = await self._get_engageable(command.article_id)
            now = self.clock()
            views = engagement.record_view(article)
            await self._save_engagement(article, now)
        return views

    async def handle_recompute_trending(self, article_id: UUID, now: Optional[datetime] = None) -> float:
        """Refresh one article's trending score and engagement rate."""
        async with self.repository.lock(article_id):
            article = await self._get(article_id)
            score = refresh_analytics(article, now or self.clock())
            await self.repository.save(article)
        return score

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get(self, article_id: UUID) -> Article:
        article = await self.repository.find_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article not found", {"article_id": str(article_id)})
        return article

    async def _get_engageable(self, article_id: UUID) -> Article:
        article = await self._get(article_id)
        engagement.ensure_engageable(article)
        return article

    async def _save_engagement(self, article: Article, now: datetime) -> Article:
        if self.recompute_on_write:
            refresh_analytics(article, now)
        return await self.repository.save(article)

    async def _save_with_unique_slug(self, article: Article) -> Article:
        """
        Persist with the first free disambiguation of the title's slug.

        A collision reported by the store on save (a concurrent writer took
        the slug) moves on to the next suffix.
        """
        lost = set()

        async def slug_exists(candidate: str) -> bool:
            if candidate in lost:
                return True
            return await self.repository.slug_exists(candidate, exclude_id=article.id)

        while True:
            candidate = await find_available_slug(article.title, slug_exists, self.slug_max_attempts)
            if candidate is None:
                base = generate_slug(article.title)
                logger.warning("No free slug for '%s' after %d attempts", base, self.slug_max_attempts)
                raise SlugCollisionError(base)
            article.slug = candidate
            try:
                return await self.repository.save(article)
            except SlugCollisionError:
                lost.add(candidate)
                logger.warning("Slug '%s' taken concurrently, retrying", candidate)
