"""
Application Service for articles.

Entry point for the API layer: writes go through the command handler,
reads through the repository. Results returned to non-moderators never
carry moderation fields.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

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
from inkwell.application.handlers.article_command_handler import ArticleCommandHandler, LikeResult
from inkwell.application.queries.article_queries import (
    GetArticleBySlugQuery,
    GetArticleQuery,
    ListByAuthorQuery,
    ListPendingQuery,
    ListPublishedQuery,
    SearchPublishedQuery,
)
from inkwell.domain.entities.article import Article
from inkwell.domain.entities.comment import Comment
from inkwell.domain.repositories.article_repository import IArticleRepository
from inkwell.domain.services.engagement import CommentNode, build_comment_tree
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import DEFAULT_MODERATOR_ROLES, Identity, UserRole
from inkwell.domain.value_objects.listing import Page, PageRequest
from inkwell.shared.exceptions.domain_exceptions import EntityNotFoundError, NotAuthorizedError

logger = logging.getLogger(__name__)

SWEEP_BATCH_SIZE = 200


class ArticleService:
    """
    Application Service for articles.

    Coordinates the command handler and the repository.
    """

    def __init__(
        self,
        repository: IArticleRepository,
        command_handler: ArticleCommandHandler,
        moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES,
        max_page_size: int = 100,
    ):
        self.repository = repository
        self.command_handler = command_handler
        self.moderator_roles = tuple(moderator_roles)
        self.max_page_size = max_page_size

    # =========================================================================
    # Writes
    # =========================================================================

    async def create_article(self, command: CreateArticleCommand) -> Article:
        article = await self.command_handler.handle_create_article(command)
        return self.present(article, command.author)

    async def update_article(self, command: UpdateArticleCommand) -> Article:
        article = await self.command_handler.handle_update_article(command)
        return self.present(article, command.actor)

    async def transition_status(self, command: TransitionStatusCommand) -> Article:
        article = await self.command_handler.handle_transition_status(command)
        return self.present(article, command.actor)

    async def toggle_like(self, command: ToggleLikeCommand) -> LikeResult:
        return await self.command_handler.handle_toggle_like(command)

    async def add_comment(self, command: AddCommentCommand) -> Comment:
        return await self.command_handler.handle_add_comment(command)

    async def edit_comment(self, command: EditCommentCommand) -> Comment:
        return await self.command_handler.handle_edit_comment(command)

    async def toggle_comment_like(self, command: ToggleCommentLikeCommand) -> LikeResult:
        return await self.command_handler.handle_toggle_comment_like(command)

    async def recompute_trending(self, now: Optional[datetime] = None) -> int:
        """
        Sweep every published article and refresh its trending score.

        Returns:
            Number of articles refreshed
        """
        refreshed = 0
        offset = 0
        while True:
            batch = await self.repository.find_all(
                status=ArticleStatus.PUBLISHED, limit=SWEEP_BATCH_SIZE, offset=offset
            )
            if not batch:
                break
            for article in batch:
                await self.command_handler.handle_recompute_trending(article.id, now)
                refreshed += 1
            offset += len(batch)
        logger.info("Trending sweep refreshed %d articles", refreshed)
        return refreshed

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_article(self, query: GetArticleQuery) -> Article:
        """
        Raises:
            EntityNotFoundError: missing, or not visible to the viewer
        """
        article = await self.repository.find_by_id(query.article_id)
        if article is None or not self.can_view(article, query.viewer):
            raise EntityNotFoundError("Article not found", {"article_id": str(query.article_id)})
        return self.present(article, query.viewer)

    async def get_published_by_slug(self, query: GetArticleBySlugQuery) -> Article:
        """Public article page. Counts a view."""
        article = await self.repository.find_by_slug(query.slug)
        if article is None or not article.status.is_public:
            raise EntityNotFoundError("Article not found", {"slug": query.slug})
        article.views = await self.command_handler.handle_record_view(RecordViewCommand(article.id))
        return article.public_view()

    async def get_comment_tree(self, query: GetArticleQuery) -> List[CommentNode]:
        article = await self.get_article(query)
        return build_comment_tree(article)

    async def list_published(self, query: ListPublishedQuery) -> Page:
        return await self.repository.find_published(
            query.sort,
            query.page.capped(self.max_page_size),
            tags=query.tags,
            categories=query.categories,
        )

    async def search_published(self, query: SearchPublishedQuery) -> Page:
        return await self.repository.search_published(
            query.query,
            query.page.capped(self.max_page_size),
            tags=query.tags,
            categories=query.categories,
        )

    async def list_by_author(self, query: ListByAuthorQuery) -> Page:
        """Author dashboard; other viewers only see the author's published work."""
        privileged = query.viewer.owns(query.author_id) or self._is_moderator(query.viewer)
        status = query.status if privileged else ArticleStatus.PUBLISHED
        if not privileged and query.status not in (None, ArticleStatus.PUBLISHED):
            return Page(items=[], total=0, limit=query.page.limit, offset=query.page.start)
        return await self._page(query.page, status=status, author_id=query.author_id, viewer=query.viewer)

    async def list_pending(self, query: ListPendingQuery) -> Page:
        """Moderation queue."""
        if not self._is_moderator(query.viewer):
            raise NotAuthorizedError("Only moderators can view the moderation queue")
        return await self._page(query.page, status=ArticleStatus.PENDING, viewer=query.viewer)

    # =========================================================================
    # Visibility
    # =========================================================================

    def _is_moderator(self, viewer: Optional[Identity]) -> bool:
        return viewer is not None and viewer.is_moderator(self.moderator_roles)

    def can_view(self, article: Article, viewer: Optional[Identity]) -> bool:
        if article.status.is_public or self._is_moderator(viewer):
            return True
        return viewer is not None and viewer.owns(article.author_id)

    def present(self, article: Article, viewer: Optional[Identity]) -> Article:
        """
        Strip moderation fields for the viewer.

        Moderators see everything; the author also sees why the article was
        rejected; everyone else gets the public view.
        """
        if self._is_moderator(viewer):
            return article
        if viewer is not None and viewer.owns(article.author_id):
            return replace(article, admin_notes=None)
        return article.public_view()

    async def _page(
        self,
        page: PageRequest,
        status: Optional[ArticleStatus],
        viewer: Identity,
        author_id: Optional[str] = None,
    ) -> Page:
        page = page.capped(self.max_page_size)
        items = await self.repository.find_all(
            status=status, author_id=author_id, limit=page.limit, offset=page.start
        )
        total = await self.repository.count(status=status, author_id=author_id)
        return Page(
            items=[self.present(a, viewer) for a in items],
            total=total,
            limit=page.limit,
            offset=page.start,
        )
