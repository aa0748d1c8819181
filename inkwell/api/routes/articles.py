"""
FastAPI routes for articles.
"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from inkwell.api.dependencies import get_article_service, get_identity, get_optional_identity
from inkwell.api.schemas.article_schemas import (
    ArticlePageResponse,
    ArticleResponse,
    CommentNodeResponse,
    CommentRequest,
    CommentResponse,
    CreateArticleRequest,
    EditCommentRequest,
    LikeResponse,
    TransitionRequest,
    UpdateArticleRequest,
)
from inkwell.application.commands.article_commands import (
    AddCommentCommand,
    CreateArticleCommand,
    EditCommentCommand,
    ToggleCommentLikeCommand,
    ToggleLikeCommand,
    TransitionStatusCommand,
    UpdateArticleCommand,
)
from inkwell.application.queries.article_queries import (
    GetArticleBySlugQuery,
    GetArticleQuery,
    ListByAuthorQuery,
    ListPendingQuery,
    ListPublishedQuery,
    SearchPublishedQuery,
)
from inkwell.application.services.article_service import ArticleService
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.identity import Identity
from inkwell.domain.value_objects.listing import ListingSort, PageRequest
from inkwell.infrastructure.config.settings import Settings, get_settings

router = APIRouter(prefix="/articles", tags=["articles"])
authors_router = APIRouter(prefix="/authors", tags=["authors"])


def page_params(
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    page: Optional[int] = Query(default=None, ge=1),
) -> PageRequest:
    return PageRequest(limit=limit, offset=offset, page=page)


# =============================================================================
# Published listings
# =============================================================================

@router.get("/", response_model=ArticlePageResponse)
async def list_published(
    sort: ListingSort = ListingSort.RECENT,
    tags: List[str] = Query(default=[]),
    categories: List[str] = Query(default=[]),
    page: PageRequest = Depends(page_params),
    service: ArticleService = Depends(get_article_service),
):
    """Published articles by recency, trending score, featured priority or views."""
    result = await service.list_published(
        ListPublishedQuery(sort=sort, page=page, tags=tuple(tags), categories=tuple(categories))
    )
    return ArticlePageResponse.from_page(result)


@router.get("/search", response_model=ArticlePageResponse)
async def search_published(
    q: str = Query(..., min_length=1),
    tags: List[str] = Query(default=[]),
    categories: List[str] = Query(default=[]),
    page: PageRequest = Depends(page_params),
    service: ArticleService = Depends(get_article_service),
):
    """Full-text search over published articles."""
    result = await service.search_published(
        SearchPublishedQuery(query=q, page=page, tags=tuple(tags), categories=tuple(categories))
    )
    return ArticlePageResponse.from_page(result)


@router.get("/trending", response_model=ArticlePageResponse)
async def list_trending(
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_settings),
):
    result = await service.list_published(
        ListPublishedQuery(sort=ListingSort.TRENDING, page=PageRequest(limit=settings.trending_limit))
    )
    return ArticlePageResponse.from_page(result)


@router.get("/featured", response_model=ArticlePageResponse)
async def list_featured(
    service: ArticleService = Depends(get_article_service),
    settings: Settings = Depends(get_settings),
):
    result = await service.list_published(
        ListPublishedQuery(sort=ListingSort.FEATURED, page=PageRequest(limit=settings.featured_limit))
    )
    return ArticlePageResponse.from_page(result)


@router.get("/pending", response_model=ArticlePageResponse)
async def list_pending(
    page: PageRequest = Depends(page_params),
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    """Moderation queue."""
    result = await service.list_pending(ListPendingQuery(viewer=identity, page=page))
    return ArticlePageResponse.from_page(result)


@router.get("/slug/{slug}", response_model=ArticleResponse)
async def get_by_slug(
    slug: str,
    service: ArticleService = Depends(get_article_service),
):
    """Public article page; counts a view."""
    article = await service.get_published_by_slug(GetArticleBySlugQuery(slug=slug))
    return ArticleResponse.from_entity(article)


# =============================================================================
# Authoring and moderation
# =============================================================================

@router.post("/", response_model=ArticleResponse, status_code=201)
async def create_article(
    request: CreateArticleRequest,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    """Create a draft."""
    command = CreateArticleCommand(
        author=identity,
        title=request.title,
        content=request.content,
        excerpt=request.excerpt,
        tags=tuple(request.tags),
        categories=tuple(request.categories),
        featured_image=request.featured_image.to_entity() if request.featured_image else None,
        images=tuple(image.to_entity() for image in request.images),
        seo=request.seo.to_entity() if request.seo else None,
    )
    article = await service.create_article(command)
    return ArticleResponse.from_entity(article)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: UUID,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: ArticleService = Depends(get_article_service),
):
    article = await service.get_article(GetArticleQuery(article_id=article_id, viewer=identity))
    return ArticleResponse.from_entity(article)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: UUID,
    request: UpdateArticleRequest,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    command = UpdateArticleCommand(
        article_id=article_id,
        actor=identity,
        title=request.title,
        content=request.content,
        excerpt=request.excerpt,
        tags=tuple(request.tags) if request.tags is not None else None,
        categories=tuple(request.categories) if request.categories is not None else None,
        featured_image=request.featured_image.to_entity() if request.featured_image else None,
        images=tuple(i.to_entity() for i in request.images) if request.images is not None else None,
        seo=request.seo.to_entity() if request.seo else None,
        is_featured=request.is_featured,
        priority=request.priority,
        admin_notes=request.admin_notes,
    )
    article = await service.update_article(command)
    return ArticleResponse.from_entity(article)


@router.post("/{article_id}/status", response_model=ArticleResponse)
async def transition_status(
    article_id: UUID,
    request: TransitionRequest,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    """Submit, approve, reject, hide, unhide or revise."""
    article = await service.transition_status(
        TransitionStatusCommand(
            article_id=article_id,
            actor=identity,
            target_status=request.status,
            reason=request.reason,
        )
    )
    return ArticleResponse.from_entity(article)


# =============================================================================
# Engagement
# =============================================================================

@router.post("/{article_id}/like", response_model=LikeResponse)
async def toggle_like(
    article_id: UUID,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    result = await service.toggle_like(ToggleLikeCommand(article_id=article_id, actor=identity))
    return LikeResponse(liked=result.liked, like_count=result.like_count)


@router.get("/{article_id}/comments", response_model=List[CommentNodeResponse])
async def get_comments(
    article_id: UUID,
    identity: Optional[Identity] = Depends(get_optional_identity),
    service: ArticleService = Depends(get_article_service),
):
    """Comment tree, roots and replies in posting order."""
    tree = await service.get_comment_tree(GetArticleQuery(article_id=article_id, viewer=identity))
    return [CommentNodeResponse.from_node(node) for node in tree]


@router.post("/{article_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    article_id: UUID,
    request: CommentRequest,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    comment = await service.add_comment(
        AddCommentCommand(
            article_id=article_id,
            actor=identity,
            content=request.content,
            parent_comment_id=request.parent_comment_id,
        )
    )
    return CommentResponse.from_entity(comment)


@router.patch("/{article_id}/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    article_id: UUID,
    comment_id: str,
    request: EditCommentRequest,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    comment = await service.edit_comment(
        EditCommentCommand(
            article_id=article_id,
            comment_id=comment_id,
            actor=identity,
            content=request.content,
        )
    )
    return CommentResponse.from_entity(comment)


@router.post("/{article_id}/comments/{comment_id}/like", response_model=LikeResponse)
async def toggle_comment_like(
    article_id: UUID,
    comment_id: str,
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    result = await service.toggle_comment_like(
        ToggleCommentLikeCommand(article_id=article_id, comment_id=comment_id, actor=identity)
    )
    return LikeResponse(liked=result.liked, like_count=result.like_count)


# =============================================================================
# Authors
# =============================================================================

@authors_router.get("/{author_id}/articles", response_model=ArticlePageResponse)
async def list_by_author(
    author_id: str,
    status: Optional[ArticleStatus] = None,
    page: PageRequest = Depends(page_params),
    identity: Identity = Depends(get_identity),
    service: ArticleService = Depends(get_article_service),
):
    """Author dashboard."""
    result = await service.list_by_author(
        ListByAuthorQuery(author_id=author_id, viewer=identity, status=status, page=page)
    )
    return ArticlePageResponse.from_page(result)
