"""
FastAPI dependencies for DI.

Authentication happens upstream: the gateway forwards the verified caller
as ``X-User-Id`` / ``X-User-Role`` headers.
"""

from functools import lru_cache
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException

from inkwell.application.handlers.article_command_handler import ArticleCommandHandler
from inkwell.application.services.article_service import ArticleService
from inkwell.domain.repositories.article_repository import IArticleRepository
from inkwell.domain.value_objects.identity import Identity, UserRole
from inkwell.infrastructure.config.database import get_session_factory
from inkwell.infrastructure.config.settings import Settings, get_settings
from inkwell.infrastructure.persistence.article_repository_impl import ArticleRepositoryImpl
from inkwell.infrastructure.persistence.in_memory_repository import InMemoryArticleRepository


@lru_cache()
def get_memory_repository() -> InMemoryArticleRepository:
    """Process-wide in-memory store."""
    return InMemoryArticleRepository()


async def get_article_repository(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[IArticleRepository]:
    """DI for the repository."""
    if settings.uses_memory_storage():
        yield get_memory_repository()
        return
    async with get_session_factory()() as session:
        yield ArticleRepositoryImpl(session)


async def get_article_service(
    repository: IArticleRepository = Depends(get_article_repository),
    settings: Settings = Depends(get_settings),
) -> ArticleService:
    """DI for the service."""
    command_handler = ArticleCommandHandler(
        repository,
        moderator_roles=settings.moderator_roles,
        slug_max_attempts=settings.slug_max_attempts,
        recompute_on_write=settings.recompute_on_write(),
    )
    return ArticleService(
        repository,
        command_handler,
        moderator_roles=settings.moderator_roles,
        max_page_size=settings.max_page_size,
    )


async def get_optional_identity(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Optional[Identity]:
    if not x_user_id:
        return None
    try:
        role = UserRole((x_user_role or UserRole.USER.value).lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: {x_user_role}")
    return Identity(user_id=x_user_id, role=role)


async def get_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    if identity is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return identity
