"""
Shared fixtures.
"""

import pytest

from inkwell.application.handlers.article_command_handler import ArticleCommandHandler
from inkwell.application.services.article_service import ArticleService
from inkwell.domain.value_objects.identity import Identity, UserRole
from inkwell.infrastructure.persistence.in_memory_repository import InMemoryArticleRepository
from tests.factories import NOW


@pytest.fixture
def author():
    return Identity(user_id="author-1", role=UserRole.AUTHOR)


@pytest.fixture
def other_user():
    return Identity(user_id="reader-9", role=UserRole.USER)


@pytest.fixture
def moderator():
    return Identity(user_id="mod-1", role=UserRole.MODERATOR)


@pytest.fixture
def admin():
    return Identity(user_id="admin-1", role=UserRole.ADMIN)


@pytest.fixture
def repository():
    return InMemoryArticleRepository()


@pytest.fixture
def handler(repository):
    return ArticleCommandHandler(repository, clock=lambda: NOW)


@pytest.fixture
def service(repository, handler):
    return ArticleService(repository, handler)
