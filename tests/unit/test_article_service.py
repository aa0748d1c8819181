"""
Unit tests for ArticleService: visibility, reads and the trending sweep.
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from inkwell.application.queries.article_queries import (
    GetArticleBySlugQuery,
    GetArticleQuery,
    ListByAuthorQuery,
    ListPendingQuery,
    ListPublishedQuery,
    SearchPublishedQuery,
)
from inkwell.domain.entities.comment import Like
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, PageRequest
from inkwell.shared.exceptions.domain_exceptions import EntityNotFoundError, NotAuthorizedError
from tests.factories import NOW, make_article


async def seed(repository, *articles):
    for article in articles:
        await repository.save(article)
    return articles


class TestVisibility:

    @pytest.mark.asyncio
    async def test_draft_hidden_from_strangers(self, service, repository, other_user):
        (draft,) = await seed(repository, make_article(title="Secret"))

        with pytest.raises(EntityNotFoundError):
            await service.get_article(GetArticleQuery(article_id=draft.id, viewer=other_user))
        with pytest.raises(EntityNotFoundError):
            await service.get_article(GetArticleQuery(article_id=draft.id, viewer=None))

    @pytest.mark.asyncio
    async def test_draft_visible_to_author_and_moderator(self, service, repository, author, moderator):
        (draft,) = await seed(repository, make_article(title="Secret", admin_notes="check sources"))

        own = await service.get_article(GetArticleQuery(article_id=draft.id, viewer=author))
        moderated = await service.get_article(GetArticleQuery(article_id=draft.id, viewer=moderator))

        assert own.admin_notes is None
        assert moderated.admin_notes == "check sources"

    @pytest.mark.asyncio
    async def test_author_sees_rejection_reason(self, service, repository, author, other_user):
        (rejected,) = await seed(
            repository,
            make_article(title="Rejected", status=ArticleStatus.REJECTED, rejection_reason="Too short"),
        )

        own = await service.get_article(GetArticleQuery(article_id=rejected.id, viewer=author))

        assert own.rejection_reason == "Too short"
        with pytest.raises(EntityNotFoundError):
            await service.get_article(GetArticleQuery(article_id=rejected.id, viewer=other_user))

    @pytest.mark.asyncio
    async def test_public_article_hides_moderation_fields(self, service, repository, other_user):
        (live,) = await seed(
            repository,
            make_article(title="Live", status=ArticleStatus.PUBLISHED, admin_notes="internal"),
        )

        seen = await service.get_article(GetArticleQuery(article_id=live.id, viewer=other_user))

        assert seen.admin_notes is None


class TestReads:

    @pytest.mark.asyncio
    async def test_get_published_by_slug_counts_view(self, service, repository):
        (live,) = await seed(repository, make_article(title="Counted", status=ArticleStatus.PUBLISHED))

        first = await service.get_published_by_slug(GetArticleBySlugQuery(slug="counted"))
        second = await service.get_published_by_slug(GetArticleBySlugQuery(slug="counted"))

        assert first.views == 1
        assert second.views == 2
        assert (await repository.find_by_id(live.id)).views == 2

    @pytest.mark.asyncio
    async def test_get_by_slug_ignores_unpublished(self, service, repository):
        await seed(repository, make_article(title="Pending one", status=ArticleStatus.PENDING))

        with pytest.raises(EntityNotFoundError):
            await service.get_published_by_slug(GetArticleBySlugQuery(slug="pending-one"))
        with pytest.raises(EntityNotFoundError):
            await service.get_published_by_slug(GetArticleBySlugQuery(slug="missing"))

    @pytest.mark.asyncio
    async def test_missing_article(self, service, moderator):
        with pytest.raises(EntityNotFoundError):
            await service.get_article(GetArticleQuery(article_id=uuid4(), viewer=moderator))

    @pytest.mark.asyncio
    async def test_list_published_caps_page_size(self, repository, handler):
        from inkwell.application.services.article_service import ArticleService

        service = ArticleService(repository, handler, max_page_size=2)
        await seed(repository, *[
            make_article(title=f"Post {i}", status=ArticleStatus.PUBLISHED) for i in range(4)
        ])

        page = await service.list_published(
            ListPublishedQuery(sort=ListingSort.RECENT, page=PageRequest(limit=50))
        )

        assert page.limit == 2
        assert len(page.items) == 2
        assert page.total == 4
        assert page.has_more is True

    @pytest.mark.asyncio
    async def test_search_published(self, service, repository):
        await seed(
            repository,
            make_article(title="Kotlin coroutines", status=ArticleStatus.PUBLISHED),
            make_article(title="Kotlin drafts"),
        )

        page = await service.search_published(SearchPublishedQuery(query="kotlin", page=PageRequest()))

        assert [a.title for a in page.items] == ["Kotlin coroutines"]


class TestDashboards:

    @pytest.mark.asyncio
    async def test_author_sees_all_own_articles(self, service, repository, author):
        await seed(
            repository,
            make_article(title="Draft one"),
            make_article(title="Live one", status=ArticleStatus.PUBLISHED),
            make_article(title="Someone else", author_id="author-2"),
        )

        page = await service.list_by_author(
            ListByAuthorQuery(author_id="author-1", viewer=author, page=PageRequest())
        )

        assert page.total == 2
        assert {a.title for a in page.items} == {"Draft one", "Live one"}

    @pytest.mark.asyncio
    async def test_other_users_see_only_published(self, service, repository, other_user):
        await seed(
            repository,
            make_article(title="Draft one"),
            make_article(title="Live one", status=ArticleStatus.PUBLISHED),
        )

        page = await service.list_by_author(
            ListByAuthorQuery(author_id="author-1", viewer=other_user, page=PageRequest())
        )
        drafts = await service.list_by_author(
            ListByAuthorQuery(
                author_id="author-1", viewer=other_user, status=ArticleStatus.DRAFT, page=PageRequest()
            )
        )

        assert [a.title for a in page.items] == ["Live one"]
        assert drafts.total == 0

    @pytest.mark.asyncio
    async def test_pending_queue_requires_moderator(self, service, repository, author, admin):
        await seed(
            repository,
            make_article(title="Waiting", status=ArticleStatus.PENDING),
            make_article(title="Draft one"),
        )

        with pytest.raises(NotAuthorizedError):
            await service.list_pending(ListPendingQuery(viewer=author, page=PageRequest()))

        page = await service.list_pending(ListPendingQuery(viewer=admin, page=PageRequest()))
        assert [a.title for a in page.items] == ["Waiting"]


class TestTrendingSweep:

    @pytest.mark.asyncio
    async def test_recompute_trending_refreshes_published_only(self, service, repository):
        fresh, old, draft = await seed(
            repository,
            make_article(
                title="Fresh",
                status=ArticleStatus.PUBLISHED,
                published_at=NOW,
                likes=[Like(user_id="u1")],
            ),
            make_article(
                title="Old",
                status=ArticleStatus.PUBLISHED,
                published_at=NOW - timedelta(hours=72),
                likes=[Like(user_id="u1")],
            ),
            make_article(title="Draft"),
        )

        refreshed = await service.recompute_trending(NOW)

        assert refreshed == 2
        assert (await repository.find_by_id(fresh.id)).trending_score == pytest.approx(4.0)
        assert (await repository.find_by_id(old.id)).trending_score == pytest.approx(2.0)
        assert (await repository.find_by_id(draft.id)).trending_score == 0.0
