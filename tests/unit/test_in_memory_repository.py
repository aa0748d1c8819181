"""
Unit tests for the in-memory repository.
"""

import asyncio

import pytest

from inkwell.domain.services import engagement
from inkwell.domain.value_objects.article_status import ArticleStatus
from inkwell.domain.value_objects.listing import ListingSort, PageRequest
from inkwell.shared.exceptions.domain_exceptions import SlugCollisionError
from tests.factories import make_article


@pytest.mark.asyncio
async def test_save_and_find(repository):
    article = make_article(title="Stored")

    await repository.save(article)

    found = await repository.find_by_id(article.id)
    assert found == article
    assert found is not article
    assert (await repository.find_by_slug("stored")).id == article.id


@pytest.mark.asyncio
async def test_unsaved_changes_do_not_leak(repository):
    article = make_article(title="Isolated")
    await repository.save(article)

    loaded = await repository.find_by_id(article.id)
    loaded.views = 99

    assert (await repository.find_by_id(article.id)).views == 0


@pytest.mark.asyncio
async def test_slug_uniqueness_enforced(repository):
    await repository.save(make_article(title="Same"))

    with pytest.raises(SlugCollisionError):
        await repository.save(make_article(title="Same"))


@pytest.mark.asyncio
async def test_slug_change_releases_old_slug(repository):
    article = make_article(title="First name")
    await repository.save(article)
    article.slug = "second-name"
    await repository.save(article)

    assert not await repository.slug_exists("first-name")
    assert await repository.slug_exists("second-name")
    assert not await repository.slug_exists("second-name", exclude_id=article.id)


@pytest.mark.asyncio
async def test_find_all_and_count_filters(repository):
    await repository.save(make_article(title="Mine", author_id="a1"))
    await repository.save(make_article(title="Theirs", author_id="a2"))
    await repository.save(make_article(title="Live", author_id="a1", status=ArticleStatus.PUBLISHED))

    assert await repository.count() == 3
    assert await repository.count(author_id="a1") == 2
    assert await repository.count(status=ArticleStatus.PUBLISHED) == 1
    assert len(await repository.find_all(author_id="a1", limit=1)) == 1


@pytest.mark.asyncio
async def test_find_published_uses_ranking(repository):
    await repository.save(make_article(title="Live", status=ArticleStatus.PUBLISHED, admin_notes="x"))
    await repository.save(make_article(title="Draft"))

    page = await repository.find_published(ListingSort.RECENT, PageRequest())

    assert [a.title for a in page.items] == ["Live"]
    assert page.items[0].admin_notes is None


@pytest.mark.asyncio
async def test_delete(repository):
    article = make_article(title="Gone")
    await repository.save(article)

    assert await repository.delete(article.id) is True
    assert await repository.find_by_id(article.id) is None
    assert not await repository.slug_exists("gone")
    assert await repository.delete(article.id) is False


@pytest.mark.asyncio
async def test_concurrent_likes_under_lock_are_all_kept(repository):
    article = make_article(title="Popular", status=ArticleStatus.PUBLISHED)
    await repository.save(article)

    async def like(user_id):
        async with repository.lock(article.id):
            loaded = await repository.find_by_id(article.id)
            await asyncio.sleep(0)
            engagement.toggle_like(loaded, user_id)
            await repository.save(loaded)

    await asyncio.gather(*(like(f"user-{i}") for i in range(20)))

    assert (await repository.find_by_id(article.id)).like_count == 20
