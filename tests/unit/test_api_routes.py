"""
API tests against an in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from inkwell.api.dependencies import get_article_repository
from inkwell.infrastructure.persistence.in_memory_repository import InMemoryArticleRepository
from inkwell.main import app
from tests.factories import LONG_CONTENT

AUTHOR = {"X-User-Id": "author-1", "X-User-Role": "author"}
READER = {"X-User-Id": "reader-9", "X-User-Role": "user"}
MODERATOR = {"X-User-Id": "mod-1", "X-User-Role": "moderator"}


@pytest.fixture
def client():
    repository = InMemoryArticleRepository()
    app.dependency_overrides[get_article_repository] = lambda: repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_article(client, title="Hello, World! 2024", **payload):
    payload.setdefault("content", LONG_CONTENT)
    response = client.post("/api/v1/articles/", json={"title": title, **payload}, headers=AUTHOR)
    assert response.status_code == 201, response.text
    return response.json()


def publish(client, article_id):
    response = client.post(
        f"/api/v1/articles/{article_id}/status", json={"status": "pending"}, headers=AUTHOR
    )
    assert response.status_code == 200, response.text
    response = client.post(
        f"/api/v1/articles/{article_id}/status", json={"status": "published"}, headers=MODERATOR
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_article(client):
    article = create_article(client, tags=["React", "Hooks"])

    assert article["slug"] == "hello-world-2024"
    assert article["url"] == "/article/hello-world-2024"
    assert article["status"] == "draft"
    assert article["tags"] == ["react", "hooks"]
    assert article["reading_time_minutes"] == 1
    assert article["like_count"] == 0


def test_create_requires_identity(client):
    response = client.post("/api/v1/articles/", json={"title": "Anon", "content": LONG_CONTENT})

    assert response.status_code == 401


def test_unknown_role_rejected(client):
    article = create_article(client)

    response = client.get(
        f"/api/v1/articles/{article['id']}", headers={"X-User-Id": "x", "X-User-Role": "wizard"}
    )

    assert response.status_code == 400


def test_short_content_is_rejected(client):
    response = client.post(
        "/api/v1/articles/", json={"title": "Short", "content": "tiny"}, headers=AUTHOR
    )

    assert response.status_code == 422


def test_publication_flow_and_public_page(client):
    article = create_article(client)
    published = publish(client, article["id"])

    assert published["status"] == "published"
    assert published["published_at"] is not None

    page = client.get("/api/v1/articles/slug/hello-world-2024")
    assert page.status_code == 200
    assert page.json()["views"] == 1

    listing = client.get("/api/v1/articles/").json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == article["id"]


def test_author_cannot_approve(client):
    article = create_article(client)
    client.post(f"/api/v1/articles/{article['id']}/status", json={"status": "pending"}, headers=AUTHOR)

    response = client.post(
        f"/api/v1/articles/{article['id']}/status", json={"status": "published"}, headers=AUTHOR
    )

    assert response.status_code == 403
    assert response.json()["error"] == "not_authorized"


def test_invalid_transition_is_conflict(client):
    article = create_article(client)

    response = client.post(
        f"/api/v1/articles/{article['id']}/status", json={"status": "hidden"}, headers=MODERATOR
    )

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "invalid_transition"
    assert body["details"] == {"current": "draft", "requested": "hidden"}


def test_draft_not_visible_to_readers(client):
    article = create_article(client)

    assert client.get(f"/api/v1/articles/{article['id']}", headers=READER).status_code == 404
    assert client.get(f"/api/v1/articles/{article['id']}", headers=AUTHOR).status_code == 200


def test_like_and_comment_thread(client):
    article = create_article(client)
    publish(client, article["id"])
    base = f"/api/v1/articles/{article['id']}"

    like = client.post(f"{base}/like", headers=READER).json()
    assert like == {"liked": True, "like_count": 1}

    root = client.post(f"{base}/comments", json={"content": "Nice"}, headers=READER).json()
    reply = client.post(
        f"{base}/comments", json={"content": "Thanks", "parent_comment_id": root["id"]}, headers=AUTHOR
    )
    assert reply.status_code == 201

    tree = client.get(f"{base}/comments").json()
    assert len(tree) == 1
    assert tree[0]["id"] == root["id"]
    assert tree[0]["replies"][0]["content"] == "Thanks"

    edited = client.patch(f"{base}/comments/{root['id']}", json={"content": "Very nice"}, headers=READER)
    assert edited.json()["is_edited"] is True

    forbidden = client.patch(f"{base}/comments/{root['id']}", json={"content": "Hijack"}, headers=AUTHOR)
    assert forbidden.status_code == 403


def test_comment_on_unknown_parent(client):
    article = create_article(client)
    publish(client, article["id"])

    response = client.post(
        f"/api/v1/articles/{article['id']}/comments",
        json={"content": "Reply", "parent_comment_id": "not-a-uuid"},
        headers=READER,
    )

    assert response.status_code == 404
    assert response.json()["error"] == "comment_not_found"


def test_like_on_draft_is_not_found(client):
    article = create_article(client)

    response = client.post(f"/api/v1/articles/{article['id']}/like", headers=READER)

    assert response.status_code == 404


def test_search(client):
    article = create_article(client, title="Kotlin coroutines explained")
    publish(client, article["id"])
    create_article(client, title="Kotlin draft")

    response = client.get("/api/v1/articles/search", params={"q": "kotlin"})

    assert response.status_code == 200
    assert [item["title"] for item in response.json()["items"]] == ["Kotlin coroutines explained"]


def test_pending_queue(client):
    article = create_article(client)
    client.post(f"/api/v1/articles/{article['id']}/status", json={"status": "pending"}, headers=AUTHOR)

    assert client.get("/api/v1/articles/pending", headers=AUTHOR).status_code == 403
    queue = client.get("/api/v1/articles/pending", headers=MODERATOR).json()
    assert [item["id"] for item in queue["items"]] == [article["id"]]


def test_moderation_fields_hidden_from_public(client):
    article = create_article(client)
    publish(client, article["id"])
    client.patch(
        f"/api/v1/articles/{article['id']}", json={"admin_notes": "watch comments"}, headers=MODERATOR
    )

    public = client.get(f"/api/v1/articles/{article['id']}", headers=READER).json()
    moderated = client.get(f"/api/v1/articles/{article['id']}", headers=MODERATOR).json()

    assert public["admin_notes"] is None
    assert moderated["admin_notes"] == "watch comments"
