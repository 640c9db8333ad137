"""
Integration tests for article endpoints.

Tests cover:
- GET/POST /api/articles
- GET /api/articles/{slug}
- GET/PATCH/DELETE /api/admin/articles/{id}
- Draft visibility, slug conflicts, auth requirements, cache headers
"""

import pytest

from app.core.security import create_access_token
from app.repositories.article import ArticleRepository


ARTICLES_URL = "/api/articles"
ADMIN_ARTICLES_URL = "/api/admin/articles"


def article_payload(**overrides):
    payload = {
        "title": "Hello World",
        "slug": "hello-world",
        "content": "# Hello\n\nFirst post.",
        "excerpt": "First post",
        "coverImage": "https://example.com/cover.png",
        "published": True,
    }
    payload.update(overrides)
    return payload


async def create_article(client, **overrides):
    response = await client.post(ARTICLES_URL, json=article_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestCreateArticle:
    """Tests for POST /api/articles."""

    async def test_create_returns_201(self, admin_client, test_admin):
        """
        Arrange: Logged-in admin
        Act: POST a complete article
        Assert: 201 with generated id, timestamps and author
        """
        response = await admin_client.post(ARTICLES_URL, json=article_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["title"] == "Hello World"
        assert data["slug"] == "hello-world"
        assert data["coverImage"] == "https://example.com/cover.png"
        assert data["published"] is True
        assert data["authorId"] == test_admin.id
        assert data["author"] == {"id": test_admin.id, "username": "admin"}
        assert data["createdAt"]
        assert data["updatedAt"]
        assert response.headers["Cache-Control"] == "no-store"

    async def test_defaults_to_draft(self, admin_client):
        payload = article_payload()
        del payload["published"]
        del payload["excerpt"]
        del payload["coverImage"]

        response = await admin_client.post(ARTICLES_URL, json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data["published"] is False
        assert data["excerpt"] is None
        assert data["coverImage"] is None

    async def test_duplicate_slug_conflicts(self, admin_client):
        await create_article(admin_client)

        response = await admin_client.post(
            ARTICLES_URL, json=article_payload(title="Another")
        )

        assert response.status_code == 409
        assert response.json() == {
            "error": "Article with this slug already exists",
            "code": "CONFLICT",
        }

    async def test_duplicate_slug_caught_by_unique_index(self, admin_client, monkeypatch):
        """
        Arrange: Existing article, and a slug pre-check that misses it
            (as when a concurrent request inserts first)
        Act: POST the same slug
        Assert: The unique index violation still surfaces as 409
        """
        await create_article(admin_client)

        async def never_taken(self, slug, exclude_id=None):
            return False

        monkeypatch.setattr(ArticleRepository, "slug_exists", never_taken)

        response = await admin_client.post(
            ARTICLES_URL, json=article_payload(title="Another")
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_session_of_deleted_admin_is_unauthorized(self, client):
        """
        Arrange: Well-signed cookie whose admin row does not exist
        Act: POST a new article
        Assert: 401 from the author foreign key, not a slug conflict
        """
        client.cookies.set("admin-token", create_access_token("deleted-admin-id", "ghost"))

        response = await client.post(ARTICLES_URL, json=article_payload())

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "code": "UNAUTHORIZED"}

    async def test_null_published_is_draft(self, admin_client):
        response = await admin_client.post(
            ARTICLES_URL, json=article_payload(published=None)
        )

        assert response.status_code == 201
        assert response.json()["published"] is False

    @pytest.mark.parametrize("missing", ["title", "slug", "content"])
    async def test_required_fields(self, admin_client, missing):
        payload = article_payload()
        del payload[missing]

        response = await admin_client.post(ARTICLES_URL, json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert missing in response.json()["error"]

    async def test_blank_slug_rejected(self, admin_client):
        response = await admin_client.post(ARTICLES_URL, json=article_payload(slug="   "))

        assert response.status_code == 400

    async def test_requires_admin(self, client):
        response = await client.post(ARTICLES_URL, json=article_payload())

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "code": "UNAUTHORIZED"}


@pytest.mark.asyncio
class TestListArticles:
    """Tests for GET /api/articles."""

    async def test_public_list_hides_drafts(self, admin_client, client):
        await create_article(admin_client, slug="live", published=True)
        await create_article(admin_client, slug="draft", published=False)
        await admin_client.post("/api/admin/logout")

        response = await client.get(ARTICLES_URL)

        assert response.status_code == 200
        assert [a["slug"] for a in response.json()] == ["live"]
        assert response.headers["Cache-Control"] == "public, max-age=60, s-maxage=120"

    async def test_admin_can_include_drafts(self, admin_client):
        await create_article(admin_client, slug="live", published=True)
        await create_article(admin_client, slug="draft", published=False)

        response = await admin_client.get(
            ARTICLES_URL, params={"includeUnpublished": "true"}
        )

        assert response.status_code == 200
        assert {a["slug"] for a in response.json()} == {"live", "draft"}
        assert response.headers["Cache-Control"] == "private, max-age=5"

    async def test_include_drafts_requires_admin(self, client):
        response = await client.get(ARTICLES_URL, params={"includeUnpublished": "true"})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    async def test_newest_first(self, admin_client):
        await create_article(admin_client, slug="first")
        await create_article(admin_client, slug="second")
        await create_article(admin_client, slug="third")

        response = await admin_client.get(ARTICLES_URL)

        assert [a["slug"] for a in response.json()] == ["third", "second", "first"]

    async def test_empty_list(self, client):
        response = await client.get(ARTICLES_URL)

        assert response.status_code == 200
        assert response.json() == []


@pytest.mark.asyncio
class TestGetArticleBySlug:
    """Tests for GET /api/articles/{slug}."""

    async def test_published_article(self, admin_client):
        created = await create_article(admin_client)

        response = await admin_client.get(f"{ARTICLES_URL}/hello-world")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert "stale-while-revalidate=30" in response.headers["Cache-Control"]

    async def test_draft_is_not_found(self, admin_client):
        await create_article(admin_client, published=False)

        response = await admin_client.get(f"{ARTICLES_URL}/hello-world")

        assert response.status_code == 404
        assert response.json() == {"error": "Article not found", "code": "NOT_FOUND"}

    async def test_unknown_slug(self, client):
        response = await client.get(f"{ARTICLES_URL}/no-such-article")

        assert response.status_code == 404


@pytest.mark.asyncio
class TestAdminArticle:
    """Tests for /api/admin/articles/{id}."""

    async def test_get_draft_by_id(self, admin_client):
        created = await create_article(admin_client, published=False)

        response = await admin_client.get(f"{ADMIN_ARTICLES_URL}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["slug"] == "hello-world"
        assert response.json()["published"] is False

    async def test_get_unknown_id(self, admin_client):
        response = await admin_client.get(f"{ADMIN_ARTICLES_URL}/missing-id")

        assert response.status_code == 404

    async def test_patch_updates_only_given_fields(self, admin_client):
        """
        Arrange: Existing draft
        Act: PATCH title and published
        Assert: Those fields change, the rest stay put
        """
        created = await create_article(admin_client, published=False)

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}",
            json={"title": "Renamed", "published": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["published"] is True
        assert data["slug"] == created["slug"]
        assert data["content"] == created["content"]
        assert data["excerpt"] == created["excerpt"]
        assert data["createdAt"] == created["createdAt"]

        public = await admin_client.get(f"{ARTICLES_URL}/hello-world")
        assert public.status_code == 200

    async def test_patch_can_clear_optional_fields(self, admin_client):
        created = await create_article(admin_client)

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}",
            json={"excerpt": None, "coverImage": None},
        )

        assert response.status_code == 200
        assert response.json()["excerpt"] is None
        assert response.json()["coverImage"] is None

    @pytest.mark.parametrize(
        "body", [{"title": ""}, {"title": None}, {"content": "  "}, {"slug": None}]
    )
    async def test_patch_cannot_empty_required_fields(self, admin_client, body):
        created = await create_article(admin_client)

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}", json=body
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_patch_slug_conflict(self, admin_client):
        await create_article(admin_client, slug="taken")
        created = await create_article(admin_client, slug="mine")

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}", json={"slug": "taken"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_patch_slug_conflict_caught_by_unique_index(self, admin_client, monkeypatch):
        await create_article(admin_client, slug="taken")
        created = await create_article(admin_client, slug="mine")

        async def never_taken(self, slug, exclude_id=None):
            return False

        monkeypatch.setattr(ArticleRepository, "slug_exists", never_taken)

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}", json={"slug": "taken"}
        )

        assert response.status_code == 409

    async def test_patch_keeping_own_slug_is_allowed(self, admin_client):
        created = await create_article(admin_client, slug="mine")

        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/{created['id']}",
            json={"slug": "mine", "title": "Same slug"},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Same slug"

    async def test_patch_unknown_id(self, admin_client):
        response = await admin_client.patch(
            f"{ADMIN_ARTICLES_URL}/missing-id", json={"title": "x"}
        )

        assert response.status_code == 404

    async def test_delete(self, admin_client):
        created = await create_article(admin_client)

        response = await admin_client.delete(f"{ADMIN_ARTICLES_URL}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        gone = await admin_client.get(f"{ADMIN_ARTICLES_URL}/{created['id']}")
        assert gone.status_code == 404

    async def test_delete_unknown_id(self, admin_client):
        response = await admin_client.delete(f"{ADMIN_ARTICLES_URL}/missing-id")

        assert response.status_code == 404
        assert response.json() == {"error": "Article not found", "code": "NOT_FOUND"}

    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    async def test_requires_admin(self, client, method):
        kwargs = {"json": {"title": "x"}} if method == "patch" else {}

        response = await client.request(
            method.upper(), f"{ADMIN_ARTICLES_URL}/any-id", **kwargs
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Cookie"
