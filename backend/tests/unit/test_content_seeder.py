"""
Tests for initial admin and sample content seeding.
"""

import pytest
from sqlalchemy import func, select

from app.core.security import verify_password
from app.models import Admin, Article
from app.services.content_seeder import (
    SAMPLE_ARTICLES,
    seed_admin,
    seed_sample_articles,
)


@pytest.mark.asyncio
class TestSeedAdmin:
    """Admin account bootstrap."""

    async def test_creates_admin_with_hashed_password(self, async_session):
        admin = await seed_admin(async_session, "admin", "admin123")

        assert admin.id
        assert admin.username == "admin"
        assert admin.hashed_password != "admin123"
        assert verify_password("admin123", admin.hashed_password)

    async def test_second_run_returns_existing_admin(self, async_session):
        """
        Arrange: Seed once
        Act: Seed again with a different password
        Assert: Same row returned, password untouched, one admin total
        """
        first = await seed_admin(async_session, "admin", "admin123")
        await async_session.commit()

        second = await seed_admin(async_session, "admin", "something-else")

        assert second.id == first.id
        assert verify_password("admin123", second.hashed_password)
        count = await async_session.scalar(select(func.count()).select_from(Admin))
        assert count == 1


@pytest.mark.asyncio
class TestSeedSampleArticles:
    """Sample article bootstrap."""

    async def test_creates_published_samples(self, async_session):
        author = await seed_admin(async_session, "admin", "admin123")

        created = await seed_sample_articles(async_session, author)

        assert len(created) == len(SAMPLE_ARTICLES) == 3
        assert {a.slug for a in created} == {s.slug for s in SAMPLE_ARTICLES}
        assert all(a.published for a in created)
        assert all(a.author_id == author.id for a in created)

    async def test_is_idempotent(self, async_session):
        author = await seed_admin(async_session, "admin", "admin123")
        await seed_sample_articles(async_session, author)
        await async_session.commit()

        created_again = await seed_sample_articles(async_session, author)

        assert created_again == []
        count = await async_session.scalar(select(func.count()).select_from(Article))
        assert count == 3
