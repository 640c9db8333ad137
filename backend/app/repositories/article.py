"""
Article repository for article CRUD operations.

Provides data access layer for the Article model. Slug uniqueness is
checked up front by callers via slug_exists(); the unique index on
``articles.slug`` is the backstop for concurrent writers.
"""

from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.article import Article

# Columns callers may change through update()
UPDATABLE_FIELDS = frozenset({
    "title",
    "slug",
    "content",
    "excerpt",
    "cover_image",
    "published",
})


def is_slug_conflict(exc: IntegrityError) -> bool:
    """True when the unique index on articles.slug rejected the write."""
    return "slug" in str(exc.orig).lower()


def is_missing_author(exc: IntegrityError) -> bool:
    """True when author_id points at an admin that no longer exists."""
    return "foreign key" in str(exc.orig).lower()


class ArticleRepository:
    """
    Repository for article data access.

    Every returned Article has its ``author`` relationship loaded so it
    can be serialized outside the session's async context.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _select(self):
        return select(Article).options(selectinload(Article.author))

    async def _reload(self, article_id: str) -> Article:
        # populate_existing refreshes the identity-mapped instance and its author
        stmt = (
            self._select()
            .where(Article.id == article_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_id(self, article_id: str) -> Optional[Article]:
        """
        Retrieve an article by ID, published or not.

        Returns:
            Article instance if found, None otherwise
        """
        result = await self.session.execute(
            self._select().where(Article.id == article_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(
        self, slug: str, published_only: bool = True
    ) -> Optional[Article]:
        """
        Retrieve an article by slug.

        Args:
            slug: URL slug
            published_only: Hide drafts (default: True, for public pages)

        Returns:
            Article instance if found (and visible), None otherwise
        """
        stmt = self._select().where(Article.slug == slug)
        if published_only:
            stmt = stmt.where(Article.published.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_articles(self, include_unpublished: bool = False) -> list[Article]:
        """
        List articles, newest first.

        Args:
            include_unpublished: Also return drafts (admin dashboard only)
        """
        stmt = self._select().order_by(Article.created_at.desc())
        if not include_unpublished:
            stmt = stmt.where(Article.published.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """
        Check whether a slug is already taken.

        Args:
            slug: Slug to check
            exclude_id: Article allowed to own the slug (the one being updated)
        """
        stmt = select(Article.id).where(Article.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Article.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def create(
        self,
        author_id: str,
        title: str,
        slug: str,
        content: str,
        excerpt: Optional[str] = None,
        cover_image: Optional[str] = None,
        published: bool = False,
    ) -> Article:
        """
        Create a new article.

        Returns:
            Created Article with author loaded

        Raises:
            IntegrityError: If the slug is taken or the author is gone
        """
        article = Article(
            author_id=author_id,
            title=title,
            slug=slug,
            content=content,
            excerpt=excerpt,
            cover_image=cover_image,
            published=published,
        )
        self.session.add(article)
        await self.session.flush()
        return await self._reload(article.id)

    async def update(self, article: Article, changes: dict[str, Any]) -> Article:
        """
        Apply a partial update.

        Args:
            article: Existing article
            changes: Field name -> new value; keys outside UPDATABLE_FIELDS are ignored

        Returns:
            Updated Article with author loaded
        """
        for field, value in changes.items():
            if field in UPDATABLE_FIELDS:
                setattr(article, field, value)
        await self.session.flush()
        return await self._reload(article.id)

    async def delete(self, article_id: str) -> bool:
        """
        Delete an article by ID.

        Returns:
            True if a row was deleted, False if no such article
        """
        result = await self.session.execute(
            delete(Article).where(Article.id == article_id)
        )
        await self.session.flush()
        return result.rowcount > 0
