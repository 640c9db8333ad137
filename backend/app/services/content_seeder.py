"""
Initial content seeding.

Creates the first admin account and a few sample articles so a fresh
install has something to log into and something to show. Every step is
idempotent: existing rows (matched by username or slug) are left alone.
"""

from dataclasses import dataclass
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import get_logger
from app.core.security import get_password_hash
from app.models.article import Article
from app.models.user import Admin
from app.repositories.admin import AdminRepository
from app.repositories.article import ArticleRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class SampleArticle:
    title: str
    slug: str
    excerpt: str
    content: str


SAMPLE_ARTICLES: List[SampleArticle] = [
    SampleArticle(
        title="Getting Started with Modern Web Development",
        slug="getting-started-with-modern-web-development",
        excerpt=(
            "Explore the key technologies and best practices in modern web "
            "development, from typed languages to utility-first styling."
        ),
        content="""# Getting Started with Modern Web Development

Modern web development focuses on fast, responsive applications that work
across every device.

## Key Technologies to Learn

1. **A component framework** for building interfaces
2. **Static typing** to catch mistakes before they ship
3. **Utility-first CSS** for rapid UI work
4. **A typed database toolkit** for safe queries

## Best Practices

- Write clean, maintainable code
- Test your applications thoroughly
- Optimize for performance
- Follow accessibility guidelines
- Keep security in mind
""",
    ),
    SampleArticle(
        title="Understanding Database Design Principles",
        slug="understanding-database-design-principles",
        excerpt=(
            "Learn the fundamental principles of database design including "
            "normalization, relationships, and indexing."
        ),
        content="""# Understanding Database Design Principles

A well-designed database is the foundation of any successful application.

## Normalization

- **First Normal Form (1NF)**: Eliminate repeating groups
- **Second Normal Form (2NF)**: Remove partial dependencies
- **Third Normal Form (3NF)**: Remove transitive dependencies

## Indexing

Indexes make reads fast at the cost of slower writes and extra storage.
""",
    ),
    SampleArticle(
        title="Building Secure Authentication Systems",
        slug="building-secure-authentication-systems",
        excerpt=(
            "Discover how to implement secure authentication using password "
            "hashing and signed session tokens."
        ),
        content="""# Building Secure Authentication Systems

## Password Hashing

Never store passwords in plain text. Use a slow adaptive hash such as bcrypt:

```python
import bcrypt

hashed = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12))
```

## Session Tokens

1. The user logs in with credentials
2. The server verifies them and signs a token
3. The browser sends the token back in an HttpOnly cookie
4. The server checks signature and expiry on each request

## Security Best Practices

- Use HTTPS everywhere
- Rate limit login attempts
- Never log sensitive information
- Keep secrets in environment variables
""",
    ),
]


async def seed_admin(session: AsyncSession, username: str, password: str) -> Admin:
    """
    Create the admin account if it doesn't exist.

    Args:
        session: Database session (caller commits)
        username: Admin username
        password: Plain text password, hashed before storage

    Returns:
        The existing or newly created Admin
    """
    admins = AdminRepository(session)
    existing = await admins.get_by_username(username)
    if existing is not None:
        logger.info("Admin already exists, skipping", extra={"username": username})
        return existing

    admin = await admins.create(username, get_password_hash(password))
    logger.info("Admin created", extra={"username": username, "admin_id": admin.id})
    return admin


async def seed_sample_articles(session: AsyncSession, author: Admin) -> List[Article]:
    """
    Publish the sample articles that are not in the database yet.

    Returns:
        Articles created by this call (empty when everything already existed)
    """
    articles = ArticleRepository(session)
    created: List[Article] = []

    for sample in SAMPLE_ARTICLES:
        if await articles.slug_exists(sample.slug):
            logger.info("Article already exists, skipping", extra={"slug": sample.slug})
            continue

        article = await articles.create(
            author_id=author.id,
            title=sample.title,
            slug=sample.slug,
            content=sample.content,
            excerpt=sample.excerpt,
            published=True,
        )
        created.append(article)
        logger.info("Article created", extra={"slug": sample.slug})

    return created
