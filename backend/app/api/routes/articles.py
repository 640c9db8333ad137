"""
Public article endpoints, plus article creation for admins.

Anonymous visitors only ever see published articles. Drafts are listed
when an authenticated admin asks for them explicitly.
"""

from typing import List

from fastapi import APIRouter, Query, Response, status
from sqlalchemy.exc import IntegrityError

from app.api.dependencies import ArticleRepo, CurrentAdmin, OptionalAdmin
from app.core.errors import ConflictError, NotFoundError, UnauthorizedError
from app.core.logging_config import get_logger
from app.repositories.article import is_missing_author, is_slug_conflict
from app.schemas.article import ArticleCreate, ArticleResponse

logger = get_logger(__name__)

router = APIRouter()

# Cache lifetimes in seconds
CACHE_TTL = 60
CACHE_TTL_ADMIN = 5

SLUG_TAKEN = "Article with this slug already exists"


@router.get("", response_model=List[ArticleResponse])
async def list_articles(
    response: Response,
    articles: ArticleRepo,
    admin: OptionalAdmin,
    include_unpublished: bool = Query(False, alias="includeUnpublished"),
) -> List[ArticleResponse]:
    """
    List articles, newest first.

    Query params:
        includeUnpublished: also return drafts; requires an admin session
            (401 UNAUTHORIZED otherwise)
    """
    if include_unpublished and admin is None:
        raise UnauthorizedError()

    rows = await articles.list_articles(include_unpublished=include_unpublished)

    if include_unpublished:
        response.headers["Cache-Control"] = f"private, max-age={CACHE_TTL_ADMIN}"
    else:
        response.headers["Cache-Control"] = (
            f"public, max-age={CACHE_TTL}, s-maxage={CACHE_TTL * 2}"
        )
        response.headers["CDN-Cache-Control"] = f"public, max-age={CACHE_TTL * 2}"

    return [ArticleResponse.model_validate(row) for row in rows]


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    payload: ArticleCreate,
    response: Response,
    articles: ArticleRepo,
    admin: CurrentAdmin,
) -> ArticleResponse:
    """
    Create an article authored by the logged-in admin.

    Errors:
        400 VALIDATION_ERROR: title, slug or content missing
        401 UNAUTHORIZED: no valid session, or its admin was deleted
        409 CONFLICT: slug already used
    """
    if await articles.slug_exists(payload.slug):
        raise ConflictError(SLUG_TAKEN)

    try:
        article = await articles.create(
            author_id=admin.id,
            title=payload.title,
            slug=payload.slug,
            content=payload.content,
            excerpt=payload.excerpt,
            cover_image=payload.cover_image,
            published=payload.published,
        )
    except IntegrityError as exc:
        # Lost a race with a concurrent writer on the unique slug index
        if is_slug_conflict(exc):
            raise ConflictError(SLUG_TAKEN) from exc
        # Valid token, but its admin was deleted since it was issued
        if is_missing_author(exc):
            raise UnauthorizedError() from exc
        raise

    logger.info(
        "Article created",
        extra={"article_id": article.id, "slug": article.slug, "admin_id": admin.id},
    )
    response.headers["Cache-Control"] = "no-store"
    return ArticleResponse.model_validate(article)


@router.get("/{slug}", response_model=ArticleResponse)
async def get_article(slug: str, response: Response, articles: ArticleRepo) -> ArticleResponse:
    """Published article by slug; drafts are reported as 404."""
    article = await articles.get_by_slug(slug, published_only=True)
    if article is None:
        raise NotFoundError("Article not found")

    response.headers["Cache-Control"] = (
        "public, max-age=300, s-maxage=600, stale-while-revalidate=30"
    )
    return ArticleResponse.model_validate(article)
