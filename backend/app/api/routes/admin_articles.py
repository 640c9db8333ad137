"""
Admin-only article management by id.
"""

from fastapi import APIRouter, Response
from sqlalchemy.exc import IntegrityError

from app.api.dependencies import ArticleRepo, CurrentAdmin
from app.core.errors import ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.repositories.article import is_slug_conflict
from app.schemas.article import ArticleResponse, ArticleUpdate, DeleteResponse

logger = get_logger(__name__)

router = APIRouter()

ARTICLE_NOT_FOUND = "Article not found"
SLUG_TAKEN = "Article with this slug already exists"


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    response: Response,
    articles: ArticleRepo,
    admin: CurrentAdmin,
) -> ArticleResponse:
    """Any article by id, drafts included (editor view)."""
    article = await articles.get_by_id(article_id)
    if article is None:
        raise NotFoundError(ARTICLE_NOT_FOUND)

    response.headers["Cache-Control"] = "no-store"
    return ArticleResponse.model_validate(article)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    payload: ArticleUpdate,
    response: Response,
    articles: ArticleRepo,
    admin: CurrentAdmin,
) -> ArticleResponse:
    """
    Partially update an article.

    Only fields present in the body change.

    Errors:
        400 VALIDATION_ERROR: a required field sent as empty or null
        401 UNAUTHORIZED: no valid session
        404 NOT_FOUND: unknown id
        409 CONFLICT: new slug belongs to another article
    """
    article = await articles.get_by_id(article_id)
    if article is None:
        raise NotFoundError(ARTICLE_NOT_FOUND)

    changes = payload.changes()
    new_slug = changes.get("slug")
    if new_slug and new_slug != article.slug:
        if await articles.slug_exists(new_slug, exclude_id=article_id):
            raise ConflictError(SLUG_TAKEN)

    try:
        article = await articles.update(article, changes)
    except IntegrityError as exc:
        if is_slug_conflict(exc):
            raise ConflictError(SLUG_TAKEN) from exc
        raise

    logger.info(
        "Article updated",
        extra={"article_id": article_id, "fields": sorted(changes), "admin_id": admin.id},
    )
    response.headers["Cache-Control"] = "no-store"
    return ArticleResponse.model_validate(article)


@router.delete("/{article_id}", response_model=DeleteResponse)
async def delete_article(
    article_id: str,
    response: Response,
    articles: ArticleRepo,
    admin: CurrentAdmin,
) -> DeleteResponse:
    """
    Delete an article.

    Errors:
        401 UNAUTHORIZED: no valid session
        404 NOT_FOUND: unknown id
    """
    if not await articles.delete(article_id):
        raise NotFoundError(ARTICLE_NOT_FOUND)

    logger.info("Article deleted", extra={"article_id": article_id, "admin_id": admin.id})
    response.headers["Cache-Control"] = "no-store"
    return DeleteResponse(success=True)
