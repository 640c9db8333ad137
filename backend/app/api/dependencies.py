"""
FastAPI dependency functions.

Provides reusable dependency injection functions for FastAPI routes,
including cookie-based admin authentication, database sessions,
repositories and the login rate limiter.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.cookies import read_session_cookie
from app.core.database import get_db
from app.core.errors import UnauthorizedError
from app.repositories.admin import AdminRepository
from app.repositories.article import ArticleRepository
from app.schemas.auth import AdminIdentity
from app.services.auth import AuthService
from app.services.rate_limiter import FixedWindowRateLimiter


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    X-Forwarded-For, then X-Real-IP, are honoured only when the direct
    peer is listed in ``settings.trusted_proxies`` (or that list holds
    "*"). Anyone else could spoof them to dodge per-IP rate limits.
    """
    peer = request.client.host if request.client else None
    trusted = settings.trusted_proxies
    if "*" not in trusted and peer not in trusted:
        return peer or "unknown"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take first IP in chain (original client)
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return peer or "unknown"


def get_login_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    """The limiter instance owned by the running application."""
    return request.app.state.login_rate_limiter


def get_auth_service(
    db: DatabaseSession,
    rate_limiter: Annotated[FixedWindowRateLimiter, Depends(get_login_rate_limiter)],
) -> AuthService:
    return AuthService(
        admins=AdminRepository(db),
        rate_limiter=rate_limiter,
        login_limit=settings.login_rate_limit,
        login_window_seconds=settings.login_rate_window_seconds,
    )


def get_article_repository(db: DatabaseSession) -> ArticleRepository:
    return ArticleRepository(db)


def get_optional_admin(request: Request) -> Optional[AdminIdentity]:
    """
    Admin identity from the session cookie, or None.

    For routes whose behaviour changes, but does not fail, without a session.
    """
    identity = AuthService.authorize(read_session_cookie(request))
    if identity is not None:
        request.state.admin_id = identity.id
    return identity


def get_current_admin(
    admin: Annotated[Optional[AdminIdentity], Depends(get_optional_admin)],
) -> AdminIdentity:
    """
    Dependency that admits only requests carrying a valid session cookie.

    Raises:
        UnauthorizedError: 401 for a missing, malformed, forged or expired
            token, always with the same message

    Example:
        @router.delete("/admin/articles/{article_id}")
        async def delete_article(article_id: str, admin: CurrentAdmin):
            ...
    """
    if admin is None:
        raise UnauthorizedError()
    return admin


# Type aliases for dependency injection
CurrentAdmin = Annotated[AdminIdentity, Depends(get_current_admin)]
OptionalAdmin = Annotated[Optional[AdminIdentity], Depends(get_optional_admin)]
ArticleRepo = Annotated[ArticleRepository, Depends(get_article_repository)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ClientIP = Annotated[str, Depends(get_client_ip)]
