"""
Session cookie helpers.

The admin session token travels in a single HttpOnly cookie:

    name      settings.session_cookie_name ("admin-token")
    max-age   7 days (matches the token lifetime)
    path      /
    secure    production only
    samesite  strict in production, lax otherwise
    domain    settings.cookie_domain, production only
"""

from typing import Optional

from fastapi import Request, Response

from app.core.config import settings

SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 7


def _cookie_attributes() -> dict:
    production = settings.is_production
    return {
        "path": "/",
        "domain": settings.cookie_domain if production else None,
        "secure": production,
        "httponly": True,
        "samesite": "strict" if production else "lax",
    }


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token to a response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        **_cookie_attributes(),
    )


def clear_session_cookie(response: Response) -> None:
    """
    Instruct the browser to drop the session cookie.

    Purely client-side: the token itself stays valid until it expires.
    """
    response.delete_cookie(key=settings.session_cookie_name, **_cookie_attributes())


def read_session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or None
