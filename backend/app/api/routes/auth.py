"""
Authentication endpoints for the admin dashboard.

Sessions are stateless: login puts a signed token in an HttpOnly cookie,
verify checks it, logout tells the browser to drop it.
"""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from app.api.dependencies import AuthServiceDep, ClientIP, OptionalAdmin
from app.core.cookies import clear_session_cookie, set_session_cookie
from app.core.errors import UnauthorizedError
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    VerifyResponse,
)

router = APIRouter()


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
async def login(
    credentials: LoginRequest,
    response: Response,
    auth: AuthServiceDep,
    client_ip: ClientIP,
) -> LoginResponse:
    """
    Authenticate an admin and start a cookie session.

    Example:
        POST /api/admin/login
        {"username": "admin", "password": "admin123"}

        Response:
        {"success": true, "admin": {"id": "3f2c...", "username": "admin"}}
        Set-Cookie: admin-token=eyJ...; HttpOnly; Max-Age=604800; Path=/; SameSite=lax

    Errors:
        400 VALIDATION_ERROR: missing fields, or too many attempts
            ("Rate limit exceeded. Try again in N seconds.")
        401 UNAUTHORIZED: wrong username or password (same message for both)
    """
    result = await auth.login(credentials.username, credentials.password, client_ip)

    set_session_cookie(response, result.token)
    response.headers["X-RateLimit-Limit"] = str(result.rate_limit.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.rate_limit.remaining)

    return LoginResponse(success=True, admin=result.admin)


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """
    End the session on this browser.

    Always succeeds. The token is not revoked server-side; it simply
    stops being sent.
    """
    clear_session_cookie(response)
    return LogoutResponse(success=True)


@router.get(
    "/verify",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    responses={401: {"model": VerifyResponse}},
)
async def verify(request: Request, admin: OptionalAdmin):
    """
    Report whether the session cookie is valid.

    Response (valid):
        {"authenticated": true, "admin": {"id": "...", "username": "admin"}}

    Response (401):
        {"authenticated": false, "error": "Unauthorized", "code": "UNAUTHORIZED"}
    """
    if admin is None:
        error = UnauthorizedError()
        return JSONResponse(
            status_code=error.status_code,
            content={"authenticated": False, **error.to_dict()},
        )

    return VerifyResponse(authenticated=True, admin=admin)
