"""
API error taxonomy and FastAPI exception handlers.

Every failure that crosses the HTTP boundary is rendered as
``{"error": <message>, "code": <code>}`` with one of these codes:

    VALIDATION_ERROR  400  malformed or missing input, rate limit hit
    UNAUTHORIZED      401  missing/invalid/expired session or bad credentials
    NOT_FOUND         404  referenced entity absent
    CONFLICT          409  uniqueness violation
    INTERNAL_ERROR    500  anything unexpected
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging_config import get_logger
from app.services.rate_limiter import RateLimitExceeded

logger = get_logger(__name__)


class ApiError(Exception):
    """Base class for errors that map to a concrete HTTP status and code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_message = "Resource already exists"


class InternalServerError(ApiError):
    pass


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_409_CONFLICT: "CONFLICT",
}


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError with its own status and code."""
    logger.warning(
        exc.message,
        extra={
            "code": exc.code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "request_id": _request_id(request),
        },
    )
    headers = {"WWW-Authenticate": "Cookie"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_dict(), headers=headers
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render a rate limit rejection.

    Surfaced as a recoverable validation-class error carrying the
    number of seconds until the window resets.
    """
    message = f"Rate limit exceeded. Try again in {exc.retry_after_seconds} seconds."
    logger.warning(
        message,
        extra={
            "code": "VALIDATION_ERROR",
            "identifier": exc.identifier,
            "retry_after": exc.retry_after_seconds,
            "path": request.url.path,
            "request_id": _request_id(request),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "VALIDATION_ERROR"},
        headers={"Retry-After": str(exc.retry_after_seconds)},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Collapse pydantic request validation failures into VALIDATION_ERROR."""
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.append(".".join(loc) or "body")

    if fields:
        message = f"Invalid or missing fields: {', '.join(sorted(set(fields)))}"
    else:
        message = ValidationError.default_message

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "VALIDATION_ERROR"},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Give framework-raised HTTP errors (unknown route, bad method) the same shape."""
    code = _STATUS_CODES.get(exc.status_code)
    if code is None:
        code = "INTERNAL_ERROR" if exc.status_code >= 500 else "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


def internal_error_response(exc: Exception) -> JSONResponse:
    """Generic 500 body; exception text only in development."""
    body = InternalServerError().to_dict()
    if settings.environment == "development":
        body["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for unexpected failures.

    Full detail goes to the server log; the client gets a generic message,
    plus the exception text when running in development.
    """
    logger.error(
        f"Unhandled error: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": _request_id(request),
            "exception_type": type(exc).__name__,
        },
        exc_info=exc,
    )
    return internal_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error taxonomy on a FastAPI application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
