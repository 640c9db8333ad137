"""
Logging middleware for request/response tracking.

This middleware logs every HTTP request and response with:
- Request details (method, path)
- Client IP
- Response status code
- Request latency in milliseconds
- Request correlation ID
- Admin id, when the route resolved a session
- Exception details (if request failed), answered with a generic 500

Query strings and bodies are never logged: login bodies carry passwords.

Must be registered AFTER RequestIDMiddleware to access request_id.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.dependencies import get_client_ip
from app.core.errors import internal_error_response
from app.core.logging_config import get_logger


logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses.

    Example:
        app.add_middleware(LoggingMiddleware)    # runs after RequestID
        app.add_middleware(RequestIDMiddleware)  # registered last, runs first

    Log output (JSON):
        {
            "timestamp": "2025-11-24T10:30:00.123456+00:00",
            "level": "INFO",
            "message": "Request completed",
            "method": "POST",
            "path": "/api/admin/login",
            "status_code": 200,
            "latency_ms": 231.5,
            "client_ip": "203.0.113.7",
            "request_id": "abc-123"
        }
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        method = request.method
        path = request.url.path
        client_ip = get_client_ip(request)
        request_id = getattr(request.state, "request_id", None)

        logger.debug(
            "Request started",
            extra={
                "method": method,
                "path": path,
                "client_ip": client_ip,
                "request_id": request_id,
            }
        )

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {exc}",
                extra={
                    "method": method,
                    "path": path,
                    "latency_ms": round(latency_ms, 2),
                    "client_ip": client_ip,
                    "request_id": request_id,
                    "exception_type": type(exc).__name__,
                },
                exc_info=True
            )
            # Rendered here so outer middleware still decorate the 500
            return internal_error_response(exc)

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Request completed",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 2),
                "client_ip": client_ip,
                "request_id": request_id,
                "admin_id": getattr(request.state, "admin_id", None),
            }
        )

        return response
