"""
Request ID middleware for correlation tracking.

This middleware ensures every request has a unique correlation ID:
- Reads X-Request-ID header from client (if provided and well-formed)
- Generates UUID otherwise
- Stores in request.state for access by other middleware/routes
- Includes in response headers for client-side correlation
"""

import re
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in logs; keep them short and printable
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add request ID correlation to all requests.

    Flow:
    1. Check for X-Request-ID header in incoming request
    2. If present and valid, use it; otherwise generate new UUID
    3. Store in request.state.request_id
    4. Add to response headers as X-Request-ID

    Example:
        app.add_middleware(RequestIDMiddleware)
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER, "")

        if not _VALID_REQUEST_ID.match(request_id):
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response
