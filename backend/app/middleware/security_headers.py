"""
Security headers middleware for protection against common web vulnerabilities.

This middleware adds HTTP security headers to all responses to protect against:
- Clickjacking (X-Frame-Options)
- MIME-type sniffing (X-Content-Type-Options)
- Protocol downgrade (Strict-Transport-Security)
- Referrer leakage (Referrer-Policy)
- Unwanted browser features (Permissions-Policy)
- Content injection (optional Content-Security-Policy)

References:
- OWASP Secure Headers Project: https://owasp.org/www-project-secure-headers/
- OWASP Security Headers: https://owasp.org/www-community/Security_Headers
"""

from typing import Callable, Dict, Optional
import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


DEFAULT_SECURITY_HEADERS: Dict[str, str] = {
    "X-DNS-Prefetch-Control": "on",
    # Two years, subdomains included, eligible for browser preload lists
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    # Admin pages may be framed by the site itself, nobody else
    "X-Frame-Options": "SAMEORIGIN",
    "X-Content-Type-Options": "nosniff",
    # Legacy filter for older browsers
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

# Suitable for a JSON API: nothing is loaded, nothing may frame it
API_CSP_POLICY = (
    "default-src 'none'; "
    "frame-ancestors 'self'; "
    "base-uri 'none'; "
    "form-action 'self'"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all HTTP responses.

    Headers already set by a route are left untouched, so an endpoint
    can opt into a different policy for itself.

    Example:
        app.add_middleware(SecurityHeadersMiddleware)
        app.add_middleware(SecurityHeadersMiddleware, csp_policy=API_CSP_POLICY)
    """

    def __init__(
        self,
        app,
        csp_policy: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize security headers middleware.

        Args:
            app: ASGI application
            csp_policy: Content-Security-Policy value (None: header not sent)
            extra_headers: Additional or overriding header values
        """
        super().__init__(app)
        self.headers = dict(DEFAULT_SECURITY_HEADERS)
        if extra_headers:
            self.headers.update(extra_headers)
        if csp_policy:
            self.headers["Content-Security-Policy"] = csp_policy

        logger.info(
            "Security headers middleware initialized",
            extra={"headers": sorted(self.headers)},
        )

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        response = await call_next(request)

        for name, value in self.headers.items():
            if name not in response.headers:
                response.headers[name] = value

        return response
