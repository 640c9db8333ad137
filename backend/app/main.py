"""
Quillpress - FastAPI Application Entry Point

This module initializes the FastAPI application with all middleware,
routes, error handlers, and lifecycle event handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.middleware.request_id import RequestIDMiddleware
from app.middleware.logging import LoggingMiddleware
from app.middleware.security_headers import API_CSP_POLICY, SecurityHeadersMiddleware
from app.services.rate_limiter import FixedWindowRateLimiter
from app.api.routes import admin_articles, articles, auth, health


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
        - Set up logging
        - Initialize database (create missing tables)

    Shutdown:
        - Close database connections
    """
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    await init_db()

    yield

    await close_db()


def create_app(rate_limiter: Optional[FixedWindowRateLimiter] = None) -> FastAPI:
    """
    Build a configured application.

    Args:
        rate_limiter: Login limiter to own (default: a fresh in-memory one).
            Tests pass their own to control the clock.

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title=settings.project_name,
        version="0.1.0",
        description="Blog/CMS API: public articles and an admin dashboard backend",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Process-local; not shared between workers or instances
    app.state.login_rate_limiter = rate_limiter or FixedWindowRateLimiter(
        cleanup_probability=settings.rate_limit_cleanup_probability,
    )

    register_exception_handlers(app)

    # Configure middleware
    # Note: Middleware is executed in reverse order of registration
    # (last registered = first executed)

    # Logging middleware (innermost; turns unhandled errors into a 500 response)
    app.add_middleware(LoggingMiddleware)

    # Security headers middleware (wraps every response, 500s included)
    app.add_middleware(SecurityHeadersMiddleware, csp_policy=API_CSP_POLICY)

    # Request ID middleware (sets correlation ID)
    app.add_middleware(RequestIDMiddleware)

    # CORS middleware - configured from environment
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    prefix = settings.api_prefix
    app.include_router(health.router, prefix=prefix, tags=["health"])
    app.include_router(auth.router, prefix=f"{prefix}/admin", tags=["auth"])
    app.include_router(admin_articles.router, prefix=f"{prefix}/admin/articles", tags=["admin"])
    app.include_router(articles.router, prefix=f"{prefix}/articles", tags=["articles"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": f"{settings.project_name} API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app


app = create_app()
