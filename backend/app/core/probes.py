"""
Health probe functions for dependency checks.

Each probe function:
- Returns bool (True = healthy, False = unhealthy)
- Handles exceptions gracefully
- Includes a timeout so readiness checks never hang
"""

import asyncio

from sqlalchemy import text

from app.core.database import async_session_maker
from app.core.logging_config import get_logger

logger = get_logger(__name__)


async def check_database(timeout_seconds: float = 2.0) -> bool:
    """
    Check database connectivity.

    Executes a simple SELECT 1 query to verify the database is reachable
    and responding.

    Args:
        timeout_seconds: Maximum time to wait for response (default: 2.0)

    Returns:
        True if database is reachable and healthy, False otherwise
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            async with async_session_maker() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()
                return True

    except asyncio.TimeoutError:
        logger.warning("Database probe timed out", extra={"timeout_seconds": timeout_seconds})
        return False
    except Exception as exc:
        logger.warning(f"Database probe failed: {exc}", extra={"exception_type": type(exc).__name__})
        return False
