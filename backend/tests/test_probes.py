"""
Tests for health probe functions.

Tests follow AAA (Arrange, Act, Assert) pattern with mocks for the
session factory.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.probes import check_database


def mock_session_factory(execute):
    session = AsyncMock(spec=AsyncSession)
    session.execute = execute
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=session)


@pytest.mark.asyncio
class TestDatabaseProbe:
    """Tests for database readiness probe."""

    async def test_check_database_success(self):
        """
        Arrange: Session factory returning a working session
        Act: Call check_database()
        Assert: Returns True after one query
        """
        execute = AsyncMock(return_value=MagicMock())

        with patch("app.core.probes.async_session_maker", mock_session_factory(execute)):
            result = await check_database()

        assert result is True
        execute.assert_called_once()

    async def test_check_database_against_in_memory_engine(self):
        assert await check_database() is True

    async def test_check_database_connection_error(self):
        with patch("app.core.probes.async_session_maker") as mock_maker:
            mock_maker.side_effect = Exception("Connection failed")

            result = await check_database()

        assert result is False

    async def test_check_database_timeout(self):
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        with patch("app.core.probes.async_session_maker", mock_session_factory(slow_execute)):
            result = await check_database(timeout_seconds=0.01)

        assert result is False
