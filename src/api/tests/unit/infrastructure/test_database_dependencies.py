"""Unit tests for database session dependencies and health checks."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from infrastructure.database import dependencies


@pytest.fixture(autouse=True)
def reset_engines():
    """Start and finish each test without cached engines."""
    for slot in (dependencies._write, dependencies._read):
        slot.engine = None
        slot.sessionmaker = None
    yield
    for slot in (dependencies._write, dependencies._read):
        slot.engine = None
        slot.sessionmaker = None


def test_write_engine_is_created_once(mock_db_settings):
    with (
        patch.object(dependencies, "get_database_settings", return_value=mock_db_settings),
        patch.object(dependencies, "create_write_engine") as create_engine,
    ):
        first = dependencies.get_write_engine()
        second = dependencies.get_write_engine()

    assert first is second
    create_engine.assert_called_once_with(mock_db_settings)


def test_read_and_write_engines_are_separate(mock_db_settings):
    with (
        patch.object(dependencies, "get_database_settings", return_value=mock_db_settings),
        patch.object(dependencies, "create_write_engine", return_value=MagicMock()),
        patch.object(dependencies, "create_read_engine", return_value=MagicMock()),
    ):
        assert dependencies.get_write_engine() is not dependencies.get_read_engine()


@pytest.mark.asyncio
async def test_health_check_reports_failure():
    engine = MagicMock()
    engine.connect.side_effect = OSError("connection refused")

    with patch.object(dependencies, "get_read_engine", return_value=engine):
        assert await dependencies.check_database_health() is False


@pytest.mark.asyncio
async def test_health_check_success():
    conn = AsyncMock()
    engine = MagicMock()
    engine.connect.return_value.__aenter__ = AsyncMock(return_value=conn)
    engine.connect.return_value.__aexit__ = AsyncMock(return_value=None)

    with patch.object(dependencies, "get_read_engine", return_value=engine):
        assert await dependencies.check_database_health() is True
    conn.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_disposes_engines():
    write_engine = AsyncMock()
    read_engine = AsyncMock()
    dependencies._write.engine = write_engine
    dependencies._read.engine = read_engine

    await dependencies.close_database_connections()

    write_engine.dispose.assert_awaited_once()
    read_engine.dispose.assert_awaited_once()
    assert dependencies._write.engine is None
    assert dependencies._read.engine is None


@pytest.mark.asyncio
async def test_close_without_engines_is_noop():
    await dependencies.close_database_connections()

    assert dependencies._write.engine is None
