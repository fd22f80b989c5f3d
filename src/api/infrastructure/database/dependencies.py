"""FastAPI database dependencies.

Engines are created lazily, once per role, and shared by every request.
Sessions never auto-commit: callers open transactions themselves with
``async with session.begin()``.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

_probe = DefaultConnectionProbe()


class _EngineSlot:
    """Lazily built engine plus its sessionmaker for one role."""

    def __init__(self, role: str, factory: Callable[[DatabaseSettings], AsyncEngine]):
        self.role = role
        self._factory = factory
        self._lock = threading.Lock()
        self.engine: AsyncEngine | None = None
        self.sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def get(self) -> AsyncEngine:
        if self.engine is None:
            with self._lock:
                if self.engine is None:
                    settings = get_database_settings()
                    engine = self._factory(settings)
                    self.sessionmaker = async_sessionmaker(
                        engine, expire_on_commit=False, class_=AsyncSession
                    )
                    self.engine = engine
                    _probe.engine_created(self.role, settings.connection_string)
        return self.engine

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        _probe.pool_closed(self.role)
        self.engine = None
        self.sessionmaker = None


# Factories are looked up at call time so they can be patched in tests
_write = _EngineSlot("write", lambda settings: create_write_engine(settings))
_read = _EngineSlot("read", lambda settings: create_read_engine(settings))


def get_write_engine() -> AsyncEngine:
    return _write.get()


def get_read_engine() -> AsyncEngine:
    return _read.get()


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on the write pool.

    Usage:
        @router.post("/entries")
        async def create_entry(
            session: AsyncSession = Depends(get_write_session)
        ):
            async with session.begin():
                session.add(model)
    """
    get_write_engine()
    assert _write.sessionmaker is not None

    async with _write.sessionmaker() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on the read pool.

    Read-only by convention; nothing enforces it at the database level.
    """
    get_read_engine()
    assert _read.sessionmaker is not None

    async with _read.sessionmaker() as session:
        yield session


async def check_database_health() -> bool:
    """Run ``SELECT 1`` on the read engine.

    Returns:
        True when the database answered, False otherwise
    """
    try:
        async with get_read_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        _probe.health_check_failed(e)
        return False


async def close_database_connections() -> None:
    """Dispose both pools; engines are rebuilt on next use."""
    await _write.dispose()
    await _read.dispose()
