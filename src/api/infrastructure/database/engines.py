"""Async SQLAlchemy engines on asyncpg.

Writes and reads get separate pools. Each pool tags its connections with an
``application_name`` so they can be told apart in ``pg_stat_activity``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_write_engine",
    "create_read_engine",
    "build_async_url",
]

APPLICATION_NAME = "tbr-tracker"


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Engine used for entry mutations and identity sync."""
    return _create_engine(settings, role="write")


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Engine used for health checks and other read-only work.

    Kept apart so reads never queue behind mutations; it may later point
    at a replica.
    """
    return _create_engine(settings, role="read")


def _create_engine(settings: DatabaseSettings, role: str) -> AsyncEngine:
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        echo=settings.echo,
        connect_args={
            "server_settings": {"application_name": f"{APPLICATION_NAME}-{role}"}
        },
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Build a ``postgresql+asyncpg`` URL with credentials percent-encoded.

    Args:
        settings: Database connection settings

    Returns:
        The URL rendered with its password
    """
    url = URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
