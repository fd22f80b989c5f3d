"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tables are created
from the ORM metadata, so migrations need not have been applied.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entries.infrastructure.entry_repository import EntryRepository
from entries.infrastructure.models import EntryModel  # noqa: F401
from identity.domain.value_objects import UserProfile
from identity.infrastructure.models import UserModel  # noqa: F401
from identity.infrastructure.user_repository import UserRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        TBR_DB_HOST, TBR_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("TBR_DB_HOST", "localhost"),
        port=int(os.getenv("TBR_DB_PORT", "5432")),
        database=os.getenv("TBR_DB_DATABASE", "tbr"),
        username=os.getenv("TBR_DB_USERNAME", "tbr"),
        password=SecretStr(os.getenv("TBR_DB_PASSWORD", "tbr_dev_password")),
        pool_size=2,
    )


@pytest_asyncio.fixture
async def async_session(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session on freshly emptied tables."""
    engine = create_write_engine(integration_db_settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text("TRUNCATE TABLE users RESTART IDENTITY CASCADE"))

    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def user_repository(async_session: AsyncSession) -> UserRepository:
    return UserRepository(session=async_session)


@pytest.fixture
def entry_repository(async_session: AsyncSession) -> EntryRepository:
    return EntryRepository(session=async_session)


def profile_for(name: str) -> UserProfile:
    return UserProfile(
        name=name,
        email=f"{name}@example.com",
        first_name=name.capitalize(),
        last_name="Tester",
        photo="",
    )


@pytest_asyncio.fixture
async def alice(async_session: AsyncSession, user_repository: UserRepository) -> str:
    """Provision the user who owns most test entries; returns their external id."""
    async with async_session.begin():
        await user_repository.add("user_2alice", profile_for("alice"))
    return "user_2alice"


@pytest_asyncio.fixture
async def mallory(async_session: AsyncSession, user_repository: UserRepository) -> str:
    async with async_session.begin():
        await user_repository.add("user_2mallory", profile_for("mallory"))
    return "user_2mallory"
