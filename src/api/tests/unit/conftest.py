"""Unit test fixtures with mocked dependencies."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from entries.domain.aggregates import Entry
from entries.domain.value_objects import Category, EntryStatus

OWNER_ID = "user_2alice"
OTHER_OWNER_ID = "user_2mallory"
BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(
    entry_id: int = 1,
    title: str = "Dune",
    owner_id: str = OWNER_ID,
    category: Category = Category.BOOK,
    status: EntryStatus = EntryStatus.WANT_TO_READ,
    rating: float | None = None,
    genres: tuple[str, ...] = (),
    minutes: int = 0,
    **overrides,
) -> Entry:
    """Build an Entry; ``minutes`` shifts updated_at from a fixed base time."""
    values = dict(
        id=entry_id,
        owner_id=owner_id,
        title=title,
        category=category,
        status=status,
        image_url=None,
        rating=rating,
        genres=genres,
        notes=None,
        created_at=BASE_TIME,
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )
    values.update(overrides)
    return Entry(**values)


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )
