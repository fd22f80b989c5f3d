"""Unit tests for UserRepository."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy.dialects import postgresql

from identity.domain.value_objects import UserProfile
from identity.infrastructure.models import UserModel
from identity.infrastructure.observability import UserRepositoryProbe
from identity.infrastructure.user_repository import UserRepository
from identity.ports.repositories import IUserRepository
from tests.unit.conftest import BASE_TIME, OWNER_ID

PROFILE = UserProfile(
    name="alice",
    email="alice@example.com",
    first_name="Alice",
    last_name="Liddell",
    photo="",
)


def _user_model(**overrides) -> UserModel:
    values = dict(
        id=1,
        external_id=OWNER_ID,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
        **PROFILE.to_dict(),
    )
    values.update(overrides)
    return UserModel(**values)


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_probe():
    return create_autospec(UserRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_session, mock_probe):
    """Create repository with mock session."""
    return UserRepository(session=mock_session, probe=mock_probe)


def _result(model):
    result = MagicMock()
    result.scalar_one_or_none.return_value = model
    return result


class TestProtocolCompliance:
    def test_implements_protocol(self, repository):
        assert isinstance(repository, IUserRepository)


class TestGetByExternalId:
    @pytest.mark.asyncio
    async def test_found(self, repository, mock_session):
        mock_session.execute.return_value = _result(_user_model())

        user = await repository.get_by_external_id(OWNER_ID)

        assert user.external_id == OWNER_ID
        assert user.profile == PROFILE

    @pytest.mark.asyncio
    async def test_not_found(self, repository, mock_session, mock_probe):
        mock_session.execute.return_value = _result(None)

        assert await repository.get_by_external_id("user_missing") is None
        mock_probe.user_not_found.assert_called_once_with("user_missing")


class TestAdd:
    @pytest.mark.asyncio
    async def test_adds_row_with_profile(self, repository, mock_session, mock_probe):
        user = await repository.add(OWNER_ID, PROFILE)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, UserModel)
        assert added.external_id == OWNER_ID
        assert added.email == "alice@example.com"
        mock_session.flush.assert_awaited_once()
        assert user.profile == PROFILE
        mock_probe.user_saved.assert_called_once_with(OWNER_ID, was_created=True)


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_updates_by_external_id(self, repository, mock_session):
        mock_session.execute.return_value = _result(_user_model(name="alice2"))

        user = await repository.update_profile(OWNER_ID, PROFILE)

        assert user.profile.name == "alice2"
        compiled = mock_session.execute.call_args[0][0].compile(
            dialect=postgresql.dialect()
        )
        assert compiled.params["external_id_1"] == OWNER_ID
        assert compiled.params["email"] == "alice@example.com"
        assert compiled.params["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_missing_user(self, repository, mock_session):
        mock_session.execute.return_value = _result(None)

        assert await repository.update_profile("user_missing", PROFILE) is None
