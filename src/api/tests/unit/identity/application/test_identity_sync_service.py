"""Unit tests for IdentitySyncService."""

from unittest.mock import create_autospec

import pytest

from identity.application.observability import IdentitySyncProbe
from identity.application.services import IdentitySyncService
from identity.domain.aggregates import User
from identity.domain.events import IdentityEvent
from identity.domain.value_objects import UserProfile
from identity.ports.repositories import IUserRepository
from tests.unit.conftest import BASE_TIME, OWNER_ID

USER_DATA = {
    "id": OWNER_ID,
    "username": "alice",
    "first_name": "Alice",
    "last_name": "Liddell",
    "email_addresses": [{"email_address": "alice@example.com"}],
    "image_url": "https://img.example.com/alice.png",
}


def _user(profile: UserProfile) -> User:
    return User(
        id=1,
        external_id=OWNER_ID,
        profile=profile,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )


@pytest.fixture
def mock_user_repository():
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(IdentitySyncProbe, instance=True)


@pytest.fixture
def sync_service(mock_user_repository, mock_session, mock_probe):
    return IdentitySyncService(
        user_repository=mock_user_repository,
        session=mock_session,
        probe=mock_probe,
    )


class TestUserCreated:
    @pytest.mark.asyncio
    async def test_creates_new_user(self, sync_service, mock_user_repository, mock_probe):
        profile = UserProfile.from_provider_data(USER_DATA)
        mock_user_repository.get_by_external_id.return_value = None
        mock_user_repository.add.return_value = _user(profile)

        outcome = await sync_service.handle_event(
            IdentityEvent(type="user.created", data=USER_DATA)
        )

        assert outcome.message == "New user created"
        mock_user_repository.add.assert_called_once_with(OWNER_ID, profile)
        mock_probe.user_provisioned.assert_called_once_with(OWNER_ID, was_created=True)
        response = outcome.to_response()
        assert response["user"]["external_id"] == OWNER_ID
        assert response["user"]["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_redelivery_updates_existing_user(
        self, sync_service, mock_user_repository
    ):
        profile = UserProfile.from_provider_data(USER_DATA)
        mock_user_repository.get_by_external_id.return_value = _user(profile)
        mock_user_repository.update_profile.return_value = _user(profile)

        outcome = await sync_service.handle_event(
            IdentityEvent(type="user.created", data=USER_DATA)
        )

        assert outcome.message == "User updated successfully"
        mock_user_repository.add.assert_not_called()
        mock_user_repository.update_profile.assert_called_once_with(OWNER_ID, profile)

    @pytest.mark.asyncio
    async def test_runs_in_one_transaction(
        self, sync_service, mock_user_repository, mock_session
    ):
        mock_user_repository.get_by_external_id.return_value = None
        mock_user_repository.add.return_value = _user(
            UserProfile.from_provider_data(USER_DATA)
        )

        await sync_service.handle_event(IdentityEvent(type="user.created", data=USER_DATA))

        mock_session.begin.assert_called_once()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(
        self, sync_service, mock_user_repository, mock_probe
    ):
        mock_user_repository.get_by_external_id.side_effect = RuntimeError("down")

        with pytest.raises(RuntimeError):
            await sync_service.handle_event(
                IdentityEvent(type="user.created", data=USER_DATA)
            )
        mock_probe.sync_failed.assert_called_once_with("user.created", OWNER_ID, "down")

    @pytest.mark.asyncio
    async def test_missing_user_id(self, sync_service, mock_user_repository):
        with pytest.raises(ValueError):
            await sync_service.handle_event(
                IdentityEvent(type="user.created", data={"username": "x"})
            )
        mock_user_repository.add.assert_not_called()


class TestUserUpdated:
    @pytest.mark.asyncio
    async def test_updates_profile(self, sync_service, mock_user_repository):
        profile = UserProfile.from_provider_data(USER_DATA)
        mock_user_repository.update_profile.return_value = _user(profile)

        outcome = await sync_service.handle_event(
            IdentityEvent(type="user.updated", data=USER_DATA)
        )

        assert outcome.message == "User updated successfully"
        assert outcome.user.profile == profile

    @pytest.mark.asyncio
    async def test_unknown_user_is_acknowledged(
        self, sync_service, mock_user_repository, mock_probe
    ):
        mock_user_repository.update_profile.return_value = None

        outcome = await sync_service.handle_event(
            IdentityEvent(type="user.updated", data=USER_DATA)
        )

        assert outcome.to_response() == {"message": "Webhook received"}
        mock_user_repository.add.assert_not_called()
        mock_probe.user_missing_for_update.assert_called_once_with(OWNER_ID)


class TestOtherEvents:
    @pytest.mark.parametrize("event_type", ["user.deleted", "session.created"])
    @pytest.mark.asyncio
    async def test_acknowledged_without_store_access(
        self, sync_service, mock_user_repository, mock_session, mock_probe, event_type
    ):
        outcome = await sync_service.handle_event(
            IdentityEvent(type=event_type, data={"id": OWNER_ID})
        )

        assert outcome.to_response() == {"message": "Webhook received"}
        mock_session.begin.assert_not_called()
        mock_user_repository.update_profile.assert_not_called()
        mock_probe.event_ignored.assert_called_once_with(event_type, OWNER_ID)
