"""Integration tests for UserRepository.

These tests require PostgreSQL to be running.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from identity.infrastructure.user_repository import UserRepository
from tests.integration.conftest import profile_for

pytestmark = pytest.mark.integration


class TestUserRoundTrip:
    @pytest.mark.asyncio
    async def test_add_and_get(self, user_repository: UserRepository, async_session):
        async with async_session.begin():
            created = await user_repository.add("user_2bob", profile_for("bob"))

        retrieved = await user_repository.get_by_external_id("user_2bob")

        assert retrieved is not None
        assert retrieved.id == created.id
        assert retrieved.profile.email == "bob@example.com"

    @pytest.mark.asyncio
    async def test_update_profile(self, user_repository: UserRepository, async_session, alice):
        async with async_session.begin():
            updated = await user_repository.update_profile(alice, profile_for("alicia"))

        assert updated.profile.name == "alicia"
        assert updated.updated_at >= updated.created_at

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, user_repository: UserRepository, async_session):
        async with async_session.begin():
            assert await user_repository.update_profile("user_2ghost", profile_for("x")) is None

    @pytest.mark.asyncio
    async def test_external_id_is_unique(
        self, user_repository: UserRepository, async_session, alice
    ):
        with pytest.raises(IntegrityError):
            async with async_session.begin():
                await user_repository.add(alice, profile_for("alice"))
