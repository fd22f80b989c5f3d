"""PostgreSQL implementation of IUserRepository.

Users are provisioned from identity-provider webhooks; this repository only
handles profile metadata persistence.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.domain.value_objects import UserProfile
from identity.infrastructure.models import UserModel
from identity.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.ports.repositories import IUserRepository
from infrastructure.database.models import utc_now


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def get_by_external_id(self, external_id: str) -> User | None:
        """Retrieve a user by the provider's subject identifier.

        Args:
            external_id: The identity provider's user id

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.external_id == external_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(external_id)
            return None
        return self._to_domain(model)

    async def add(self, external_id: str, profile: UserProfile) -> User:
        """Insert a new user row.

        Args:
            external_id: The identity provider's user id
            profile: Profile metadata derived from the provider payload
        """
        model = UserModel(external_id=external_id, **profile.to_dict())
        self._session.add(model)
        await self._session.flush()

        self._probe.user_saved(external_id, was_created=True)
        return self._to_domain(model)

    async def update_profile(
        self, external_id: str, profile: UserProfile
    ) -> User | None:
        stmt = (
            update(UserModel)
            .where(UserModel.external_id == external_id)
            .values(**profile.to_dict(), updated_at=utc_now())
            .returning(UserModel)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(external_id)
            return None

        self._probe.user_saved(external_id, was_created=False)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            external_id=model.external_id,
            profile=UserProfile(
                name=model.name,
                email=model.email,
                first_name=model.first_name,
                last_name=model.last_name,
                photo=model.photo,
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
