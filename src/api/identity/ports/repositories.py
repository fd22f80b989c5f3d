"""Repository protocols (ports) for the Identity bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import User
from identity.domain.value_objects import UserProfile


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for users keyed by their external id.

    Implementations run statements on the caller's session; transaction
    boundaries belong to the application service.
    """

    async def get_by_external_id(self, external_id: str) -> User | None:
        """Retrieve a user by the provider's subject identifier."""
        ...

    async def add(self, external_id: str, profile: UserProfile) -> User:
        """Insert a new user row."""
        ...

    async def update_profile(
        self, external_id: str, profile: UserProfile
    ) -> User | None:
        """Overwrite the profile fields and refresh updated_at.

        Returns:
            The updated user, or None if no row has that external id
        """
        ...
