"""Identity sync service.

Applies verified identity-provider events to the local users table.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultIdentitySyncProbe,
    IdentitySyncProbe,
)
from identity.application.value_objects import SyncOutcome
from identity.domain.events import IdentityEvent, IdentityEventType
from identity.domain.value_objects import UserProfile
from identity.ports.repositories import IUserRepository

USER_CREATED_MESSAGE = "New user created"
USER_UPDATED_MESSAGE = "User updated successfully"
WEBHOOK_RECEIVED_MESSAGE = "Webhook received"


class IdentitySyncService:
    """Application service that keeps users in step with the provider.

    Store errors propagate so the webhook route can answer with a failure
    and the provider redelivers the event.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: IdentitySyncProbe | None = None,
    ):
        """Initialize IdentitySyncService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultIdentitySyncProbe()

    async def handle_event(self, event: IdentityEvent) -> SyncOutcome:
        """Apply one provider event.

        Raises:
            ValueError: If a user event carries no user id
            Exception: If the store fails
        """
        if event.type == IdentityEventType.USER_CREATED:
            return await self._user_created(event)
        if event.type == IdentityEventType.USER_UPDATED:
            return await self._user_updated(event)

        # user.deleted is recognized but deliberately left unhandled
        self._probe.event_ignored(event.type, event.subject_id)
        return SyncOutcome(message=WEBHOOK_RECEIVED_MESSAGE)

    async def _user_created(self, event: IdentityEvent) -> SyncOutcome:
        external_id = _require_subject(event)
        profile = UserProfile.from_provider_data(event.data)
        try:
            async with self._session.begin():
                existing = await self._user_repository.get_by_external_id(external_id)
                if existing is None:
                    user = await self._user_repository.add(external_id, profile)
                    was_created = True
                else:
                    # Redelivered creation: refresh instead of violating the unique key
                    user = await self._user_repository.update_profile(
                        external_id, profile
                    )
                    was_created = False
        except Exception as e:
            self._probe.sync_failed(event.type, external_id, str(e))
            raise

        self._probe.user_provisioned(external_id, was_created=was_created)
        message = USER_CREATED_MESSAGE if was_created else USER_UPDATED_MESSAGE
        return SyncOutcome(message=message, user=user)

    async def _user_updated(self, event: IdentityEvent) -> SyncOutcome:
        external_id = _require_subject(event)
        profile = UserProfile.from_provider_data(event.data)
        try:
            async with self._session.begin():
                user = await self._user_repository.update_profile(external_id, profile)
        except Exception as e:
            self._probe.sync_failed(event.type, external_id, str(e))
            raise

        if user is None:
            self._probe.user_missing_for_update(external_id)
            return SyncOutcome(message=WEBHOOK_RECEIVED_MESSAGE)

        self._probe.user_provisioned(external_id, was_created=False)
        return SyncOutcome(message=USER_UPDATED_MESSAGE, user=user)


def _require_subject(event: IdentityEvent) -> str:
    external_id = event.subject_id
    if external_id is None:
        raise ValueError(f"{event.type} event has no user id")
    return external_id
