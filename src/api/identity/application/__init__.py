"""Application layer for the Identity bounded context."""

from identity.application.services import IdentitySyncService
from identity.application.value_objects import CurrentUser, SyncOutcome

__all__ = [
    "CurrentUser",
    "IdentitySyncService",
    "SyncOutcome",
]
