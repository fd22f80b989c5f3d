"""Domain layer for the Identity bounded context."""

from identity.domain.aggregates import User
from identity.domain.events import IdentityEvent, IdentityEventType
from identity.domain.value_objects import UserProfile

__all__ = [
    "IdentityEvent",
    "IdentityEventType",
    "User",
    "UserProfile",
]
