"""Identity provider events delivered through webhooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping


class IdentityEventType(StrEnum):
    """Event types the sync service reacts to."""

    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


@dataclass(frozen=True)
class IdentityEvent:
    """A verified webhook delivery.

    ``type`` is kept as the raw string so unknown event types can still be
    acknowledged.
    """

    type: str
    data: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> IdentityEvent:
        """Build an event from the decoded ``{type, data}`` body.

        Raises:
            ValueError: If the payload lacks a type or its data is not an object
        """
        event_type = payload.get("type")
        if not isinstance(event_type, str) or not event_type:
            raise ValueError("Webhook payload has no event type")
        data = payload.get("data") or {}
        if not isinstance(data, Mapping):
            raise ValueError("Webhook payload data must be an object")
        return cls(type=event_type, data=data)

    @property
    def subject_id(self) -> str | None:
        """The provider's user id the event is about, if present."""
        subject = self.data.get("id")
        return str(subject) if subject else None
