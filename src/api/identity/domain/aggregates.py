"""User aggregate for the Identity bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from identity.domain.value_objects import UserProfile


@dataclass(frozen=True)
class User:
    """A user provisioned from the identity provider.

    ``external_id`` is the provider's subject identifier; entries reference
    their owner by it.
    """

    id: int
    external_id: str
    profile: UserProfile
    created_at: datetime
    updated_at: datetime

    def summary(self) -> dict[str, Any]:
        """Return the JSON-ready view echoed back to the webhook caller."""
        return {"external_id": self.external_id, **self.profile.to_dict()}
