"""Application-layer value objects for the Identity bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from identity.domain.aggregates import User


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller of a request.

    ``user_id`` is the session token's subject, i.e. the user's external id
    and the owner id of their entries.
    """

    user_id: str
    session_id: str | None = None


@dataclass(frozen=True)
class SyncOutcome:
    """What handling a webhook event did, echoed back to the provider."""

    message: str
    user: User | None = None

    def to_response(self) -> dict[str, Any]:
        if self.user is None:
            return {"message": self.message}
        return {"message": self.message, "user": self.user.summary()}
