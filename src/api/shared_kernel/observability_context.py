"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so a single request can be followed across
    the route, the command service and the repository.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: External identifier of the user performing the operation.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", user_id="user_2abc")
        probe = DefaultEntryServiceProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        result.update(self.extra)
        return result

    def with_user(self, user_id: str) -> ObservationContext:
        """Create a new context with the acting user set."""
        return ObservationContext(
            request_id=self.request_id,
            user_id=user_id,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            user_id=self.user_id,
            extra={**self.extra, **kwargs},
        )
