"""Protocol for identity sync observability.

Defines the interface for domain probes that capture what the sync service
did with each provider event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class IdentitySyncProbe(Protocol):
    """Domain probe for identity sync operations."""

    def user_provisioned(self, external_id: str, was_created: bool) -> None:
        """Record that a user row was created or refreshed from the provider."""
        ...

    def user_missing_for_update(self, external_id: str) -> None:
        """Record that an update arrived for a user we never stored."""
        ...

    def event_ignored(self, event_type: str, external_id: str | None) -> None:
        """Record that an event was acknowledged without changes."""
        ...

    def sync_failed(self, event_type: str, external_id: str | None, error: str) -> None:
        """Record that applying an event failed."""
        ...

    def with_context(self, context: ObservationContext) -> IdentitySyncProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIdentitySyncProbe:
    """Default implementation of IdentitySyncProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultIdentitySyncProbe:
        """Create a new probe with observation context bound."""
        return DefaultIdentitySyncProbe(logger=self._logger, context=context)

    def user_provisioned(self, external_id: str, was_created: bool) -> None:
        """Record that a user row was created or refreshed from the provider."""
        self._logger.info(
            "user_provisioned",
            external_id=external_id,
            was_created=was_created,
            **self._get_context_kwargs(),
        )

    def user_missing_for_update(self, external_id: str) -> None:
        """Record that an update arrived for a user we never stored."""
        self._logger.warning(
            "user_missing_for_update",
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def event_ignored(self, event_type: str, external_id: str | None) -> None:
        """Record that an event was acknowledged without changes."""
        self._logger.info(
            "identity_event_ignored",
            event_type=event_type,
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def sync_failed(self, event_type: str, external_id: str | None, error: str) -> None:
        """Record that applying an event failed."""
        self._logger.error(
            "identity_sync_failed",
            event_type=event_type,
            external_id=external_id,
            error=error,
            **self._get_context_kwargs(),
        )
