"""Domain probe for user repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations.

    Records domain events during user persistence operations.
    """

    def user_saved(self, external_id: str, was_created: bool) -> None:
        """Record that a user row was inserted or updated."""
        ...

    def user_not_found(self, external_id: str) -> None:
        """Record that no row has the external id."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, external_id: str, was_created: bool) -> None:
        """Record that a user row was inserted or updated."""
        self._logger.info(
            "user_saved",
            external_id=external_id,
            was_created=was_created,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, external_id: str) -> None:
        """Record that no row has the external id."""
        self._logger.debug(
            "user_not_found",
            external_id=external_id,
            **self._get_context_kwargs(),
        )
