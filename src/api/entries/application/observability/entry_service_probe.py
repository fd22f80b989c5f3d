"""Protocol for entry command service observability.

Defines the interface for domain probes that capture application-level
domain events for entry operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EntryServiceProbe(Protocol):
    """Domain probe for entry command service operations."""

    def entry_created(self, entry_id: int, owner_id: str) -> None:
        """Record that an entry was created."""
        ...

    def entries_updated(self, owner_id: str, entry_ids: list[int], operation: str) -> None:
        """Record that one or more entries were changed."""
        ...

    def entries_deleted(self, owner_id: str, entry_ids: list[int]) -> None:
        """Record that one or more entries were deleted."""
        ...

    def entry_not_found(self, entry_id: int, owner_id: str, operation: str) -> None:
        """Record that an owner-scoped lookup matched nothing."""
        ...

    def validation_rejected(self, owner_id: str, operation: str, reason: str) -> None:
        """Record that input was rejected before reaching the store."""
        ...

    def operation_failed(self, owner_id: str, operation: str, error: str) -> None:
        """Record that an operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> EntryServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEntryServiceProbe:
    """Default implementation of EntryServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultEntryServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultEntryServiceProbe(logger=self._logger, context=context)

    def entry_created(self, entry_id: int, owner_id: str) -> None:
        self._logger.info(
            "entry_created",
            entry_id=entry_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def entries_updated(self, owner_id: str, entry_ids: list[int], operation: str) -> None:
        self._logger.info(
            "entries_updated",
            owner_id=owner_id,
            entry_ids=entry_ids,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def entries_deleted(self, owner_id: str, entry_ids: list[int]) -> None:
        self._logger.info(
            "entries_deleted",
            owner_id=owner_id,
            entry_ids=entry_ids,
            **self._get_context_kwargs(),
        )

    def entry_not_found(self, entry_id: int, owner_id: str, operation: str) -> None:
        self._logger.info(
            "entry_not_found",
            entry_id=entry_id,
            owner_id=owner_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def validation_rejected(self, owner_id: str, operation: str, reason: str) -> None:
        self._logger.info(
            "entry_validation_rejected",
            owner_id=owner_id,
            operation=operation,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, owner_id: str, operation: str, error: str) -> None:
        self._logger.error(
            "entry_operation_failed",
            owner_id=owner_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
