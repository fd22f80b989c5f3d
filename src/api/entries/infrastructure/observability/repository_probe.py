"""Domain probe for entry repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to entry persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class EntryRepositoryProbe(Protocol):
    """Domain probe for entry repository operations."""

    def entry_saved(self, entry_id: int, owner_id: str) -> None:
        """Record that an entry was inserted."""
        ...

    def entries_listed(self, owner_id: str, count: int) -> None:
        """Record that an owner's entries were listed."""
        ...

    def entry_not_found(self, entry_id: int, owner_id: str) -> None:
        """Record that no owner-scoped row matched."""
        ...

    def entry_updated(self, entry_id: int, fields: list[str]) -> None:
        """Record that an entry's fields were updated."""
        ...

    def entries_deleted(self, entry_ids: list[int], owner_id: str) -> None:
        """Record that entries were physically deleted."""
        ...

    def statement_failed(self, operation: str, error: str) -> None:
        """Record that a database statement raised."""
        ...

    def with_context(self, context: ObservationContext) -> EntryRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultEntryRepositoryProbe:
    """Default implementation of EntryRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultEntryRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultEntryRepositoryProbe(logger=self._logger, context=context)

    def entry_saved(self, entry_id: int, owner_id: str) -> None:
        self._logger.info(
            "entry_saved",
            entry_id=entry_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def entries_listed(self, owner_id: str, count: int) -> None:
        self._logger.debug(
            "entries_listed",
            owner_id=owner_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def entry_not_found(self, entry_id: int, owner_id: str) -> None:
        self._logger.debug(
            "entry_not_found",
            entry_id=entry_id,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def entry_updated(self, entry_id: int, fields: list[str]) -> None:
        self._logger.info(
            "entry_updated",
            entry_id=entry_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def entries_deleted(self, entry_ids: list[int], owner_id: str) -> None:
        self._logger.info(
            "entries_deleted",
            entry_ids=entry_ids,
            owner_id=owner_id,
            **self._get_context_kwargs(),
        )

    def statement_failed(self, operation: str, error: str) -> None:
        self._logger.error(
            "entry_statement_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
