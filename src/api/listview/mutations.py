"""Optimistic mutations over an ``OptimisticListStore``.

Each mutation changes the local list first, then awaits the server. When
the server call fails (failure envelope or transport error) the inverse
change is applied and the user is told; nothing is raised to the caller.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

import structlog

from entries.domain.aggregates import Entry
from entries.domain.value_objects import EntryStatus
from listview.notifications import NoticeAction, NoticeKind, Notifier
from listview.state import (
    ConfirmEntry,
    OptimisticListStore,
    RestoreEntry,
    UpdateEntry,
)
from shared_kernel.command_result import CommandResult

DEFAULT_UNDO_WINDOW_SECONDS = 5.0
NETWORK_ERROR_DESCRIPTION = "Network error. Please check your connection and try again."
GENERIC_ERROR_DESCRIPTION = "Something went wrong. Please try again."

logger = structlog.get_logger()


class EntryGateway(Protocol):
    """The server calls optimistic mutations depend on."""

    async def delete_entry(self, entry_id: int) -> CommandResult[Entry]:
        ...

    async def update_status(
        self, entry_id: int, status: EntryStatus
    ) -> CommandResult[Entry]:
        ...


class OptimisticMutationHandler:
    """Runs delete and status-change mutations against a list store."""

    def __init__(
        self,
        store: OptimisticListStore,
        gateway: EntryGateway,
        notifier: Notifier,
        undo_window_seconds: float = DEFAULT_UNDO_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._gateway = gateway
        self._notifier = notifier
        self._undo_window_seconds = undo_window_seconds
        self._clock = clock

    async def delete(self, entry: Entry) -> bool:
        """Delete an entry, offering an undo for a few seconds.

        Undo only restores the entry locally; the server delete still runs.

        Returns:
            True if the server confirmed the delete
        """
        self._store.begin_delete(entry.id)
        self._notifier.notify(
            NoticeKind.SUCCESS,
            f'"{entry.title}" deleted successfully',
            description="The book has been removed from your library",
            action=NoticeAction(label="Undo", on_click=self._undo_callback(entry)),
        )

        try:
            result = await self._gateway.delete_entry(entry.id)
        except Exception as e:
            logger.warning("optimistic_delete_failed", entry_id=entry.id, error=str(e))
            self._store.settle_delete(entry.id, succeeded=False)
            self._notifier.notify(
                NoticeKind.ERROR,
                "Failed to delete book",
                description=NETWORK_ERROR_DESCRIPTION,
            )
            return False

        self._store.settle_delete(entry.id, succeeded=result.success)
        if not result.success:
            self._notifier.notify(
                NoticeKind.ERROR,
                "Failed to delete book",
                description=result.error or GENERIC_ERROR_DESCRIPTION,
            )
        return result.success

    async def change_status(self, entry: Entry, new_status: EntryStatus) -> bool:
        """Change an entry's status, reverting to the previous one on failure.

        Returns:
            True if the server applied the change
        """
        previous_status = entry.status
        self._notifier.notify(
            NoticeKind.SUCCESS,
            "Status updated",
            description=f'Changed to "{new_status}"',
        )
        self._store.dispatch(UpdateEntry(entry.id, {"status": new_status}))

        try:
            result = await self._gateway.update_status(entry.id, new_status)
        except Exception as e:
            logger.warning("optimistic_status_change_failed", entry_id=entry.id, error=str(e))
            self._revert_status(entry.id, previous_status, NETWORK_ERROR_DESCRIPTION)
            return False

        if not result.success:
            self._revert_status(
                entry.id, previous_status, result.error or GENERIC_ERROR_DESCRIPTION
            )
            return False

        if result.data is not None:
            # A later failed delete restores from the snapshot, so it must
            # hold the confirmed entry
            self._store.dispatch(ConfirmEntry(result.data))
        return True

    def _revert_status(
        self, entry_id: int, previous_status: EntryStatus, description: str
    ) -> None:
        self._store.dispatch(UpdateEntry(entry_id, {"status": previous_status}))
        self._notifier.notify(
            NoticeKind.ERROR, "Failed to update status", description=description
        )

    def _undo_callback(self, entry: Entry) -> Callable[[], None]:
        expires_at = self._clock() + self._undo_window_seconds

        def undo() -> None:
            if self._clock() > expires_at:
                return
            self._store.dispatch(RestoreEntry(entry.id))
            self._notifier.notify(
                NoticeKind.INFO,
                "Delete cancelled",
                description="The book has been restored to your library",
            )

        return undo
