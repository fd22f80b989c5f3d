"""Repository protocols (ports) for the Entries bounded context.

Every method is owner-scoped: rows are matched on both entry id and owner
id, so an entry owned by someone else behaves exactly like a missing one.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from entries.domain.aggregates import Entry, EntryDraft, EntryWithOwner
from entries.domain.value_objects import Category, EntryStatus


@runtime_checkable
class IEntryRepository(Protocol):
    """Repository for Entry persistence.

    Implementations run statements on the caller's session; transaction
    boundaries belong to the application service.
    """

    async def add(self, draft: EntryDraft) -> Entry:
        """Insert a new entry.

        Args:
            draft: Validated creation input (carries the owner id)

        Returns:
            The stored entry with its generated id and timestamps
        """
        ...

    async def list_for_owner(
        self,
        owner_id: str,
        status: EntryStatus | None = None,
        category: Category | None = None,
    ) -> list[Entry]:
        """List an owner's entries, most recently updated first.

        Args:
            owner_id: External identifier of the owner
            status: Optional status equality filter
            category: Optional category equality filter

        Returns:
            Entries ordered by updated_at descending
        """
        ...

    async def get_with_owner(
        self, entry_id: int, owner_id: str
    ) -> EntryWithOwner | None:
        """Fetch one entry together with its owning user.

        Returns:
            The entry and owner, or None if no owner-scoped row matches
        """
        ...

    async def update_fields(
        self, entry_id: int, owner_id: str, changes: dict[str, Any]
    ) -> Entry | None:
        """Apply field changes and refresh updated_at.

        Returns:
            The updated entry, or None if no owner-scoped row matches
        """
        ...

    async def delete(self, entry_id: int, owner_id: str) -> Entry | None:
        """Physically delete one entry.

        Returns:
            The deleted entry, or None if no owner-scoped row matches
        """
        ...

    async def bulk_update_status(
        self, entry_ids: Sequence[int], owner_id: str, status: EntryStatus
    ) -> list[Entry]:
        """Set the status of the owner's entries among ``entry_ids``.

        Returns:
            The entries that were updated (ids of other owners are skipped)
        """
        ...

    async def bulk_delete(
        self, entry_ids: Sequence[int], owner_id: str
    ) -> list[Entry]:
        """Delete the owner's entries among ``entry_ids``.

        Returns:
            The entries that were deleted (ids of other owners are skipped)
        """
        ...
