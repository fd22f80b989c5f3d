"""Entry command service for the Entries bounded context.

Every operation returns a ``CommandResult`` and never raises. Validation
happens before any store access; store errors are logged through the probe
and surfaced as generic failure messages.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from entries.application.observability import (
    DefaultEntryServiceProbe,
    EntryServiceProbe,
)
from entries.domain.aggregates import (
    Entry,
    EntryDraft,
    EntryUpdate,
    EntryWithOwner,
    ReadingStats,
)
from entries.domain.exceptions import EntryValidationError
from entries.domain.value_objects import Category, EntryStatus, validate_rating
from entries.ports.repositories import IEntryRepository
from entries.ports.revalidation import IListRevalidator
from shared_kernel.command_result import CommandResult, FailureKind

ENTRY_NOT_FOUND = "Entry not found"
ENTRY_NOT_FOUND_OR_UNAUTHORIZED = "Entry not found or unauthorized"


class EntryCommandService:
    """Application service for owner-scoped entry commands.

    Manages one database transaction per mutating operation and bumps the
    owner's list revision after every mutation that changed at least one row.
    """

    def __init__(
        self,
        entry_repository: IEntryRepository,
        session: AsyncSession,
        revalidator: IListRevalidator,
        probe: EntryServiceProbe | None = None,
    ):
        """Initialize EntryCommandService with dependencies.

        Args:
            entry_repository: Repository for entry persistence
            session: Database session for transaction management
            revalidator: Per-owner list revision registry
            probe: Optional domain probe for observability
        """
        self._entry_repository = entry_repository
        self._session = session
        self._revalidator = revalidator
        self._probe = probe or DefaultEntryServiceProbe()

    async def create(
        self,
        owner_id: str,
        title: str | None,
        category: Category | None = None,
        status: EntryStatus | None = None,
        image_url: str | None = None,
        rating: float | None = None,
        genres: Iterable[str] | None = None,
        notes: str | None = None,
    ) -> CommandResult[Entry]:
        """Create an entry owned by ``owner_id``.

        Category and status default to Book and Want to Read.
        """
        try:
            draft = EntryDraft.create(
                owner_id=owner_id,
                title=title,
                category=category,
                status=status,
                image_url=image_url,
                rating=rating,
                genres=genres,
                notes=notes,
            )
        except EntryValidationError as e:
            return self._rejected(owner_id, "create", e)

        try:
            async with self._session.begin():
                entry = await self._entry_repository.add(draft)
        except Exception as e:
            return self._failed(owner_id, "create", e, "Failed to create entry")

        self._probe.entry_created(entry.id, owner_id)
        self._revalidator.invalidate(owner_id)
        return CommandResult.ok(entry)

    async def list_by_owner(self, owner_id: str) -> CommandResult[list[Entry]]:
        """List all of the owner's entries, most recently updated first."""
        return await self._list(owner_id)

    async def list_by_status(
        self, owner_id: str, status: EntryStatus
    ) -> CommandResult[list[Entry]]:
        """List the owner's entries with the given status."""
        return await self._list(owner_id, status=status)

    async def list_by_category(
        self, owner_id: str, category: Category
    ) -> CommandResult[list[Entry]]:
        """List the owner's entries in the given category."""
        return await self._list(owner_id, category=category)

    async def get_by_id(
        self, entry_id: int, owner_id: str
    ) -> CommandResult[EntryWithOwner]:
        """Fetch one entry with its owner's profile."""
        try:
            found = await self._entry_repository.get_with_owner(entry_id, owner_id)
        except Exception as e:
            return self._failed(owner_id, "get_by_id", e, "Failed to fetch entry")

        if found is None:
            self._probe.entry_not_found(entry_id, owner_id, "get_by_id")
            return CommandResult.fail(FailureKind.NOT_FOUND, ENTRY_NOT_FOUND)
        return CommandResult.ok(found)

    async def update(
        self, entry_id: int, owner_id: str, changes: EntryUpdate
    ) -> CommandResult[Entry]:
        """Apply a partial update; ``updated_at`` is refreshed even when empty."""
        try:
            values = changes.changes()
        except EntryValidationError as e:
            return self._rejected(owner_id, "update", e)

        return await self._update_one(
            entry_id, owner_id, values, "update", "Failed to update entry"
        )

    async def update_status(
        self, entry_id: int, owner_id: str, status: EntryStatus
    ) -> CommandResult[Entry]:
        """Change only the status of one entry."""
        return await self._update_one(
            entry_id,
            owner_id,
            {"status": status},
            "update_status",
            "Failed to update entry status",
        )

    async def update_rating(
        self, entry_id: int, owner_id: str, rating: float | None
    ) -> CommandResult[Entry]:
        """Change only the rating of one entry; ``None`` clears it."""
        try:
            value = validate_rating(rating)
        except EntryValidationError as e:
            return self._rejected(owner_id, "update_rating", e)

        return await self._update_one(
            entry_id,
            owner_id,
            {"rating": value},
            "update_rating",
            "Failed to update entry rating",
        )

    async def delete(self, entry_id: int, owner_id: str) -> CommandResult[Entry]:
        """Physically delete one entry and return it."""
        try:
            async with self._session.begin():
                deleted = await self._entry_repository.delete(entry_id, owner_id)
        except Exception as e:
            return self._failed(owner_id, "delete", e, "Failed to delete entry")

        if deleted is None:
            self._probe.entry_not_found(entry_id, owner_id, "delete")
            return CommandResult.fail(
                FailureKind.NOT_FOUND, ENTRY_NOT_FOUND_OR_UNAUTHORIZED
            )

        self._probe.entries_deleted(owner_id, [deleted.id])
        self._revalidator.invalidate(owner_id)
        return CommandResult.ok(deleted)

    async def bulk_update_status(
        self, entry_ids: Sequence[int], owner_id: str, status: EntryStatus
    ) -> CommandResult[list[Entry]]:
        """Set the status of every owned entry among ``entry_ids``.

        Ids owned by someone else are skipped; an empty id list succeeds
        without touching the store.
        """
        ids = _distinct(entry_ids)
        if not ids:
            return CommandResult.ok([])

        try:
            async with self._session.begin():
                updated = await self._entry_repository.bulk_update_status(
                    ids, owner_id, status
                )
        except Exception as e:
            return self._failed(
                owner_id, "bulk_update_status", e, "Failed to bulk update entries"
            )

        if updated:
            self._probe.entries_updated(
                owner_id, [entry.id for entry in updated], "bulk_update_status"
            )
            self._revalidator.invalidate(owner_id)
        return CommandResult.ok(updated)

    async def bulk_delete(
        self, entry_ids: Sequence[int], owner_id: str
    ) -> CommandResult[list[Entry]]:
        """Delete every owned entry among ``entry_ids``."""
        ids = _distinct(entry_ids)
        if not ids:
            return CommandResult.ok([])

        try:
            async with self._session.begin():
                deleted = await self._entry_repository.bulk_delete(ids, owner_id)
        except Exception as e:
            return self._failed(
                owner_id, "bulk_delete", e, "Failed to bulk delete entries"
            )

        if deleted:
            self._probe.entries_deleted(owner_id, [entry.id for entry in deleted])
            self._revalidator.invalidate(owner_id)
        return CommandResult.ok(deleted)

    async def compute_stats(self, owner_id: str) -> CommandResult[ReadingStats]:
        """Summarize the owner's entries by status and rating."""
        try:
            entries = await self._entry_repository.list_for_owner(owner_id)
        except Exception as e:
            return self._failed(
                owner_id, "compute_stats", e, "Failed to fetch reading stats"
            )
        return CommandResult.ok(ReadingStats.from_entries(entries))

    async def _list(
        self,
        owner_id: str,
        status: EntryStatus | None = None,
        category: Category | None = None,
    ) -> CommandResult[list[Entry]]:
        try:
            entries = await self._entry_repository.list_for_owner(
                owner_id, status=status, category=category
            )
        except Exception as e:
            return self._failed(owner_id, "list", e, "Failed to fetch entries")
        return CommandResult.ok(entries)

    async def _update_one(
        self,
        entry_id: int,
        owner_id: str,
        values: dict,
        operation: str,
        failure_message: str,
    ) -> CommandResult[Entry]:
        try:
            async with self._session.begin():
                updated = await self._entry_repository.update_fields(
                    entry_id, owner_id, values
                )
        except Exception as e:
            return self._failed(owner_id, operation, e, failure_message)

        if updated is None:
            self._probe.entry_not_found(entry_id, owner_id, operation)
            return CommandResult.fail(
                FailureKind.NOT_FOUND, ENTRY_NOT_FOUND_OR_UNAUTHORIZED
            )

        self._probe.entries_updated(owner_id, [entry_id], operation)
        self._revalidator.invalidate(owner_id)
        return CommandResult.ok(updated)

    def _rejected(
        self, owner_id: str, operation: str, error: EntryValidationError
    ) -> CommandResult:
        self._probe.validation_rejected(owner_id, operation, str(error))
        return CommandResult.fail(FailureKind.VALIDATION, str(error))

    def _failed(
        self, owner_id: str, operation: str, error: Exception, message: str
    ) -> CommandResult:
        self._probe.operation_failed(owner_id, operation, str(error))
        return CommandResult.fail(FailureKind.INTERNAL, message)


def _distinct(entry_ids: Sequence[int]) -> list[int]:
    """Drop repeated ids while keeping first-seen order."""
    return list(dict.fromkeys(entry_ids))
