"""PostgreSQL implementation of IEntryRepository.

All statements filter on both the entry id and the owner's external id, so
rows owned by someone else are indistinguishable from missing ones.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entries.domain.aggregates import Entry, EntryDraft, EntryWithOwner, OwnerProfile
from entries.domain.value_objects import Category, EntryStatus
from entries.infrastructure.models import EntryModel
from entries.infrastructure.observability import (
    DefaultEntryRepositoryProbe,
    EntryRepositoryProbe,
)
from entries.ports.repositories import IEntryRepository
from identity.infrastructure.models import UserModel
from infrastructure.database.exceptions import PersistenceError
from infrastructure.database.models import utc_now


class EntryRepository(IEntryRepository):
    """PostgreSQL-backed repository for Entry aggregates."""

    def __init__(
        self, session: AsyncSession, probe: EntryRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultEntryRepositoryProbe()

    async def add(self, draft: EntryDraft) -> Entry:
        model = EntryModel(
            title=draft.title,
            category=draft.category.value,
            status=draft.status.value,
            image_url=draft.image_url,
            rating=draft.rating,
            genres=list(draft.genres),
            notes=draft.notes,
            user_id=draft.owner_id,
        )
        try:
            self._session.add(model)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise self._failure("add", e) from e

        self._probe.entry_saved(model.id, draft.owner_id)
        return self._to_domain(model)

    async def list_for_owner(
        self,
        owner_id: str,
        status: EntryStatus | None = None,
        category: Category | None = None,
    ) -> list[Entry]:
        stmt = select(EntryModel).where(EntryModel.user_id == owner_id)
        if status is not None:
            stmt = stmt.where(EntryModel.status == status.value)
        if category is not None:
            stmt = stmt.where(EntryModel.category == category.value)
        stmt = stmt.order_by(EntryModel.updated_at.desc(), EntryModel.id.desc())

        try:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        except SQLAlchemyError as e:
            raise self._failure("list_for_owner", e) from e

        self._probe.entries_listed(owner_id, len(models))
        return [self._to_domain(model) for model in models]

    async def get_with_owner(
        self, entry_id: int, owner_id: str
    ) -> EntryWithOwner | None:
        stmt = (
            select(EntryModel, UserModel)
            .join(UserModel, UserModel.external_id == EntryModel.user_id)
            .where(EntryModel.id == entry_id, EntryModel.user_id == owner_id)
        )
        try:
            result = await self._session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as e:
            raise self._failure("get_with_owner", e) from e

        if row is None:
            self._probe.entry_not_found(entry_id, owner_id)
            return None

        entry_model, user_model = row
        return EntryWithOwner(
            entry=self._to_domain(entry_model),
            owner=OwnerProfile(
                external_id=user_model.external_id,
                name=user_model.name,
                email=user_model.email,
                first_name=user_model.first_name,
                last_name=user_model.last_name,
                photo=user_model.photo,
            ),
        )

    async def update_fields(
        self, entry_id: int, owner_id: str, changes: dict[str, Any]
    ) -> Entry | None:
        values = self._to_columns(changes)
        values["updated_at"] = utc_now()
        stmt = (
            update(EntryModel)
            .where(EntryModel.id == entry_id, EntryModel.user_id == owner_id)
            .values(**values)
            .returning(EntryModel)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._failure("update_fields", e) from e

        if model is None:
            self._probe.entry_not_found(entry_id, owner_id)
            return None

        self._probe.entry_updated(entry_id, sorted(changes))
        return self._to_domain(model)

    async def delete(self, entry_id: int, owner_id: str) -> Entry | None:
        stmt = (
            delete(EntryModel)
            .where(EntryModel.id == entry_id, EntryModel.user_id == owner_id)
            .returning(EntryModel)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._failure("delete", e) from e

        if model is None:
            self._probe.entry_not_found(entry_id, owner_id)
            return None

        self._probe.entries_deleted([entry_id], owner_id)
        return self._to_domain(model)

    async def bulk_update_status(
        self, entry_ids: Sequence[int], owner_id: str, status: EntryStatus
    ) -> list[Entry]:
        stmt = (
            update(EntryModel)
            .where(EntryModel.id.in_(list(entry_ids)), EntryModel.user_id == owner_id)
            .values(status=status.value, updated_at=utc_now())
            .returning(EntryModel)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        except SQLAlchemyError as e:
            raise self._failure("bulk_update_status", e) from e

        for model in models:
            self._probe.entry_updated(model.id, ["status"])
        return [self._to_domain(model) for model in models]

    async def bulk_delete(
        self, entry_ids: Sequence[int], owner_id: str
    ) -> list[Entry]:
        stmt = (
            delete(EntryModel)
            .where(EntryModel.id.in_(list(entry_ids)), EntryModel.user_id == owner_id)
            .returning(EntryModel)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
        except SQLAlchemyError as e:
            raise self._failure("bulk_delete", e) from e

        self._probe.entries_deleted([model.id for model in models], owner_id)
        return [self._to_domain(model) for model in models]

    def _failure(self, operation: str, error: SQLAlchemyError) -> PersistenceError:
        self._probe.statement_failed(operation, str(error))
        return PersistenceError(f"Entry {operation} failed: {error}", operation)

    @staticmethod
    def _to_columns(changes: dict[str, Any]) -> dict[str, Any]:
        """Convert domain field values into column values."""
        values: dict[str, Any] = {}
        for name, value in changes.items():
            if name in ("category", "status"):
                values[name] = value.value
            elif name == "genres":
                values[name] = list(value)
            else:
                values[name] = value
        return values

    @staticmethod
    def _to_domain(model: EntryModel) -> Entry:
        """Convert an ORM row to an Entry aggregate."""
        return Entry(
            id=model.id,
            owner_id=model.user_id,
            title=model.title,
            category=Category(model.category),
            status=EntryStatus(model.status),
            image_url=model.image_url,
            rating=model.rating,
            genres=tuple(model.genres or ()),
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
