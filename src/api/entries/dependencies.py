"""FastAPI dependency providers for the Entries bounded context."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from entries.application.observability import (
    DefaultEntryServiceProbe,
    EntryServiceProbe,
)
from entries.application.services import EntryCommandService
from entries.infrastructure.entry_repository import EntryRepository
from entries.infrastructure.revisions import InMemoryListRevisions
from entries.ports.revalidation import IListRevalidator
from identity.application.value_objects import CurrentUser
from identity.dependencies import get_current_user
from infrastructure.database.dependencies import get_write_session
from shared_kernel.observability_context import ObservationContext

REQUEST_ID_HEADER = "X-Request-ID"


@lru_cache
def get_list_revalidator() -> IListRevalidator:
    """Get the process-wide list revision registry."""
    return InMemoryListRevisions()


def get_entry_service_probe(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> EntryServiceProbe:
    """Get an EntryServiceProbe bound to the request and caller."""
    context = ObservationContext(
        request_id=request.headers.get(REQUEST_ID_HEADER),
        user_id=current_user.user_id,
    )
    return DefaultEntryServiceProbe().with_context(context)


def get_entry_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> EntryRepository:
    """Get EntryRepository instance.

    Args:
        session: Async database session
    """
    return EntryRepository(session=session)


def get_entry_service(
    entry_repository: Annotated[EntryRepository, Depends(get_entry_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    revalidator: Annotated[IListRevalidator, Depends(get_list_revalidator)],
    probe: Annotated[EntryServiceProbe, Depends(get_entry_service_probe)],
) -> EntryCommandService:
    """Get EntryCommandService instance.

    Args:
        entry_repository: Entry repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        revalidator: List revision registry
        probe: Service probe bound to the request context
    """
    return EntryCommandService(
        entry_repository=entry_repository,
        session=session,
        revalidator=revalidator,
        probe=probe,
    )
