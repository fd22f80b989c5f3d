"""HTTP routes for the Entries bounded context.

Bodies are the command envelope ``{"success": true, "data": ...}`` or
``{"success": false, "error": "..."}``; the status code mirrors the
failure kind.
"""

from __future__ import annotations

import hashlib
import uuid
from typing import Annotated, Any, Callable

from fastapi import APIRouter, Depends, Header, Query, Response, status
from fastapi.responses import JSONResponse

from entries.application.services import EntryCommandService
from entries.dependencies import get_entry_service, get_list_revalidator
from entries.domain.aggregates import Entry
from entries.domain.value_objects import Category, EntryStatus
from entries.ports.revalidation import IListRevalidator
from entries.presentation.models import (
    BulkDeleteRequest,
    BulkStatusRequest,
    CreateEntryRequest,
    UpdateEntryRequest,
    UpdateRatingRequest,
    UpdateStatusRequest,
)
from identity.application.value_objects import CurrentUser
from identity.dependencies import get_current_user
from shared_kernel.command_result import CommandResult, FailureKind

# Distinguishes ETags issued by this process from those of a previous run,
# since revisions restart at zero.
_PROCESS_TOKEN = uuid.uuid4().hex[:8]

_FAILURE_STATUS = {
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_ENVELOPE_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Validation failure"},
    401: {"description": "Missing or invalid session token"},
    404: {"description": "Entry not found or owned by someone else"},
    500: {"description": "Store failure"},
}

router = APIRouter(
    prefix="/entries",
    tags=["entries"],
    dependencies=[Depends(get_current_user)],
)


def _entries_to_list(entries: list[Entry]) -> list[dict[str, Any]]:
    return [entry.to_dict() for entry in entries]


def _respond(
    result: CommandResult,
    serialize: Callable[[Any], Any],
    success_status: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render a command result as an envelope response."""
    if result.success:
        return JSONResponse(
            status_code=success_status,
            content=result.to_envelope(serialize),
            headers=headers,
        )
    return JSONResponse(
        status_code=_FAILURE_STATUS[result.kind or FailureKind.INTERNAL],
        content=result.to_envelope(),
    )


def list_etag(
    owner_id: str,
    revision: int,
    entry_status: EntryStatus | None,
    category: Category | None,
) -> str:
    """Weak ETag for one owner's list under one filter at one revision."""
    scope = f"{owner_id}|{entry_status or ''}|{category or ''}".encode()
    digest = hashlib.sha256(scope).hexdigest()[:16]
    return f'W/"{_PROCESS_TOKEN}-{revision}-{digest}"'


def _etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    candidates = [candidate.strip() for candidate in if_none_match.split(",")]
    opaque = etag.removeprefix("W/")
    return "*" in candidates or any(
        candidate.removeprefix("W/") == opaque for candidate in candidates
    )


@router.post(
    "",
    summary="Create an entry",
    responses=_ENVELOPE_RESPONSES,
)
async def create_entry(
    request: CreateEntryRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Create an entry owned by the caller; category and status have defaults."""
    result = await service.create(
        owner_id=current_user.user_id,
        title=request.title,
        category=request.category,
        status=request.status,
        image_url=request.image_url,
        rating=request.rating,
        genres=request.genres,
        notes=request.notes,
    )
    return _respond(result, Entry.to_dict, status.HTTP_201_CREATED)


@router.get(
    "",
    summary="List the caller's entries",
    description=(
        "Most recently updated first. Filter by status or category. "
        "Supports If-None-Match against the weak ETag of the previous response."
    ),
    responses={**_ENVELOPE_RESPONSES, 304: {"description": "List unchanged"}},
)
async def list_entries(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
    revalidator: Annotated[IListRevalidator, Depends(get_list_revalidator)],
    status_filter: Annotated[EntryStatus | None, Query(alias="status")] = None,
    category: Category | None = None,
    if_none_match: Annotated[str | None, Header()] = None,
) -> Response:
    """List entries, answering 304 when the caller's copy is still current."""
    owner_id = current_user.user_id
    etag = list_etag(owner_id, revalidator.revision(owner_id), status_filter, category)
    if _etag_matches(if_none_match, etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    if status_filter is not None:
        result = await service.list_by_status(owner_id, status_filter)
        if result.success and category is not None:
            result = CommandResult.ok(
                [entry for entry in result.data or [] if entry.category == category]
            )
    elif category is not None:
        result = await service.list_by_category(owner_id, category)
    else:
        result = await service.list_by_owner(owner_id)

    return _respond(result, _entries_to_list, headers={"ETag": etag})


@router.get(
    "/stats",
    summary="Reading statistics",
    responses=_ENVELOPE_RESPONSES,
)
async def get_stats(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Totals per status, rated count and average rating."""
    result = await service.compute_stats(current_user.user_id)
    return _respond(result, lambda stats: stats.to_dict())


@router.post(
    "/bulk/status",
    summary="Set the status of several entries",
    responses=_ENVELOPE_RESPONSES,
)
async def bulk_update_status(
    request: BulkStatusRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Ids owned by someone else are skipped; the body lists the updated entries."""
    result = await service.bulk_update_status(
        request.ids, current_user.user_id, request.status
    )
    return _respond(result, _entries_to_list)


@router.post(
    "/bulk/delete",
    summary="Delete several entries",
    responses=_ENVELOPE_RESPONSES,
)
async def bulk_delete(
    request: BulkDeleteRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Ids owned by someone else are skipped; the body lists the deleted entries."""
    result = await service.bulk_delete(request.ids, current_user.user_id)
    return _respond(result, _entries_to_list)


@router.get(
    "/{entry_id}",
    summary="Get one entry with its owner",
    responses=_ENVELOPE_RESPONSES,
)
async def get_entry(
    entry_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    result = await service.get_by_id(entry_id, current_user.user_id)
    return _respond(result, lambda found: found.to_dict())


@router.patch(
    "/{entry_id}",
    summary="Update fields of an entry",
    responses=_ENVELOPE_RESPONSES,
)
async def update_entry(
    entry_id: int,
    request: UpdateEntryRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Only fields present in the body change; updated_at is always refreshed."""
    result = await service.update(entry_id, current_user.user_id, request.to_domain())
    return _respond(result, Entry.to_dict)


@router.put(
    "/{entry_id}/status",
    summary="Change the status of an entry",
    responses=_ENVELOPE_RESPONSES,
)
async def update_entry_status(
    entry_id: int,
    request: UpdateStatusRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    result = await service.update_status(entry_id, current_user.user_id, request.status)
    return _respond(result, Entry.to_dict)


@router.put(
    "/{entry_id}/rating",
    summary="Change the rating of an entry",
    responses=_ENVELOPE_RESPONSES,
)
async def update_entry_rating(
    entry_id: int,
    request: UpdateRatingRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    result = await service.update_rating(entry_id, current_user.user_id, request.rating)
    return _respond(result, Entry.to_dict)


@router.delete(
    "/{entry_id}",
    summary="Delete an entry",
    responses=_ENVELOPE_RESPONSES,
)
async def delete_entry(
    entry_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[EntryCommandService, Depends(get_entry_service)],
) -> JSONResponse:
    """Physically delete an entry; the body carries the deleted entry."""
    result = await service.delete(entry_id, current_user.user_id)
    return _respond(result, Entry.to_dict)
