"""HTTP client for the entry routes.

Turns the JSON envelope back into ``CommandResult`` values so list state
code can treat local and remote commands alike. Transport errors
(``httpx.HTTPError``) are raised to the caller.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx

from entries.domain.aggregates import Entry
from entries.domain.value_objects import Category, EntryStatus
from shared_kernel.command_result import CommandResult, FailureKind


def _failure_kind(status_code: int) -> FailureKind:
    if status_code == httpx.codes.BAD_REQUEST:
        return FailureKind.VALIDATION
    if status_code == httpx.codes.NOT_FOUND:
        return FailureKind.NOT_FOUND
    return FailureKind.INTERNAL


def _parse_entries(data: Any) -> list[Entry]:
    return [Entry.from_dict(item) for item in data or []]


class EntryApiClient:
    """Calls the entry routes through a configured ``httpx.AsyncClient``.

    The client is expected to carry the base URL and the session's
    Authorization header. List responses are cached per filter and
    revalidated with If-None-Match.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client
        self._list_cache: dict[tuple[str, str], tuple[str, list[Entry]]] = {}

    async def list_entries(
        self,
        status: EntryStatus | None = None,
        category: Category | None = None,
    ) -> CommandResult[list[Entry]]:
        """Fetch the caller's entries, reusing the cached list on 304."""
        params: dict[str, str] = {}
        if status is not None:
            params["status"] = status.value
        if category is not None:
            params["category"] = category.value
        cache_key = (params.get("status", ""), params.get("category", ""))

        headers: dict[str, str] = {}
        cached = self._list_cache.get(cache_key)
        if cached is not None:
            headers["If-None-Match"] = cached[0]

        response = await self._client.get("/entries", params=params, headers=headers)
        if response.status_code == httpx.codes.NOT_MODIFIED and cached is not None:
            return CommandResult.ok(list(cached[1]))

        result = self._to_result(response, _parse_entries)
        etag = response.headers.get("ETag")
        if result.success and etag:
            self._list_cache[cache_key] = (etag, list(result.data or []))
        return result

    async def delete_entry(self, entry_id: int) -> CommandResult[Entry]:
        response = await self._client.delete(f"/entries/{entry_id}")
        return self._to_result(response, Entry.from_dict)

    async def update_status(
        self, entry_id: int, status: EntryStatus
    ) -> CommandResult[Entry]:
        response = await self._client.put(
            f"/entries/{entry_id}/status", json={"status": status.value}
        )
        return self._to_result(response, Entry.from_dict)

    @staticmethod
    def _to_result(
        response: httpx.Response, parse: Callable[[Any], Any]
    ) -> CommandResult:
        try:
            envelope = response.json()
        except ValueError:
            return CommandResult.fail(
                FailureKind.INTERNAL,
                f"Unexpected response ({response.status_code})",
            )
        if not isinstance(envelope, dict) or "success" not in envelope:
            return CommandResult.fail(
                _failure_kind(response.status_code),
                f"Unexpected response ({response.status_code})",
            )
        return CommandResult.from_envelope(
            envelope, parse=parse, kind=_failure_kind(response.status_code)
        )
