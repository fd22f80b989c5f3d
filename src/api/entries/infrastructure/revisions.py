"""In-process implementation of IListRevalidator.

Revisions live in process memory. With several workers a worker that missed
an invalidation can answer 304 to a stale ETag, so multi-worker deployments
need a shared IListRevalidator.
"""

from __future__ import annotations

import threading

from entries.ports.revalidation import IListRevalidator


class InMemoryListRevisions(IListRevalidator):
    """Thread-safe per-owner revision counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._revisions: dict[str, int] = {}

    def invalidate(self, owner_id: str) -> int:
        with self._lock:
            revision = self._revisions.get(owner_id, 0) + 1
            self._revisions[owner_id] = revision
            return revision

    def revision(self, owner_id: str) -> int:
        with self._lock:
            return self._revisions.get(owner_id, 0)
