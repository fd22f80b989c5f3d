"""Port for signalling that rendered entry lists are stale."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IListRevalidator(Protocol):
    """Tracks a per-owner revision of the entry list.

    Mutating commands call ``invalidate``; readers compare ``revision``
    against what they rendered earlier to decide whether it is still valid.
    """

    def invalidate(self, owner_id: str) -> int:
        """Mark the owner's list as changed.

        Returns:
            The owner's new revision number
        """
        ...

    def revision(self, owner_id: str) -> int:
        """Return the owner's current revision number (0 if never changed)."""
        ...
