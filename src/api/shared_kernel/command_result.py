"""Uniform result envelope for command operations.

Every command operation returns a ``CommandResult`` instead of raising:
either a success carrying data, or a failure carrying a human-readable
message and a failure kind. Callers branch on ``success``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class FailureKind(StrEnum):
    """Why a command failed.

    VALIDATION: input rejected before any store access.
    NOT_FOUND: the owner-scoped row does not exist (or belongs to someone else).
    INTERNAL: the store or another collaborator failed unexpectedly.
    """

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


@dataclass(frozen=True)
class CommandResult(Generic[T]):
    """Outcome of a command: ``success`` with ``data``, or ``error`` with ``kind``."""

    success: bool
    data: T | None = None
    error: str | None = None
    kind: FailureKind | None = None

    @classmethod
    def ok(cls, data: T) -> CommandResult[T]:
        """Build a success outcome."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: FailureKind, error: str) -> CommandResult[T]:
        """Build a failure outcome."""
        return cls(success=False, error=error, kind=kind)

    def to_envelope(
        self, serialize: Callable[[T], Any] | None = None
    ) -> dict[str, Any]:
        """Render the wire envelope ``{success, data}`` / ``{success, error}``.

        Args:
            serialize: Optional converter applied to ``data`` on success
        """
        if not self.success:
            return {"success": False, "error": self.error}
        data = self.data
        if serialize is not None and data is not None:
            return {"success": True, "data": serialize(data)}
        return {"success": True, "data": data}

    @classmethod
    def from_envelope(
        cls,
        envelope: dict[str, Any],
        parse: Callable[[Any], T] | None = None,
        kind: FailureKind = FailureKind.INTERNAL,
    ) -> CommandResult[T]:
        """Rebuild a result from a wire envelope.

        The envelope does not carry the failure kind, so the caller supplies
        it (usually derived from the HTTP status).
        """
        if envelope.get("success"):
            data = envelope.get("data")
            return cls.ok(parse(data) if parse is not None else data)
        return cls.fail(kind, str(envelope.get("error") or "Request failed"))
