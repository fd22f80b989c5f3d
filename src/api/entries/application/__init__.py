"""Application layer for the Entries bounded context."""

from entries.application.services import EntryCommandService

__all__ = ["EntryCommandService"]
