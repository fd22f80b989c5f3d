"""Infrastructure adapters for the Entries bounded context."""

from entries.infrastructure.entry_repository import EntryRepository
from entries.infrastructure.revisions import InMemoryListRevisions

__all__ = [
    "EntryRepository",
    "InMemoryListRevisions",
]
