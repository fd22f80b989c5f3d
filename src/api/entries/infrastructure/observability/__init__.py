"""Domain-Oriented Observability for Entries infrastructure."""

from entries.infrastructure.observability.repository_probe import (
    DefaultEntryRepositoryProbe,
    EntryRepositoryProbe,
)

__all__ = [
    "EntryRepositoryProbe",
    "DefaultEntryRepositoryProbe",
]
