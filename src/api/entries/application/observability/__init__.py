"""Domain-Oriented Observability for the Entries application layer."""

from entries.application.observability.entry_service_probe import (
    DefaultEntryServiceProbe,
    EntryServiceProbe,
)

__all__ = [
    "EntryServiceProbe",
    "DefaultEntryServiceProbe",
]
