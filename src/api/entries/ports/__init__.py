"""Ports for the Entries bounded context."""

from entries.ports.repositories import IEntryRepository
from entries.ports.revalidation import IListRevalidator

__all__ = [
    "IEntryRepository",
    "IListRevalidator",
]
