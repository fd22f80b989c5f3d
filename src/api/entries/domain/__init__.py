"""Entries domain module.

Contains the Entry aggregate, its inputs and the derived reading statistics.
"""

from entries.domain.aggregates import (
    Entry,
    EntryDraft,
    EntryUpdate,
    EntryWithOwner,
    OwnerProfile,
    ReadingStats,
)
from entries.domain.exceptions import EntryValidationError
from entries.domain.value_objects import UNSET, Category, EntryStatus

__all__ = [
    "UNSET",
    "Category",
    "Entry",
    "EntryDraft",
    "EntryStatus",
    "EntryUpdate",
    "EntryValidationError",
    "EntryWithOwner",
    "OwnerProfile",
    "ReadingStats",
]
