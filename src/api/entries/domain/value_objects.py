"""Value objects for the Entries domain.

Enumerations and validation helpers for the fields of a reading-list entry.
"""

from __future__ import annotations

import math
from enum import Enum, StrEnum
from typing import Iterable

from entries.domain.exceptions import EntryValidationError

RATING_MIN = 0.0
RATING_MAX = 5.0

TITLE_REQUIRED_MESSAGE = "Title is required"
RATING_RANGE_MESSAGE = "Rating must be between 0 and 5"


class Category(StrEnum):
    """Format of a reading-list entry."""

    BOOK = "Book"
    AUDIOBOOK = "Audiobook"
    EBOOK = "Ebook"
    GRAPHIC_NOVEL = "Graphic Novel"
    MANGA = "Manga"


class EntryStatus(StrEnum):
    """Where the owner is with an entry."""

    WANT_TO_READ = "Want to Read"
    CURRENTLY_READING = "Currently Reading"
    COMPLETED = "Completed"
    DNF = "DNF"
    ON_HOLD = "On Hold"


class _Unset(Enum):
    """Sentinel type for "field not provided" in partial updates."""

    TOKEN = 0

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset.TOKEN


def normalize_title(title: str | None) -> str:
    """Trim a title and reject blank values.

    Raises:
        EntryValidationError: If the title is missing or blank
    """
    if title is None or not title.strip():
        raise EntryValidationError(TITLE_REQUIRED_MESSAGE)
    return title.strip()


def validate_rating(rating: float | None) -> float | None:
    """Check that a rating lies in [0, 5]; ``None`` means unrated.

    Raises:
        EntryValidationError: If the rating is out of range or not a number
    """
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise EntryValidationError(RATING_RANGE_MESSAGE)
    if math.isnan(rating) or not (RATING_MIN <= rating <= RATING_MAX):
        raise EntryValidationError(RATING_RANGE_MESSAGE)
    return float(rating)


def normalize_genres(genres: Iterable[str] | None) -> tuple[str, ...]:
    """Trim genre tags, dropping blanks and repeats while keeping first-seen order."""
    if not genres:
        return ()
    seen: dict[str, None] = {}
    for genre in genres:
        tag = genre.strip()
        if tag and tag not in seen:
            seen[tag] = None
    return tuple(seen)


def normalize_optional_text(value: str | None) -> str | None:
    """Trim free text, mapping blank strings to ``None``."""
    if value is None:
        return None
    value = value.strip()
    return value or None
