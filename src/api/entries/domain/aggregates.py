"""Entry aggregate and its input/output companions.

``Entry`` is the persisted reading-list item. ``EntryDraft`` and
``EntryUpdate`` are the validated inputs for creation and partial update,
``ReadingStats`` is the derived per-owner summary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable

from entries.domain.exceptions import EntryValidationError
from entries.domain.value_objects import (
    UNSET,
    Category,
    EntryStatus,
    _Unset,
    normalize_genres,
    normalize_optional_text,
    normalize_title,
    validate_rating,
)


@dataclass(frozen=True)
class Entry:
    """A reading-list item owned by exactly one user.

    ``owner_id`` is the identity provider's subject identifier of the owner.
    ``genres`` is stored as a tuple so entries compare and hash structurally.
    """

    id: int
    owner_id: str
    title: str
    category: Category
    status: EntryStatus
    image_url: str | None
    rating: float | None
    genres: tuple[str, ...]
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_rated(self) -> bool:
        """Whether the entry carries a rating (0 counts as a rating)."""
        return self.rating is not None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "category": self.category.value,
            "status": self.status.value,
            "image_url": self.image_url,
            "rating": self.rating,
            "genres": list(self.genres),
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entry:
        """Rebuild an entry from its ``to_dict`` representation."""
        rating = data.get("rating")
        return cls(
            id=int(data["id"]),
            owner_id=str(data["owner_id"]),
            title=str(data["title"]),
            category=Category(data["category"]),
            status=EntryStatus(data["status"]),
            image_url=data.get("image_url"),
            rating=float(rating) if rating is not None else None,
            genres=tuple(data.get("genres") or ()),
            notes=data.get("notes"),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


@dataclass(frozen=True)
class EntryDraft:
    """Validated input for creating an entry.

    Build through ``EntryDraft.create`` so that title, rating and genres are
    normalized and checked before anything reaches the store.
    """

    owner_id: str
    title: str
    category: Category = Category.BOOK
    status: EntryStatus = EntryStatus.WANT_TO_READ
    image_url: str | None = None
    rating: float | None = None
    genres: tuple[str, ...] = ()
    notes: str | None = None

    @classmethod
    def create(
        cls,
        owner_id: str,
        title: str | None,
        category: Category | None = None,
        status: EntryStatus | None = None,
        image_url: str | None = None,
        rating: float | None = None,
        genres: Iterable[str] | None = None,
        notes: str | None = None,
    ) -> EntryDraft:
        """Normalize and validate creation input.

        Raises:
            EntryValidationError: If the title is blank or the rating out of range
        """
        return cls(
            owner_id=owner_id,
            title=normalize_title(title),
            category=category or Category.BOOK,
            status=status or EntryStatus.WANT_TO_READ,
            image_url=normalize_optional_text(image_url),
            rating=validate_rating(rating),
            genres=normalize_genres(genres),
            notes=normalize_optional_text(notes),
        )


@dataclass(frozen=True)
class EntryUpdate:
    """Partial update where every field is individually optional.

    A field left as ``UNSET`` is not touched. For the nullable fields
    (image_url, rating, notes) an explicit ``None`` clears the value.
    """

    title: str | _Unset = UNSET
    category: Category | _Unset = UNSET
    status: EntryStatus | _Unset = UNSET
    image_url: str | None | _Unset = UNSET
    rating: float | None | _Unset = UNSET
    genres: tuple[str, ...] | list[str] | _Unset = UNSET
    notes: str | None | _Unset = UNSET

    @property
    def is_empty(self) -> bool:
        """True when no field is set."""
        return not self.provided_fields()

    def provided_fields(self) -> dict[str, Any]:
        """Return the raw values of the fields that were set."""
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("category", self.category),
                ("status", self.status),
                ("image_url", self.image_url),
                ("rating", self.rating),
                ("genres", self.genres),
                ("notes", self.notes),
            )
            if not isinstance(value, _Unset)
        }

    def changes(self) -> dict[str, Any]:
        """Return the validated, normalized changes keyed by entry field.

        Raises:
            EntryValidationError: If a provided title is blank or a rating out of range
        """
        result: dict[str, Any] = {}
        for name, value in self.provided_fields().items():
            if name == "title":
                result[name] = normalize_title(value)
            elif name == "rating":
                result[name] = validate_rating(value)
            elif name == "genres":
                result[name] = normalize_genres(value)
            elif name in ("image_url", "notes"):
                result[name] = normalize_optional_text(value)
            elif value is None:
                raise EntryValidationError(f"{name.capitalize()} cannot be cleared")
            else:
                result[name] = value
        return result

    def apply_to(self, entry: Entry) -> Entry:
        """Merge the changes into an entry without touching its timestamps."""
        return replace(entry, **self.changes())


@dataclass(frozen=True)
class OwnerProfile:
    """Read-only view of the user who owns an entry."""

    external_id: str
    name: str
    email: str
    first_name: str
    last_name: str
    photo: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "external_id": self.external_id,
            "name": self.name,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "photo": self.photo,
        }


@dataclass(frozen=True)
class EntryWithOwner:
    """An entry together with its owning user."""

    entry: Entry
    owner: OwnerProfile

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation (entry fields plus ``user``)."""
        return {**self.entry.to_dict(), "user": self.owner.to_dict()}


@dataclass(frozen=True)
class ReadingStats:
    """Aggregate reading statistics for one owner."""

    total: int = 0
    want_to_read: int = 0
    currently_reading: int = 0
    completed: int = 0
    dnf: int = 0
    on_hold: int = 0
    rated_entries: int = 0
    average_rating: float = 0.0

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> ReadingStats:
        """Derive statistics from an owner's entries.

        The average covers rated entries only and is 0.0 when nothing is rated.
        """
        entries = list(entries)
        counts = {status: 0 for status in EntryStatus}
        for entry in entries:
            counts[entry.status] += 1

        ratings = [entry.rating for entry in entries if entry.rating is not None]
        average = sum(ratings) / len(ratings) if ratings else 0.0

        return cls(
            total=len(entries),
            want_to_read=counts[EntryStatus.WANT_TO_READ],
            currently_reading=counts[EntryStatus.CURRENTLY_READING],
            completed=counts[EntryStatus.COMPLETED],
            dnf=counts[EntryStatus.DNF],
            on_hold=counts[EntryStatus.ON_HOLD],
            rated_entries=len(ratings),
            average_rating=average,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "total": self.total,
            "want_to_read": self.want_to_read,
            "currently_reading": self.currently_reading,
            "completed": self.completed,
            "dnf": self.dnf,
            "on_hold": self.on_hold,
            "rated_entries": self.rated_entries,
            "average_rating": self.average_rating,
        }
