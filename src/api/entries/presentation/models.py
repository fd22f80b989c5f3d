"""Pydantic models for entry API requests.

Range and blank-title checks are left to the command service so every
client sees the same failure messages; these models only check shapes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from entries.domain.aggregates import EntryUpdate
from entries.domain.value_objects import Category, EntryStatus


class CreateEntryRequest(BaseModel):
    """Request model for creating an entry."""

    title: str | None = Field(default=None, description="Entry title")
    category: Category | None = Field(default=None, description="Format (default Book)")
    status: EntryStatus | None = Field(
        default=None, description="Reading status (default Want to Read)"
    )
    image_url: str | None = Field(default=None, description="Cover image URL")
    rating: float | None = Field(default=None, description="Rating from 0 to 5")
    genres: list[str] = Field(default_factory=list, description="Genre tags")
    notes: str | None = Field(default=None, description="Free-form notes")


class UpdateEntryRequest(BaseModel):
    """Request model for a partial entry update.

    Only the fields present in the request body are changed; an explicit
    null clears image_url, rating or notes.
    """

    title: str | None = None
    category: Category | None = None
    status: EntryStatus | None = None
    image_url: str | None = None
    rating: float | None = None
    genres: list[str] | None = None
    notes: str | None = None

    def to_domain(self) -> EntryUpdate:
        """Convert the fields present in the body to an EntryUpdate."""
        values = {name: getattr(self, name) for name in self.model_fields_set}
        if values.get("genres", ()) is None:
            values["genres"] = ()
        return EntryUpdate(**values)


class UpdateStatusRequest(BaseModel):
    """Request model for changing an entry's status."""

    status: EntryStatus = Field(..., description="New reading status")


class UpdateRatingRequest(BaseModel):
    """Request model for changing an entry's rating (null clears it)."""

    rating: float | None = Field(..., description="Rating from 0 to 5")


class BulkStatusRequest(BaseModel):
    """Request model for setting the status of several entries."""

    ids: list[int] = Field(default_factory=list, description="Entry ids")
    status: EntryStatus = Field(..., description="New reading status")


class BulkDeleteRequest(BaseModel):
    """Request model for deleting several entries."""

    ids: list[int] = Field(default_factory=list, description="Entry ids")
