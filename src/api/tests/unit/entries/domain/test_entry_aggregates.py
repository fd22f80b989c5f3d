"""Unit tests for the Entry aggregate and its companions."""

import pytest

from entries.domain.aggregates import (
    Entry,
    EntryDraft,
    EntryUpdate,
    EntryWithOwner,
    OwnerProfile,
    ReadingStats,
)
from entries.domain.exceptions import EntryValidationError
from entries.domain.value_objects import Category, EntryStatus
from tests.unit.conftest import OWNER_ID, make_entry


class TestEntryDraft:
    def test_defaults_category_and_status(self):
        draft = EntryDraft.create(owner_id=OWNER_ID, title="Dune")

        assert draft.category == Category.BOOK
        assert draft.status == EntryStatus.WANT_TO_READ
        assert draft.genres == ()
        assert draft.rating is None

    def test_normalizes_fields(self):
        draft = EntryDraft.create(
            owner_id=OWNER_ID,
            title="  Dune  ",
            image_url="  ",
            rating=4,
            genres=["Sci-Fi", " Sci-Fi", "Classic"],
            notes=" reread ",
        )

        assert draft.title == "Dune"
        assert draft.image_url is None
        assert draft.rating == 4.0
        assert draft.genres == ("Sci-Fi", "Classic")
        assert draft.notes == "reread"

    def test_blank_title_rejected(self):
        with pytest.raises(EntryValidationError, match="Title is required"):
            EntryDraft.create(owner_id=OWNER_ID, title="   ")

    def test_out_of_range_rating_rejected(self):
        with pytest.raises(EntryValidationError, match="between 0 and 5"):
            EntryDraft.create(owner_id=OWNER_ID, title="Dune", rating=6)


class TestEntryUpdate:
    def test_empty_update(self):
        update = EntryUpdate()

        assert update.is_empty
        assert update.changes() == {}

    def test_only_provided_fields_change(self):
        update = EntryUpdate(title=" Emma ", status=EntryStatus.COMPLETED)

        assert update.changes() == {"title": "Emma", "status": EntryStatus.COMPLETED}

    def test_explicit_none_clears_nullable_fields(self):
        update = EntryUpdate(rating=None, notes=None, image_url=None)

        assert update.changes() == {"rating": None, "notes": None, "image_url": None}

    def test_explicit_none_category_is_rejected(self):
        with pytest.raises(EntryValidationError, match="Category cannot be cleared"):
            EntryUpdate(category=None).changes()

    def test_invalid_rating_is_rejected(self):
        with pytest.raises(EntryValidationError):
            EntryUpdate(rating=-1).changes()

    def test_apply_to_keeps_timestamps(self):
        entry = make_entry(minutes=5)

        updated = EntryUpdate(rating=3.5, genres=["Horror"]).apply_to(entry)

        assert updated.rating == 3.5
        assert updated.genres == ("Horror",)
        assert updated.updated_at == entry.updated_at
        assert entry.rating is None


class TestEntrySerialization:
    def test_to_dict_and_back(self):
        entry = make_entry(rating=0.0, genres=("Fantasy", "Classic"))

        data = entry.to_dict()

        assert data["category"] == "Book"
        assert data["status"] == "Want to Read"
        assert data["genres"] == ["Fantasy", "Classic"]
        assert Entry.from_dict(data) == entry

    def test_entry_with_owner_nests_user(self):
        owner = OwnerProfile(
            external_id=OWNER_ID,
            name="alice",
            email="alice@example.com",
            first_name="Alice",
            last_name="Liddell",
            photo="",
        )

        data = EntryWithOwner(entry=make_entry(), owner=owner).to_dict()

        assert data["title"] == "Dune"
        assert data["user"]["external_id"] == OWNER_ID
        assert data["user"]["email"] == "alice@example.com"

    def test_zero_rating_counts_as_rated(self):
        assert make_entry(rating=0.0).is_rated
        assert not make_entry().is_rated


class TestReadingStats:
    def test_empty(self):
        stats = ReadingStats.from_entries([])

        assert stats == ReadingStats()
        assert stats.average_rating == 0.0

    def test_counts_statuses_and_averages_rated_only(self):
        entries = [
            make_entry(1, status=EntryStatus.COMPLETED, rating=4.0),
            make_entry(2, status=EntryStatus.COMPLETED, rating=0.0),
            make_entry(3, status=EntryStatus.CURRENTLY_READING),
            make_entry(4, status=EntryStatus.DNF, rating=2.0),
            make_entry(5, status=EntryStatus.ON_HOLD),
            make_entry(6),
        ]

        stats = ReadingStats.from_entries(entries)

        assert stats.total == 6
        assert stats.completed == 2
        assert stats.currently_reading == 1
        assert stats.dnf == 1
        assert stats.on_hold == 1
        assert stats.want_to_read == 1
        assert stats.rated_entries == 3
        assert stats.average_rating == pytest.approx(2.0)
        assert stats.to_dict()["rated_entries"] == 3
