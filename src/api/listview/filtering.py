"""Filtering and sorting of a visible entry list.

``apply_filters`` is pure and never mutates its input; ``FilteredView``
memoizes it and only notifies subscribers when the derived list changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Callable, Iterable

from entries.domain.aggregates import Entry
from entries.domain.value_objects import Category, EntryStatus

HIGH_RATING_THRESHOLD = 4.0


class RatingBucket(StrEnum):
    ALL = "all"
    RATED = "rated"
    UNRATED = "unrated"
    HIGH = "high"


class SortKey(StrEnum):
    RECENT = "recent"
    TITLE = "title"
    RATING = "rating"
    STATUS = "status"
    CATEGORY = "category"


@dataclass(frozen=True)
class FilterCriteria:
    """What the user asked to see.

    ``None`` for status or category means "all". Genres match if the entry
    carries any of the selected ones.
    """

    search: str = ""
    status: EntryStatus | None = None
    category: Category | None = None
    genres: frozenset[str] = field(default_factory=frozenset)
    rating: RatingBucket = RatingBucket.ALL
    sort: SortKey = SortKey.RECENT

    @property
    def is_active(self) -> bool:
        """True when anything differs from the defaults."""
        return self != FilterCriteria()

    def cleared(self) -> FilterCriteria:
        return FilterCriteria()

    def toggle_genre(self, genre: str) -> FilterCriteria:
        """Select the genre, or deselect it if already selected."""
        return replace(self, genres=self.genres ^ {genre})

    def matches(self, entry: Entry) -> bool:
        """Whether the entry passes every filter."""
        needle = self.search.strip().casefold()
        if needle and needle not in entry.title.casefold():
            return False
        if self.status is not None and entry.status != self.status:
            return False
        if self.category is not None and entry.category != self.category:
            return False
        if self.genres and self.genres.isdisjoint(entry.genres):
            return False
        return _in_rating_bucket(entry, self.rating)


def _in_rating_bucket(entry: Entry, bucket: RatingBucket) -> bool:
    # 0 is a real rating, so rated/unrated test for presence only
    if bucket == RatingBucket.RATED:
        return entry.rating is not None
    if bucket == RatingBucket.UNRATED:
        return entry.rating is None
    if bucket == RatingBucket.HIGH:
        return entry.rating is not None and entry.rating >= HIGH_RATING_THRESHOLD
    return True


def _sorted(entries: list[Entry], key: SortKey) -> list[Entry]:
    if key == SortKey.TITLE:
        return sorted(entries, key=lambda e: e.title.casefold())
    if key == SortKey.RATING:
        return sorted(entries, key=lambda e: e.rating or 0.0, reverse=True)
    if key == SortKey.STATUS:
        return sorted(entries, key=lambda e: e.status.value)
    if key == SortKey.CATEGORY:
        return sorted(entries, key=lambda e: e.category.value)
    return sorted(entries, key=lambda e: e.updated_at, reverse=True)


def apply_filters(
    entries: Iterable[Entry], criteria: FilterCriteria
) -> tuple[Entry, ...]:
    """Filter then stable-sort the entries.

    Entries that compare equal under the sort key keep their input order.
    """
    kept = [entry for entry in entries if criteria.matches(entry)]
    return tuple(_sorted(kept, criteria.sort))


def available_genres(entries: Iterable[Entry]) -> list[str]:
    """Distinct genres across the entries, sorted alphabetically."""
    return sorted({genre for entry in entries for genre in entry.genres})


class FilteredView:
    """Memoized ``apply_filters`` over changing inputs."""

    def __init__(
        self,
        entries: Iterable[Entry] = (),
        criteria: FilterCriteria | None = None,
    ):
        self._entries = tuple(entries)
        self._criteria = criteria or FilterCriteria()
        self._result = apply_filters(self._entries, self._criteria)
        self._listeners: list[Callable[[tuple[Entry, ...]], None]] = []
        self.computations = 1

    @property
    def result(self) -> tuple[Entry, ...]:
        return self._result

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def subscribe(
        self, listener: Callable[[tuple[Entry, ...]], None]
    ) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_entries(self, entries: Iterable[Entry]) -> tuple[Entry, ...]:
        return self._update(tuple(entries), self._criteria)

    def set_criteria(self, criteria: FilterCriteria) -> tuple[Entry, ...]:
        return self._update(self._entries, criteria)

    def _update(
        self, entries: tuple[Entry, ...], criteria: FilterCriteria
    ) -> tuple[Entry, ...]:
        if entries == self._entries and criteria == self._criteria:
            return self._result

        self._entries = entries
        self._criteria = criteria
        result = apply_filters(entries, criteria)
        self.computations += 1
        if result != self._result:
            self._result = result
            for listener in list(self._listeners):
                listener(result)
        return self._result
