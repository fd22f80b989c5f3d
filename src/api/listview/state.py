"""Client-side list state with optimistic updates.

``reduce`` is a pure function over ``ListState``; ``OptimisticListStore``
holds the current state, notifies subscribers and reconciles refreshed
server data with deletes that are still in flight.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping

from entries.domain.aggregates import Entry


@dataclass(frozen=True)
class DeleteEntry:
    """Remove an entry from the visible list."""

    entry_id: int


@dataclass(frozen=True)
class RestoreEntry:
    """Put a removed entry back, taken from the last server snapshot."""

    entry_id: int


@dataclass(frozen=True)
class UpdateEntry:
    """Merge field changes into a visible entry."""

    entry_id: int
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfirmEntry:
    """Record an entry as the server returned it after a mutation."""

    entry: Entry


ListAction = DeleteEntry | RestoreEntry | UpdateEntry | ConfirmEntry


def by_recency(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Order entries most recently updated first (ties: higher id first)."""
    return tuple(
        sorted(entries, key=lambda entry: (entry.updated_at, entry.id), reverse=True)
    )


@dataclass(frozen=True)
class ListState:
    """Visible entries plus the last full collection received from the server.

    The snapshot is only read by ``RestoreEntry``. Optimistic changes never
    alter it; only changes the server confirmed (``ConfirmEntry``) do.
    """

    entries: tuple[Entry, ...] = ()
    snapshot: tuple[Entry, ...] = ()

    @classmethod
    def from_server(cls, entries: Iterable[Entry]) -> ListState:
        entries = tuple(entries)
        return cls(entries=entries, snapshot=entries)

    def find(self, entry_id: int) -> Entry | None:
        """Return the visible entry with the given id, if any."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


def reduce(state: ListState, action: ListAction) -> ListState:
    """Return the state after applying ``action``.

    Unknown ids leave the state unchanged.
    """
    match action:
        case DeleteEntry(entry_id=entry_id):
            remaining = tuple(e for e in state.entries if e.id != entry_id)
            if len(remaining) == len(state.entries):
                return state
            return replace(state, entries=remaining)

        case RestoreEntry(entry_id=entry_id):
            if state.find(entry_id) is not None:
                return state
            original = next((e for e in state.snapshot if e.id == entry_id), None)
            if original is None:
                return state
            return replace(state, entries=by_recency((*state.entries, original)))

        case UpdateEntry(entry_id=entry_id, changes=changes):
            if state.find(entry_id) is None or not changes:
                return state
            return replace(
                state,
                entries=tuple(
                    replace(e, **changes) if e.id == entry_id else e
                    for e in state.entries
                ),
            )

        case ConfirmEntry(entry=confirmed):
            if state.find(confirmed.id) is None and all(
                e.id != confirmed.id for e in state.snapshot
            ):
                return state
            return replace(
                state,
                entries=_replace_by_id(state.entries, confirmed),
                snapshot=_replace_by_id(state.snapshot, confirmed),
            )

    raise ValueError(f"Unknown list action: {action!r}")


def _replace_by_id(entries: tuple[Entry, ...], entry: Entry) -> tuple[Entry, ...]:
    return tuple(entry if e.id == entry.id else e for e in entries)


Listener = Callable[[ListState], None]


class OptimisticListStore:
    """Holds the list state and applies actions to it.

    Deletes are tracked from ``begin_delete`` until ``settle_delete``; while
    one is pending, ``refresh`` keeps the entry hidden even if the server
    data (fetched before the delete landed) still contains it.
    """

    def __init__(self, entries: Iterable[Entry] = ()):
        self._state = ListState.from_server(by_recency(entries))
        self._listeners: list[Listener] = []
        self._pending_deletes: set[int] = set()

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._state.entries

    @property
    def pending_deletes(self) -> frozenset[int]:
        return frozenset(self._pending_deletes)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: ListAction) -> ListState:
        """Apply an action and notify listeners if the state changed."""
        self._set_state(reduce(self._state, action))
        return self._state

    def begin_delete(self, entry_id: int) -> None:
        """Hide an entry while its server delete is in flight."""
        self._pending_deletes.add(entry_id)
        self.dispatch(DeleteEntry(entry_id))

    def settle_delete(self, entry_id: int, succeeded: bool) -> None:
        """Finish tracking a delete; a failed one brings the entry back."""
        self._pending_deletes.discard(entry_id)
        if not succeeded:
            self.dispatch(RestoreEntry(entry_id))

    def refresh(self, entries: Iterable[Entry]) -> ListState:
        """Replace the list with fresh server data.

        The full data becomes the new snapshot; entries with a pending
        delete stay hidden.
        """
        snapshot = by_recency(entries)
        visible = tuple(e for e in snapshot if e.id not in self._pending_deletes)
        self._set_state(ListState(entries=visible, snapshot=snapshot))
        return self._state

    def _set_state(self, state: ListState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
