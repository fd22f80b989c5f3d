"""Unit tests for the optimistic list reducer and store."""

from unittest.mock import MagicMock

import pytest

from entries.domain.value_objects import EntryStatus
from listview.state import (
    ConfirmEntry,
    DeleteEntry,
    ListState,
    OptimisticListStore,
    RestoreEntry,
    UpdateEntry,
    reduce,
)
from tests.unit.conftest import make_entry

ENTRIES = (
    make_entry(3, title="Emma", minutes=30),
    make_entry(2, title="Dune", minutes=20),
    make_entry(1, title="Akira", minutes=10),
)


@pytest.fixture
def state() -> ListState:
    return ListState.from_server(ENTRIES)


class TestReduce:
    def test_delete_removes_visible_entry_only(self, state):
        result = reduce(state, DeleteEntry(2))

        assert [e.id for e in result.entries] == [3, 1]
        assert result.snapshot == ENTRIES

    def test_delete_unknown_id_is_noop(self, state):
        assert reduce(state, DeleteEntry(99)) is state

    def test_restore_puts_entry_back_in_recency_order(self, state):
        deleted = reduce(reduce(state, DeleteEntry(2)), DeleteEntry(3))

        restored = reduce(deleted, RestoreEntry(2))

        assert [e.id for e in restored.entries] == [2, 1]

    def test_restore_visible_entry_is_noop(self, state):
        assert reduce(state, RestoreEntry(2)) is state

    def test_restore_unknown_id_is_noop(self, state):
        deleted = reduce(state, DeleteEntry(2))

        assert reduce(deleted, RestoreEntry(99)) is deleted

    def test_update_merges_changes(self, state):
        result = reduce(state, UpdateEntry(2, {"status": EntryStatus.COMPLETED}))

        assert result.find(2).status == EntryStatus.COMPLETED
        assert result.find(2).title == "Dune"
        assert [e.id for e in result.entries] == [3, 2, 1]

    def test_update_leaves_snapshot_untouched(self, state):
        result = reduce(state, UpdateEntry(2, {"rating": 4.0}))

        assert result.snapshot[1].rating is None

    def test_update_unknown_id_is_noop(self, state):
        assert reduce(state, UpdateEntry(99, {"rating": 4.0})) is state

    def test_restore_discards_unconfirmed_update(self, state):
        updated = reduce(state, UpdateEntry(2, {"rating": 4.0}))
        deleted = reduce(updated, DeleteEntry(2))

        restored = reduce(deleted, RestoreEntry(2))

        assert restored.find(2).rating is None

    def test_restore_keeps_confirmed_update(self, state):
        confirmed = make_entry(
            2, title="Dune", status=EntryStatus.COMPLETED, minutes=50
        )
        updated = reduce(state, ConfirmEntry(confirmed))
        deleted = reduce(updated, DeleteEntry(2))

        restored = reduce(deleted, RestoreEntry(2))

        assert restored.find(2) == confirmed
        assert [e.id for e in restored.entries] == [2, 3, 1]

    def test_confirm_replaces_visible_and_snapshot_entry(self, state):
        confirmed = make_entry(2, title="Dune", rating=5.0, minutes=20)

        result = reduce(state, ConfirmEntry(confirmed))

        assert result.find(2) == confirmed
        assert result.snapshot[1] == confirmed
        assert [e.id for e in result.entries] == [3, 2, 1]

    def test_confirm_updates_snapshot_of_hidden_entry(self, state):
        confirmed = make_entry(2, title="Dune", rating=5.0, minutes=20)
        deleted = reduce(state, DeleteEntry(2))

        result = reduce(deleted, ConfirmEntry(confirmed))

        assert result.find(2) is None
        assert result.snapshot[1] == confirmed

    def test_confirm_unknown_entry_is_noop(self, state):
        assert reduce(state, ConfirmEntry(make_entry(99))) is state

    def test_unknown_action(self, state):
        with pytest.raises(ValueError):
            reduce(state, "delete everything")

    def test_input_state_is_not_mutated(self, state):
        reduce(state, DeleteEntry(1))

        assert len(state.entries) == 3


class TestOptimisticListStore:
    def test_orders_initial_entries_by_recency(self):
        store = OptimisticListStore(reversed(ENTRIES))

        assert [e.id for e in store.entries] == [3, 2, 1]

    def test_notifies_only_on_change(self):
        store = OptimisticListStore(ENTRIES)
        listener = MagicMock()
        store.subscribe(listener)

        store.dispatch(DeleteEntry(99))
        store.dispatch(DeleteEntry(1))

        listener.assert_called_once_with(store.state)

    def test_unsubscribe(self):
        store = OptimisticListStore(ENTRIES)
        listener = MagicMock()
        unsubscribe = store.subscribe(listener)

        unsubscribe()
        store.dispatch(DeleteEntry(1))

        listener.assert_not_called()

    def test_failed_delete_restores_entry(self):
        store = OptimisticListStore(ENTRIES)

        store.begin_delete(2)
        assert store.pending_deletes == {2}
        store.settle_delete(2, succeeded=False)

        assert [e.id for e in store.entries] == [3, 2, 1]
        assert store.pending_deletes == frozenset()

    def test_successful_delete_stays_removed(self):
        store = OptimisticListStore(ENTRIES)

        store.begin_delete(2)
        store.settle_delete(2, succeeded=True)

        assert [e.id for e in store.entries] == [3, 1]

    def test_refresh_keeps_pending_delete_hidden(self):
        store = OptimisticListStore(ENTRIES)
        store.begin_delete(2)

        # server data fetched before the delete landed still has entry 2
        store.refresh(ENTRIES)

        assert [e.id for e in store.entries] == [3, 1]
        assert [e.id for e in store.state.snapshot] == [3, 2, 1]

    def test_refresh_after_settle_shows_server_truth(self):
        store = OptimisticListStore(ENTRIES)
        store.begin_delete(2)
        store.settle_delete(2, succeeded=True)

        store.refresh([make_entry(4, minutes=40), *ENTRIES])

        assert [e.id for e in store.entries] == [4, 3, 2, 1]
