"""Client-side list behaviour for the reading list.

Optimistic list state, its reconciliation with the server, and the
filter/sort engine applied to the visible entries.
"""

from listview.api_client import EntryApiClient
from listview.filtering import (
    FilterCriteria,
    FilteredView,
    RatingBucket,
    SortKey,
    apply_filters,
    available_genres,
)
from listview.mutations import OptimisticMutationHandler
from listview.notifications import LoggingNotifier, NoticeAction, NoticeKind, Notifier
from listview.state import (
    ConfirmEntry,
    DeleteEntry,
    ListState,
    OptimisticListStore,
    RestoreEntry,
    UpdateEntry,
    reduce,
)

__all__ = [
    "ConfirmEntry",
    "DeleteEntry",
    "EntryApiClient",
    "FilterCriteria",
    "FilteredView",
    "ListState",
    "LoggingNotifier",
    "NoticeAction",
    "NoticeKind",
    "Notifier",
    "OptimisticListStore",
    "OptimisticMutationHandler",
    "RatingBucket",
    "RestoreEntry",
    "SortKey",
    "UpdateEntry",
    "apply_filters",
    "available_genres",
    "reduce",
]
