"""User notices raised by optimistic mutations.

The UI toast widget is outside this package; ``Notifier`` is the seam it
plugs into. ``LoggingNotifier`` is the default and only logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Protocol, runtime_checkable

import structlog


class NoticeKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class NoticeAction:
    """A button offered with a notice, e.g. "Undo"."""

    label: str
    on_click: Callable[[], None]


@runtime_checkable
class Notifier(Protocol):
    """Shows short notices to the user."""

    def notify(
        self,
        kind: NoticeKind,
        message: str,
        description: str | None = None,
        action: NoticeAction | None = None,
    ) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes notices to the structured log."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def notify(
        self,
        kind: NoticeKind,
        message: str,
        description: str | None = None,
        action: NoticeAction | None = None,
    ) -> None:
        log = self._logger.warning if kind == NoticeKind.ERROR else self._logger.info
        log(
            "user_notice",
            kind=str(kind),
            notice=message,
            description=description,
            action=action.label if action else None,
        )
