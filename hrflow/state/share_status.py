"""Per-item status for asynchronous share actions."""

from __future__ import annotations

import enum
from typing import Hashable, Iterator


class ShareStatus(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SHARED = "shared"


class ShareEvent(enum.Enum):
    START = "start"
    SUCCEED = "succeed"
    FAIL = "fail"
    RESET = "reset"


_TRANSITIONS: dict[tuple[ShareStatus, ShareEvent], ShareStatus] = {
    (ShareStatus.IDLE, ShareEvent.START): ShareStatus.LOADING,
    (ShareStatus.LOADING, ShareEvent.SUCCEED): ShareStatus.SHARED,
    (ShareStatus.LOADING, ShareEvent.FAIL): ShareStatus.IDLE,
}


def transition(current: ShareStatus, event: ShareEvent) -> ShareStatus:
    """Return the status that follows ``current`` after ``event``.

    ``RESET`` is accepted from any status. Anything not listed in the
    transition table raises ``ValueError``.
    """
    if event is ShareEvent.RESET:
        return ShareStatus.IDLE
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError as exc:
        raise ValueError(f"Cannot apply {event.value!r} to status {current.value!r}") from exc


class ShareStatusTracker:
    """Keyed store of :class:`ShareStatus`, one independent machine per item.

    Items without an entry are ``IDLE``. Entries are created lazily on the
    first action and dropped wholesale by :meth:`reset`.
    """

    def __init__(self) -> None:
        self._statuses: dict[Hashable, ShareStatus] = {}

    def status(self, item_id: Hashable) -> ShareStatus:
        return self._statuses.get(item_id, ShareStatus.IDLE)

    def begin(self, item_id: Hashable) -> bool:
        """Move ``item_id`` to ``LOADING``; return False if it is not idle."""
        # check and set with no call in between
        if self.status(item_id) is not ShareStatus.IDLE:
            return False
        self._apply(item_id, ShareEvent.START)
        return True

    def succeed(self, item_id: Hashable) -> None:
        self._apply(item_id, ShareEvent.SUCCEED)

    def fail(self, item_id: Hashable) -> None:
        self._apply(item_id, ShareEvent.FAIL)

    def reset(self) -> None:
        self._statuses.clear()

    def snapshot(self) -> dict[Hashable, ShareStatus]:
        return dict(self._statuses)

    def __len__(self) -> int:
        return len(self._statuses)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._statuses)

    def _apply(self, item_id: Hashable, event: ShareEvent) -> None:
        self._statuses[item_id] = transition(self.status(item_id), event)


__all__ = ["ShareEvent", "ShareStatus", "ShareStatusTracker", "transition"]
