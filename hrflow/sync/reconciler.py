"""Authoritative list refresh from the row store."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Generic, Sequence, TypeVar

from .. import notifications
from ..errors import HrflowError
from ..notifications import Notifier
from ..state.share_status import ShareStatusTracker
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


class RefreshMode(enum.Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"


@dataclass(slots=True)
class ListState(Generic[T]):
    """Locally held copy of a remote list plus its indicator flags."""

    items: list[T] = field(default_factory=list)
    loading: bool = False
    refreshing: bool = False
    error: str | None = None


class ListReconciler(Generic[T]):
    """Replaces ``state.items`` with a fresh fetch.

    The fetch result always replaces the local list; there is no incremental
    merge. A failed fetch leaves the previous items in place.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Sequence[T]],
        state: ListState[T],
        notifier: Notifier,
        *,
        tracker: ShareStatusTracker | None = None,
        fallback_message: str = "Unable to load data. Please try again later.",
    ) -> None:
        self._name = name
        self._fetch = fetch
        self._state = state
        self._notifier = notifier
        self._tracker = tracker
        self._fallback_message = fallback_message

    @property
    def state(self) -> ListState[T]:
        return self._state

    def refresh(
        self,
        mode: RefreshMode = RefreshMode.FOREGROUND,
        *,
        show_indicator: bool = True,
    ) -> bool:
        """Refetch the list; return True when the local copy was replaced.

        Foreground mode drives ``state.loading``. Background mode never
        touches it and drives ``state.refreshing`` unless ``show_indicator``
        is False.
        """
        state = self._state
        background = mode is RefreshMode.BACKGROUND
        if background:
            if show_indicator:
                state.refreshing = True
        else:
            state.loading = True

        try:
            fetched = list(self._fetch())
        except HrflowError as exc:
            message = exc.message or self._fallback_message
            state.error = message
            LOGGER.warning(
                "List refresh failed; keeping previous items",
                extra={
                    "event": "sync.refresh_failed",
                    "list": self._name,
                    "mode": mode.value,
                    "kept": len(state.items),
                },
            )
            notifications.error(self._notifier, message)
            return False
        finally:
            if background:
                if show_indicator:
                    state.refreshing = False
            else:
                state.loading = False

        state.items = fetched
        state.error = None
        if self._tracker is not None:
            self._tracker.reset()
        LOGGER.info(
            "List refreshed",
            extra={"event": "sync.refreshed", "list": self._name, "mode": mode.value, "count": len(fetched)},
        )
        return True


__all__ = ["ListReconciler", "ListState", "RefreshMode"]
