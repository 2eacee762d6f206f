"""Resume-screening trigger and the AI-screened candidate list."""

from __future__ import annotations

import math
from typing import Iterable

from .. import notifications
from ..automation import WebhookClient, marker_payload
from ..datastore import RowStore
from ..errors import HrflowError
from ..notifications import Notifier
from ..settings import WebhookSettings
from ..sync import ListReconciler, ListState, RefreshMode
from ..utils.logging import get_logger
from .models import ScreeningResult

LOGGER = get_logger(__name__)

SCREENING_TABLE = "resume_screening_results"
TRIGGERED_MESSAGE = "Resume screening triggered successfully!"
REFRESHED_MESSAGE = "Resume screening refreshed successfully!"
LOAD_FAILED_MESSAGE = "Unable to load candidates. Please try again later."

DECISIONS = ("shortlisted", "kiv", "rejected")


class CandidateScreeningService:
    """Triggers the screening automation and keeps the candidate list current."""

    def __init__(
        self,
        webhook: WebhookClient,
        store: RowStore,
        notifier: Notifier,
        *,
        webhook_settings: WebhookSettings,
    ) -> None:
        self._webhook = webhook
        self._store = store
        self._notifier = notifier
        self._marker = webhook_settings.screening_marker

        self.candidates: ListState[ScreeningResult] = ListState()
        self.activating = False
        self._reconciler = ListReconciler(
            "candidates",
            self._fetch_candidates,
            self.candidates,
            notifier,
            fallback_message=LOAD_FAILED_MESSAGE,
        )

    def load(self, mode: RefreshMode = RefreshMode.FOREGROUND, *, show_indicator: bool = True) -> bool:
        return self._reconciler.refresh(mode, show_indicator=show_indicator)

    def trigger_screening(self) -> bool:
        """Ask the automation to screen new resumes.

        A second call while one is in flight does nothing and returns False.
        """
        if self.activating:
            return False
        self.activating = True
        try:
            self._webhook.post(marker_payload(self._marker))
        except HrflowError as exc:
            notifications.error(self._notifier, exc.message)
            return False
        finally:
            self.activating = False

        notifications.success(self._notifier, TRIGGERED_MESSAGE)
        self.load(RefreshMode.BACKGROUND)
        return True

    def refresh(self) -> bool:
        """Re-run screening and then refetch the list behind the refresh indicator."""
        state = self.candidates
        if state.refreshing:
            return False
        state.refreshing = True
        try:
            try:
                self._webhook.post(marker_payload(self._marker))
            except HrflowError as exc:
                notifications.error(self._notifier, exc.message)
                return False
            notifications.success(self._notifier, REFRESHED_MESSAGE)
            return self.load(RefreshMode.BACKGROUND, show_indicator=False)
        finally:
            state.refreshing = False

    def _fetch_candidates(self) -> list[ScreeningResult]:
        rows = self._store.select(SCREENING_TABLE)
        results = [ScreeningResult.from_row(row) for row in rows]
        return sort_by_score(results)


def sort_by_score(results: Iterable[ScreeningResult]) -> list[ScreeningResult]:
    """Highest overall score first; a missing score counts as zero."""
    return sorted(results, key=lambda r: r.overall_score or 0, reverse=True)


def decision_stats(results: Iterable[ScreeningResult]) -> dict[str, int]:
    counts = {decision: 0 for decision in DECISIONS}
    counts["pending"] = 0
    for result in results:
        key = (result.decision or "pending").lower()
        if key in counts:
            counts[key] += 1
        else:
            counts["pending"] += 1
    return counts


def average_score(results: Iterable[ScreeningResult]) -> int:
    scores = [result.overall_score or 0 for result in results]
    if not scores:
        return 0
    # half rounds up, as displayed on the dashboard
    return int(math.floor(sum(scores) / len(scores) + 0.5))


def decision_label(decision: str | None) -> str:
    if not decision:
        return "Pending Review"
    return decision[:1].upper() + decision[1:].lower()


__all__ = [
    "CandidateScreeningService",
    "DECISIONS",
    "REFRESHED_MESSAGE",
    "SCREENING_TABLE",
    "TRIGGERED_MESSAGE",
    "average_score",
    "decision_label",
    "decision_stats",
    "sort_by_score",
]
