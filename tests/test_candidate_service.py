"""Tests for the resume-screening trigger and candidate list."""

from __future__ import annotations

from typing import Any, Callable

from hrflow.automation import JsonPayload
from hrflow.errors import AutomationTimeoutError, RemoteError
from hrflow.notifications import Level, RecordingNotifier
from hrflow.services import (
    CandidateScreeningService,
    average_score,
    decision_label,
    decision_stats,
    sort_by_score,
)
from hrflow.services.candidates import REFRESHED_MESSAGE, SCREENING_TABLE, TRIGGERED_MESSAGE
from hrflow.services.models import ScreeningResult
from hrflow.settings import WebhookSettings
from hrflow.sync import RefreshMode


class StubWebhook:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[Any] = []
        self.on_post: Callable[[], None] | None = None

    def post(self, payload: Any, timeout: float | None = None) -> None:
        self.calls.append(payload)
        if self.on_post is not None:
            self.on_post()
        if self.error is not None:
            raise self.error


class StubStore:
    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self.rows = rows or []
        self.selects: list[str] = []
        self.on_select: Callable[[], None] | None = None
        self.error: Exception | None = None

    def select(self, table: str, filters=None, **kwargs: Any) -> list[dict[str, Any]]:
        self.selects.append(table)
        if self.on_select is not None:
            self.on_select()
        if self.error is not None:
            raise self.error
        return [dict(row) for row in self.rows]


ROWS = [
    {"id": "a", "full_name": "Ada", "overall_score": 72, "decision": "kiv"},
    {"id": "b", "full_name": "Grace", "overall_score": "91.5", "decision": "shortlisted"},
    {"id": "c", "full_name": None, "overall_score": None, "decision": None},
]


def _service(webhook: StubWebhook, store: StubStore):
    notifier = RecordingNotifier()
    service = CandidateScreeningService(
        webhook,
        store,
        notifier,
        webhook_settings=WebhookSettings(url="https://automation.test/hook"),
    )
    return service, notifier


def test_trigger_twice_while_in_flight_posts_once() -> None:
    webhook, store = StubWebhook(), StubStore(ROWS)
    service, notifier = _service(webhook, store)
    nested: list[bool] = []

    def reenter() -> None:
        assert service.activating
        nested.append(service.trigger_screening())

    webhook.on_post = reenter

    assert service.trigger_screening()

    assert nested == [False]
    assert len(webhook.calls) == 1
    payload = webhook.calls[0]
    assert isinstance(payload, JsonPayload)
    assert payload.as_dict() == {"message": "resume screening activated"}
    assert notifier.messages(Level.SUCCESS).count(TRIGGERED_MESSAGE) == 1
    assert service.activating is False


def test_trigger_success_reloads_in_background() -> None:
    webhook, store = StubWebhook(), StubStore(ROWS)
    service, _ = _service(webhook, store)
    seen: list[tuple[bool, bool]] = []
    store.on_select = lambda: seen.append((service.candidates.loading, service.candidates.refreshing))

    service.trigger_screening()

    assert store.selects == [SCREENING_TABLE]
    assert seen == [(False, True)]
    assert service.candidates.loading is False
    assert service.candidates.refreshing is False
    assert [c.id for c in service.candidates.items] == ["b", "a", "c"]


def test_trigger_failure_clears_flag_and_skips_reload() -> None:
    webhook = StubWebhook(error=AutomationTimeoutError("Automation webhook timed out. Please try again."))
    store = StubStore(ROWS)
    service, notifier = _service(webhook, store)

    assert not service.trigger_screening()

    assert service.activating is False
    assert store.selects == []
    assert notifier.messages() == ["Automation webhook timed out. Please try again."]

    webhook.error = None
    assert service.trigger_screening()
    assert len(webhook.calls) == 2


def test_load_failure_keeps_previous_candidates() -> None:
    webhook, store = StubWebhook(), StubStore(ROWS)
    service, notifier = _service(webhook, store)
    assert service.load()

    store.error = RemoteError("permission denied for table resume_screening_results")
    assert not service.load(RefreshMode.BACKGROUND)

    assert len(service.candidates.items) == 3
    assert service.candidates.error == "permission denied for table resume_screening_results"
    assert notifier.messages(Level.ERROR) == ["permission denied for table resume_screening_results"]


def test_refresh_posts_then_reloads_without_second_indicator() -> None:
    webhook, store = StubWebhook(), StubStore(ROWS)
    service, notifier = _service(webhook, store)
    seen: list[bool] = []
    store.on_select = lambda: seen.append(service.candidates.refreshing)

    assert service.refresh()

    assert len(webhook.calls) == 1
    assert seen == [True]
    assert service.candidates.refreshing is False
    assert notifier.messages() == [REFRESHED_MESSAGE]


def test_refresh_ignored_while_already_refreshing() -> None:
    webhook, store = StubWebhook(), StubStore(ROWS)
    service, _ = _service(webhook, store)
    nested: list[bool] = []
    webhook.on_post = lambda: nested.append(service.refresh()) if not nested else None

    service.refresh()

    assert nested == [False]
    assert len(webhook.calls) == 1


def test_refresh_failure_reports_and_leaves_list() -> None:
    webhook, store = StubWebhook(error=RemoteError("Workflow is inactive", status=404)), StubStore(ROWS)
    service, notifier = _service(webhook, store)

    assert not service.refresh()

    assert store.selects == []
    assert service.candidates.refreshing is False
    assert notifier.messages(Level.ERROR) == ["Workflow is inactive"]


def _results() -> list[ScreeningResult]:
    return [ScreeningResult.from_row(row) for row in ROWS]


def test_sort_by_score_treats_missing_as_zero() -> None:
    ordered = sort_by_score(_results())
    assert [r.id for r in ordered] == ["b", "a", "c"]


def test_decision_stats_counts_unknown_as_pending() -> None:
    results = _results() + [ScreeningResult(id="d", decision="Rejected"), ScreeningResult(id="e", decision="maybe")]
    assert decision_stats(results) == {"shortlisted": 1, "kiv": 1, "rejected": 1, "pending": 2}


def test_average_score_rounds_half_up() -> None:
    assert average_score([]) == 0
    assert average_score([ScreeningResult(id="a", overall_score=70), ScreeningResult(id="b", overall_score=71)]) == 71
    assert average_score(_results()) == 55


def test_decision_label_and_display_name() -> None:
    assert decision_label(None) == "Pending Review"
    assert decision_label("SHORTLISTED") == "Shortlisted"
    assert decision_label("kiv") == "Kiv"
    assert ScreeningResult.from_row(ROWS[2]).display_name == "Unnamed Applicant"
