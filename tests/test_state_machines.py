"""Tests for the share-status tracker and the creation form state machine."""

from __future__ import annotations

import pytest

from hrflow.automation import Attachment
from hrflow.state import (
    CreationEvent,
    CreationFlow,
    CreationState,
    JobDraft,
    ShareEvent,
    ShareStatus,
    ShareStatusTracker,
)
from hrflow.state import creation, share_status


def test_share_transition_table() -> None:
    assert share_status.transition(ShareStatus.IDLE, ShareEvent.START) is ShareStatus.LOADING
    assert share_status.transition(ShareStatus.LOADING, ShareEvent.SUCCEED) is ShareStatus.SHARED
    assert share_status.transition(ShareStatus.LOADING, ShareEvent.FAIL) is ShareStatus.IDLE
    assert share_status.transition(ShareStatus.SHARED, ShareEvent.RESET) is ShareStatus.IDLE

    with pytest.raises(ValueError):
        share_status.transition(ShareStatus.SHARED, ShareEvent.START)
    with pytest.raises(ValueError):
        share_status.transition(ShareStatus.IDLE, ShareEvent.SUCCEED)


def test_tracker_guards_non_idle_items() -> None:
    tracker = ShareStatusTracker()

    assert tracker.status("job-1") is ShareStatus.IDLE
    assert tracker.begin("job-1")
    assert not tracker.begin("job-1")

    tracker.succeed("job-1")
    assert tracker.status("job-1") is ShareStatus.SHARED
    assert not tracker.begin("job-1")


def test_tracker_items_are_independent() -> None:
    tracker = ShareStatusTracker()

    assert tracker.begin("a")
    assert tracker.begin("b")
    tracker.fail("a")

    assert tracker.status("a") is ShareStatus.IDLE
    assert tracker.status("b") is ShareStatus.LOADING
    assert tracker.begin("a")


def test_tracker_reset_drops_every_entry() -> None:
    tracker = ShareStatusTracker()
    tracker.begin("a")
    tracker.begin("b")
    tracker.succeed("b")

    tracker.reset()

    assert len(tracker) == 0
    assert tracker.snapshot() == {}
    assert tracker.status("b") is ShareStatus.IDLE


def test_creation_transitions() -> None:
    state = creation.transition(CreationState.CLOSED, CreationEvent.OPEN)
    assert state is CreationState.EDITING
    state = creation.transition(state, CreationEvent.SUBMIT)
    assert state is CreationState.SUBMITTING
    assert creation.transition(state, CreationEvent.FAIL) is CreationState.FAILED
    assert creation.transition(CreationState.FAILED, CreationEvent.SUBMIT) is CreationState.SUBMITTING

    with pytest.raises(ValueError):
        creation.transition(CreationState.SUBMITTING, CreationEvent.CLOSE)
    with pytest.raises(ValueError):
        creation.transition(CreationState.CLOSED, CreationEvent.SUBMIT)


def test_creation_flow_resets_draft_on_success() -> None:
    banner = Attachment(field_name="image", filename="b.png", content=b"x", content_type="image/png")
    flow = CreationFlow()
    flow.open()
    flow.draft = JobDraft(title="Engineer", banner=banner, auto_share=True)

    flow.submit()
    flow.succeed()

    assert flow.state is CreationState.SUCCEEDED
    assert not flow.is_open
    assert flow.draft == JobDraft()


def test_creation_flow_keeps_draft_on_failure() -> None:
    flow = CreationFlow()
    flow.open()
    flow.draft = JobDraft(title="Engineer")
    flow.submit()
    flow.fail("boom")

    assert flow.is_open
    assert flow.error == "boom"
    assert flow.draft.title == "Engineer"


def test_creation_flow_cannot_close_mid_submission() -> None:
    flow = CreationFlow()
    flow.open()
    flow.draft = JobDraft(title="Engineer")
    flow.submit()

    with pytest.raises(ValueError):
        flow.close()

    flow.fail("boom")
    flow.close()
    assert flow.state is CreationState.CLOSED
    assert flow.draft.title == "Engineer"
