"""State machine for the job-creation form."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..automation.payloads import Attachment


class CreationState(enum.Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CreationEvent(enum.Enum):
    OPEN = "open"
    SUBMIT = "submit"
    SUCCEED = "succeed"
    FAIL = "fail"
    CLOSE = "close"


_TRANSITIONS: dict[tuple[CreationState, CreationEvent], CreationState] = {
    (CreationState.CLOSED, CreationEvent.OPEN): CreationState.EDITING,
    (CreationState.SUCCEEDED, CreationEvent.OPEN): CreationState.EDITING,
    (CreationState.EDITING, CreationEvent.SUBMIT): CreationState.SUBMITTING,
    (CreationState.FAILED, CreationEvent.SUBMIT): CreationState.SUBMITTING,
    (CreationState.SUBMITTING, CreationEvent.SUCCEED): CreationState.SUCCEEDED,
    (CreationState.SUBMITTING, CreationEvent.FAIL): CreationState.FAILED,
}


def transition(current: CreationState, event: CreationEvent) -> CreationState:
    """Pure transition function; ``CLOSE`` is allowed from every state but SUBMITTING."""
    if event is CreationEvent.CLOSE:
        if current is CreationState.SUBMITTING:
            raise ValueError("Cannot close the form while a submission is running")
        return CreationState.CLOSED
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError as exc:
        raise ValueError(f"Cannot apply {event.value!r} to state {current.value!r}") from exc


@dataclass(slots=True)
class JobDraft:
    """Transient form contents for a new job posting."""

    title: str = ""
    description: str = ""
    banner: Attachment | None = None
    auto_share: bool = False


@dataclass(slots=True)
class CreationFlow:
    """Current form state plus its draft; the draft is cleared on success."""

    state: CreationState = CreationState.CLOSED
    draft: JobDraft = field(default_factory=JobDraft)
    error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.state in (CreationState.EDITING, CreationState.SUBMITTING, CreationState.FAILED)

    def open(self) -> None:
        self.state = transition(self.state, CreationEvent.OPEN)
        self.error = None

    def submit(self) -> None:
        self.state = transition(self.state, CreationEvent.SUBMIT)
        self.error = None

    def succeed(self) -> None:
        self.state = transition(self.state, CreationEvent.SUCCEED)
        self.draft = JobDraft()
        self.error = None

    def fail(self, message: str) -> None:
        self.state = transition(self.state, CreationEvent.FAIL)
        self.error = message

    def close(self) -> None:
        self.state = transition(self.state, CreationEvent.CLOSE)


__all__ = [
    "CreationEvent",
    "CreationFlow",
    "CreationState",
    "JobDraft",
    "transition",
]
