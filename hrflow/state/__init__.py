"""Explicit UI state machines."""

from __future__ import annotations

from .creation import CreationEvent, CreationFlow, CreationState, JobDraft
from .share_status import ShareEvent, ShareStatus, ShareStatusTracker

__all__ = [
    "CreationEvent",
    "CreationFlow",
    "CreationState",
    "JobDraft",
    "ShareEvent",
    "ShareStatus",
    "ShareStatusTracker",
]
