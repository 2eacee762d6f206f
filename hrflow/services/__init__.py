"""Orchestrated user actions."""

from __future__ import annotations

from .candidates import (
    CandidateScreeningService,
    average_score,
    decision_label,
    decision_stats,
    sort_by_score,
)
from .jobs import JobPostingService
from .models import JobRecord, ScreeningResult

__all__ = [
    "CandidateScreeningService",
    "JobPostingService",
    "JobRecord",
    "ScreeningResult",
    "average_score",
    "decision_label",
    "decision_stats",
    "sort_by_score",
]
