"""Read models behind the dashboard overview, payroll, attendance and settings pages."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping

from .datastore import Row, RowStore

STAGES = ("applied", "keep_in_view", "shortlisted", "rejected")
UNKNOWN_EMPLOYEE = {"name": "Unknown", "position": ""}
UNKNOWN_CANDIDATE = {"name": "Unknown", "email": ""}


@dataclass(slots=True)
class OverviewCounts:
    jobs: int
    candidates: int
    interviews: int
    employees: int


@dataclass(slots=True)
class PayrollTotals:
    paid: float
    pending: float


@dataclass(slots=True)
class OnboardingSummary:
    total: int
    completed: int
    average_performance: int


def overview_counts(store: RowStore, user_id: str) -> OverviewCounts:
    scope = {"user_id": user_id}
    return OverviewCounts(
        jobs=len(store.select("jobs", scope, columns="id")),
        candidates=len(store.select("candidates", scope, columns="id")),
        interviews=len(store.select("interviews", scope, columns="id")),
        employees=len(store.select("employees", scope, columns="id")),
    )


def candidates_by_stage(rows: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """Count candidates per pipeline stage; unknown statuses are ignored."""
    counts = {stage: 0 for stage in STAGES}
    for row in rows:
        status = row.get("status")
        if status in counts:
            counts[status] += 1
    return counts


def payroll_totals(records: Iterable[Mapping[str, Any]]) -> PayrollTotals:
    paid = 0.0
    pending = 0.0
    for record in records:
        amount = float(record.get("net_salary") or 0)
        if record.get("status") == "paid":
            paid += amount
        elif record.get("status") == "pending":
            pending += amount
    return PayrollTotals(paid=paid, pending=pending)


def _join(
    store: RowStore,
    rows: list[Row],
    *,
    key: str,
    attribute: str,
    table: str,
    columns: str,
    fallback: Mapping[str, Any],
) -> list[Row]:
    joined: list[Row] = []
    for row in rows:
        related = store.select(table, {"id": row.get(key)}, columns=columns)
        joined.append({**row, attribute: related[0] if related else dict(fallback)})
    return joined


def fetch_payroll(store: RowStore, user_id: str, month: int, year: int) -> list[Row]:
    rows = store.select("payroll", {"user_id": user_id, "month": month, "year": year})
    return _join(
        store,
        rows,
        key="employee_id",
        attribute="employee",
        table="employees",
        columns="name, position",
        fallback=UNKNOWN_EMPLOYEE,
    )


def fetch_attendance(store: RowStore, user_id: str, day: date) -> list[Row]:
    rows = store.select(
        "attendance",
        {"user_id": user_id, "date": day.isoformat()},
        columns="id, date, check_in, check_out, status, employee_id",
        order="check_in",
        descending=True,
    )
    return _join(
        store,
        rows,
        key="employee_id",
        attribute="employee",
        table="employees",
        columns="name, position",
        fallback=UNKNOWN_EMPLOYEE,
    )


def fetch_interviews(store: RowStore, user_id: str) -> list[Row]:
    rows = store.select(
        "interviews",
        {"user_id": user_id},
        columns="id, status, scheduled_at, transcript, score, candidate_id",
        order="created_at",
        descending=True,
    )
    return _join(
        store,
        rows,
        key="candidate_id",
        attribute="candidate",
        table="candidates",
        columns="name, email",
        fallback=UNKNOWN_CANDIDATE,
    )


def fetch_employees(store: RowStore, user_id: str) -> list[Row]:
    """Employees of ``user_id``, most recent joiners first."""
    return store.select("employees", {"user_id": user_id}, order="joining_date", descending=True)


def onboarding_status(row: Mapping[str, Any]) -> str:
    return str(row.get("onboarding_status") or "pending")


def onboarding_summary(rows: Iterable[Mapping[str, Any]]) -> OnboardingSummary:
    """Headcount, completed onboardings and the mean performance score.

    A missing score counts as zero; the mean rounds half up.
    """
    rows = list(rows)
    if not rows:
        return OnboardingSummary(total=0, completed=0, average_performance=0)
    completed = sum(1 for row in rows if onboarding_status(row) == "completed")
    scores = [float(row.get("performance_score") or 0) for row in rows]
    average = int(math.floor(sum(scores) / len(scores) + 0.5))
    return OnboardingSummary(total=len(rows), completed=completed, average_performance=average)


def save_company_settings(store: RowStore, user_id: str, settings: Mapping[str, Any]) -> list[Row]:
    """Update the user's settings row, or insert it when none exists yet."""
    patch = {
        "company_name": settings.get("company_name", ""),
        "ai_api_key": settings.get("ai_api_key", ""),
        "linkedin_integration": bool(settings.get("linkedin_integration")),
        "instagram_integration": bool(settings.get("instagram_integration")),
    }
    existing = store.select("company_settings", {"user_id": user_id}, columns="id")
    if existing:
        return store.update("company_settings", {"user_id": user_id}, patch)
    return store.insert("company_settings", {"user_id": user_id, **patch})


__all__ = [
    "OnboardingSummary",
    "OverviewCounts",
    "PayrollTotals",
    "STAGES",
    "candidates_by_stage",
    "fetch_attendance",
    "fetch_employees",
    "fetch_interviews",
    "fetch_payroll",
    "onboarding_status",
    "onboarding_summary",
    "overview_counts",
    "payroll_totals",
    "save_company_settings",
]
