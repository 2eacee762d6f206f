from __future__ import annotations

from datetime import date
from typing import Any

from hrflow.reports import (
    candidates_by_stage,
    fetch_attendance,
    fetch_employees,
    fetch_interviews,
    fetch_payroll,
    onboarding_summary,
    overview_counts,
    payroll_totals,
    save_company_settings,
)


class StubStore:
    def __init__(self, tables: dict[str, list[dict[str, Any]]]) -> None:
        self.tables = tables
        self.selects: list[tuple[str, dict[str, Any], dict[str, Any]]] = []
        self.writes: list[tuple[Any, ...]] = []

    def select(self, table: str, filters=None, **kwargs: Any) -> list[dict[str, Any]]:
        filters = dict(filters or {})
        self.selects.append((table, filters, kwargs))
        rows = self.tables.get(table, [])
        return [dict(row) for row in rows if all(row.get(k) == v for k, v in filters.items())]

    def insert(self, table: str, row: dict[str, Any]) -> list[dict[str, Any]]:
        self.writes.append(("insert", table, dict(row)))
        return [dict(row)]

    def update(self, table: str, filters: dict[str, Any], patch: dict[str, Any]) -> list[dict[str, Any]]:
        self.writes.append(("update", table, dict(filters), dict(patch)))
        return [dict(patch)]


def test_overview_counts_scoped_to_user() -> None:
    store = StubStore(
        {
            "jobs": [{"id": 1, "user_id": "u1"}, {"id": 2, "user_id": "u2"}],
            "candidates": [{"id": 1, "user_id": "u1"}, {"id": 2, "user_id": "u1"}],
            "employees": [{"id": 1, "user_id": "u1"}],
        }
    )

    counts = overview_counts(store, "u1")

    assert (counts.jobs, counts.candidates, counts.interviews, counts.employees) == (1, 2, 0, 1)


def test_candidates_by_stage_ignores_unknown_statuses() -> None:
    rows = [{"status": "applied"}, {"status": "shortlisted"}, {"status": "applied"}, {"status": "hired"}]

    assert candidates_by_stage(rows) == {"applied": 2, "keep_in_view": 0, "shortlisted": 1, "rejected": 0}


def test_payroll_totals_split_by_status() -> None:
    totals = payroll_totals(
        [
            {"status": "paid", "net_salary": "3500.50"},
            {"status": "pending", "net_salary": 1200},
            {"status": "paid", "net_salary": None},
            {"status": "cancelled", "net_salary": 999},
        ]
    )

    assert totals.paid == 3500.5
    assert totals.pending == 1200.0


def test_attendance_joins_employee_or_unknown() -> None:
    store = StubStore(
        {
            "attendance": [
                {"id": 1, "user_id": "u1", "date": "2026-03-02", "employee_id": "e1"},
                {"id": 2, "user_id": "u1", "date": "2026-03-02", "employee_id": "gone"},
                {"id": 3, "user_id": "u1", "date": "2026-03-01", "employee_id": "e1"},
            ],
            "employees": [{"id": "e1", "name": "Lee", "position": "Analyst"}],
        }
    )

    rows = fetch_attendance(store, "u1", date(2026, 3, 2))

    assert [row["id"] for row in rows] == [1, 2]
    assert rows[0]["employee"]["name"] == "Lee"
    assert rows[1]["employee"] == {"name": "Unknown", "position": ""}


def test_interviews_join_candidates() -> None:
    store = StubStore(
        {
            "interviews": [{"id": 9, "user_id": "u1", "candidate_id": "c1"}],
            "candidates": [{"id": "c1", "name": "Ada", "email": "ada@example.com"}],
        }
    )

    rows = fetch_interviews(store, "u1")

    assert rows[0]["candidate"]["email"] == "ada@example.com"
    table, _, kwargs = store.selects[0]
    assert table == "interviews"
    assert kwargs["order"] == "created_at" and kwargs["descending"] is True


def test_save_company_settings_inserts_then_updates() -> None:
    store = StubStore({})
    save_company_settings(store, "u1", {"company_name": "Acme", "linkedin_integration": 1})
    assert store.writes[-1][0] == "insert"
    assert store.writes[-1][2]["user_id"] == "u1"
    assert store.writes[-1][2]["linkedin_integration"] is True

    store.tables["company_settings"] = [{"id": 1, "user_id": "u1"}]
    save_company_settings(store, "u1", {"company_name": "Acme Ltd"})
    op, table, filters, patch = store.writes[-1]
    assert (op, table, filters) == ("update", "company_settings", {"user_id": "u1"})
    assert patch["company_name"] == "Acme Ltd"


def test_payroll_rows_filtered_by_period_and_joined() -> None:
    store = StubStore(
        {
            "payroll": [
                {"id": 1, "user_id": "u1", "month": 3, "year": 2026, "employee_id": "e1", "status": "paid"},
                {"id": 2, "user_id": "u1", "month": 2, "year": 2026, "employee_id": "e1", "status": "paid"},
            ],
            "employees": [{"id": "e1", "name": "Lee", "position": "Analyst"}],
        }
    )

    rows = fetch_payroll(store, "u1", 3, 2026)

    assert [row["id"] for row in rows] == [1]
    assert rows[0]["employee"] == {"id": "e1", "name": "Lee", "position": "Analyst"}


def test_employees_listed_newest_joiner_first() -> None:
    store = StubStore({"employees": [{"id": "e1", "user_id": "u1"}, {"id": "e2", "user_id": "u2"}]})

    rows = fetch_employees(store, "u1")

    assert [row["id"] for row in rows] == ["e1"]
    table, filters, kwargs = store.selects[0]
    assert (table, filters) == ("employees", {"user_id": "u1"})
    assert kwargs["order"] == "joining_date" and kwargs["descending"] is True


def test_onboarding_summary_counts_completed_and_rounds_average() -> None:
    summary = onboarding_summary(
        [
            {"onboarding_status": "completed", "performance_score": 80},
            {"onboarding_status": "in_progress", "performance_score": 71},
            {"onboarding_status": None, "performance_score": None},
            {"performance_score": 95},
        ]
    )

    assert summary.total == 4
    assert summary.completed == 1
    assert summary.average_performance == 62


def test_onboarding_summary_of_nobody_is_zero() -> None:
    summary = onboarding_summary([])
    assert (summary.total, summary.completed, summary.average_performance) == (0, 0, 0)
