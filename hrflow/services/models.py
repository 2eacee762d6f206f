"""Row models for jobs and AI-screened candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class JobRecord:
    """A job posting as stored in the ``jobs`` table."""

    id: str
    title: str
    banner_image_url: str | None = None
    posted_to_linkedin: bool = False
    posted_to_instagram: bool = False
    description: str = ""
    user_id: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "JobRecord":
        return cls(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            banner_image_url=row.get("banner_image_url"),
            posted_to_linkedin=bool(row.get("posted_to_linkedin")),
            posted_to_instagram=bool(row.get("posted_to_instagram")),
            description=str(row.get("description") or ""),
            user_id=row.get("user_id"),
            created_at=row.get("created_at"),
        )

    @property
    def has_banner(self) -> bool:
        return bool(self.banner_image_url)


@dataclass(slots=True)
class ScreeningResult:
    """One row of ``resume_screening_results`` written by the screening automation."""

    id: str
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    overall_score: float | None = None
    skills_score: float | None = None
    experience_score: float | None = None
    education_score: float | None = None
    applicant_skill: str | None = None
    reason_summary: str | None = None
    decision: str | None = None
    status: str | None = None
    resume_drive_url: str | None = None
    resume_drive_file_id: str | None = None
    resume_filename: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ScreeningResult":
        return cls(
            id=str(row["id"]),
            full_name=row.get("full_name"),
            email=row.get("email"),
            phone_number=row.get("phone_number"),
            overall_score=_optional_float(row.get("overall_score")),
            skills_score=_optional_float(row.get("skills_score")),
            experience_score=_optional_float(row.get("experience_score")),
            education_score=_optional_float(row.get("education_score")),
            applicant_skill=row.get("applicant_skill"),
            reason_summary=row.get("reason_summary"),
            decision=row.get("decision"),
            status=row.get("status"),
            resume_drive_url=row.get("resume_drive_url"),
            resume_drive_file_id=row.get("resume_drive_file_id"),
            resume_filename=row.get("resume_filename"),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or "Unnamed Applicant"


__all__ = ["JobRecord", "ScreeningResult"]
