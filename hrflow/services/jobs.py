"""Job posting actions: create with optional auto-share, per-job share, refresh."""

from __future__ import annotations

from typing import Callable

from .. import notifications
from ..automation import BannerLoader, WebhookClient, attachment_to_data_url, job_posting_payload
from ..datastore import RowStore
from ..errors import HrflowError, ValidationError
from ..notifications import Notifier
from ..settings import WebhookSettings
from ..state import CreationFlow, CreationState, JobDraft, ShareStatusTracker
from ..sync import ListReconciler, ListState, RefreshMode
from ..utils.logging import get_logger
from .models import JobRecord

LOGGER = get_logger(__name__)

JOBS_TABLE = "jobs"
CREATED_MESSAGE = "Job posted successfully!"
SHARED_MESSAGE = "Job shared successfully!"
NOT_SIGNED_IN_MESSAGE = "You must be signed in to manage job postings"


class JobPostingService:
    """Coordinates the job-posting screen.

    Owns the job list, the per-job share tracker and the creation form; no
    other component writes them.
    """

    def __init__(
        self,
        webhook: WebhookClient,
        store: RowStore,
        notifier: Notifier,
        *,
        webhook_settings: WebhookSettings,
        current_user_id: Callable[[], str | None],
        banner_loader: BannerLoader | None = None,
    ) -> None:
        self._webhook = webhook
        self._store = store
        self._notifier = notifier
        self._marker = webhook_settings.job_posting_marker
        self._current_user_id = current_user_id
        self._banner_loader = banner_loader or BannerLoader(timeout=webhook_settings.timeout)

        self.jobs: ListState[JobRecord] = ListState()
        self.share_status = ShareStatusTracker()
        self.creation = CreationFlow()
        self._reconciler = ListReconciler(
            "jobs",
            self._fetch_jobs,
            self.jobs,
            notifier,
            tracker=self.share_status,
            fallback_message="Unable to load job postings. Please try again later.",
        )

    def refresh(self, mode: RefreshMode = RefreshMode.FOREGROUND) -> bool:
        return self._reconciler.refresh(mode)

    def create_job(self, draft: JobDraft | None = None) -> bool:
        """Validate, optionally auto-share, persist, then refresh.

        Auto-share runs before persistence: if the automation call fails the
        job is not stored. If storing fails after a successful auto-share the
        automation side effect stays in place.
        """
        flow = self.creation
        if flow.state is CreationState.SUBMITTING:
            return False
        if draft is not None:
            flow.draft = draft
        if flow.state in (CreationState.CLOSED, CreationState.SUCCEEDED):
            flow.open()
        flow.submit()
        draft = flow.draft

        try:
            user_id = self._require_user()
            self._validate(draft)
            if draft.auto_share and draft.banner is not None:
                self._webhook.post(job_posting_payload(self._marker, draft.title.strip(), draft.banner))
            self._store.insert(JOBS_TABLE, self._job_row(user_id, draft))
        except HrflowError as exc:
            flow.fail(exc.message)
            LOGGER.warning(
                "Job creation aborted",
                extra={"event": "jobs.create_failed", "error_type": type(exc).__name__},
            )
            notifications.error(self._notifier, exc.message)
            return False

        LOGGER.info(
            "Job created",
            extra={"event": "jobs.created", "auto_share": draft.auto_share},
        )
        flow.succeed()
        notifications.success(self._notifier, CREATED_MESSAGE)
        self.refresh()
        return True

    def share_job(self, job_id: str) -> bool:
        """Send one job's banner to the automation; no-op unless the job is idle."""
        if not self.share_status.begin(job_id):
            LOGGER.debug("Share ignored; job busy or shared", extra={"event": "jobs.share_skipped", "job_id": job_id})
            return False

        try:
            job = self._find_job(job_id)
            attachment = self._banner_loader.load(job.banner_image_url, job.title)
            self._webhook.post(job_posting_payload(self._marker, job.title, attachment))
        except HrflowError as exc:
            self.share_status.fail(job_id)
            notifications.error(self._notifier, exc.message)
            return False

        self.share_status.succeed(job_id)
        notifications.success(self._notifier, SHARED_MESSAGE)
        return True

    def _validate(self, draft: JobDraft) -> None:
        if not draft.title.strip():
            raise ValidationError("title", "Job title is required")
        if draft.auto_share and draft.banner is None:
            raise ValidationError("banner", "A banner image is required to auto-share this job")

    def _job_row(self, user_id: str, draft: JobDraft) -> dict[str, object]:
        return {
            "user_id": user_id,
            "title": draft.title.strip(),
            "description": draft.description.strip(),
            "banner_image_url": attachment_to_data_url(draft.banner) if draft.banner else None,
            "posted_to_linkedin": draft.auto_share,
            "posted_to_instagram": draft.auto_share,
        }

    def _find_job(self, job_id: str) -> JobRecord:
        for job in self.jobs.items:
            if job.id == job_id:
                return job
        raise ValidationError("job", f"Job {job_id} is not in the current list")

    def _require_user(self) -> str:
        user_id = self._current_user_id()
        if not user_id:
            raise ValidationError("user", NOT_SIGNED_IN_MESSAGE)
        return user_id

    def _fetch_jobs(self) -> list[JobRecord]:
        user_id = self._require_user()
        rows = self._store.select(
            JOBS_TABLE,
            {"user_id": user_id},
            order="created_at",
            descending=True,
        )
        return [JobRecord.from_row(row) for row in rows]


__all__ = ["JobPostingService", "CREATED_MESSAGE", "SHARED_MESSAGE", "JOBS_TABLE"]
