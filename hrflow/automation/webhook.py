"""One-shot client for the external workflow-automation webhook."""

from __future__ import annotations

import enum
import json
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass

import requests

from ..errors import AutomationTimeoutError, HrflowError, RemoteError, TransportError
from ..settings import WebhookSettings
from ..utils.logging import get_logger
from .payloads import AutomationRequest, JsonPayload, MultipartPayload

LOGGER = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to trigger automation workflow"
TIMEOUT_MESSAGE = "Automation webhook timed out. Please try again."


class FailureReason(enum.Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class AutomationResult:
    """Outcome of a single webhook call. Nothing about it is persisted."""

    ok: bool
    reason: FailureReason | None = None
    message: str | None = None

    @classmethod
    def success(cls) -> "AutomationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: HrflowError) -> "AutomationResult":
        if isinstance(error, AutomationTimeoutError):
            reason = FailureReason.TIMEOUT
        elif isinstance(error, RemoteError):
            reason = FailureReason.REMOTE
        else:
            reason = FailureReason.TRANSPORT
        return cls(ok=False, reason=reason, message=error.message)


class WebhookClient:
    """Posts automation requests to a fixed endpoint.

    Every call issues exactly one POST. There is no retry, backoff or
    idempotency key; callers that need at-most-once behaviour per item
    serialise their calls (see :class:`hrflow.state.ShareStatusTracker`).
    """

    def __init__(
        self,
        settings: WebhookSettings,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def send(self, payload: AutomationRequest, timeout: float | None = None) -> AutomationResult:
        """Post ``payload`` and report the outcome instead of raising."""
        try:
            self.post(payload, timeout=timeout)
        except HrflowError as exc:
            return AutomationResult.failure(exc)
        return AutomationResult.success()

    def post(self, payload: AutomationRequest, timeout: float | None = None) -> None:
        """Post ``payload``; raise a :class:`HrflowError` subclass on failure.

        ``timeout`` bounds the whole exchange, from connect to the last byte
        read, not each socket operation.
        """
        effective_timeout = timeout if timeout is not None else self._settings.timeout
        kwargs = self._request_kwargs(payload)
        marker = self._marker_of(payload)

        LOGGER.info(
            "Posting automation webhook",
            extra={
                "event": "webhook.send",
                "marker": marker,
                "multipart": isinstance(payload, MultipartPayload),
                "timeout": effective_timeout,
            },
        )

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="webhook")
        try:
            future = executor.submit(self._exchange, effective_timeout, kwargs)
            status, body = future.result(timeout=effective_timeout)
        except (FuturesTimeoutError, requests.Timeout) as exc:
            LOGGER.warning(
                "Automation webhook timed out",
                extra={"event": "webhook.timeout", "marker": marker, "timeout": effective_timeout},
            )
            raise AutomationTimeoutError(TIMEOUT_MESSAGE) from exc
        except requests.RequestException as exc:
            LOGGER.warning(
                "Automation webhook transport failure",
                extra={"event": "webhook.transport_error", "marker": marker, "reason": str(exc)},
            )
            raise TransportError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
        finally:
            # an abandoned exchange ends on its own, bounded by the socket timeout
            executor.shutdown(wait=False, cancel_futures=True)

        if 200 <= status < 300:
            LOGGER.info(
                "Automation webhook accepted",
                extra={"event": "webhook.ok", "marker": marker, "status": status},
            )
            return

        message = body.strip() or GENERIC_FAILURE_MESSAGE
        LOGGER.warning(
            "Automation webhook rejected request",
            extra={"event": "webhook.rejected", "marker": marker, "status": status},
        )
        raise RemoteError(message, status=status)

    def _exchange(self, timeout: float, kwargs: dict[str, object]) -> tuple[int, str]:
        # stream=True: a 2xx completes once the headers arrive and its body is never read
        with self._session.post(
            self._settings.url, timeout=timeout, stream=True, **kwargs
        ) as response:
            status = response.status_code
            if 200 <= status < 300:
                return status, ""
            return status, response.text or ""

    def _request_kwargs(self, payload: AutomationRequest) -> dict[str, object]:
        if isinstance(payload, MultipartPayload):
            # requests derives the multipart boundary and Content-Type itself.
            return {
                "data": dict(payload.fields),
                "files": {payload.attachment.field_name: payload.attachment.as_requests_file()},
            }
        if isinstance(payload, JsonPayload):
            return {
                "data": json.dumps(payload.as_dict(), ensure_ascii=False).encode("utf-8"),
                "headers": {"Content-Type": "application/json"},
            }
        raise TypeError(f"Unsupported automation payload: {type(payload).__name__}")

    def _marker_of(self, payload: AutomationRequest) -> str | None:
        value = payload.fields.get("message")
        return str(value) if value is not None else None


__all__ = [
    "AutomationResult",
    "FailureReason",
    "GENERIC_FAILURE_MESSAGE",
    "TIMEOUT_MESSAGE",
    "WebhookClient",
]
