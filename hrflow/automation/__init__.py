"""Automation webhook integration."""

from __future__ import annotations

from .banner import (
    BannerLoader,
    attachment_from_file,
    attachment_to_data_url,
    decode_data_url,
    encode_data_url,
)
from .payloads import (
    Attachment,
    AutomationRequest,
    JsonPayload,
    MultipartPayload,
    job_posting_payload,
    marker_payload,
)
from .webhook import (
    GENERIC_FAILURE_MESSAGE,
    TIMEOUT_MESSAGE,
    AutomationResult,
    FailureReason,
    WebhookClient,
)

__all__ = [
    "Attachment",
    "AutomationRequest",
    "AutomationResult",
    "BannerLoader",
    "FailureReason",
    "GENERIC_FAILURE_MESSAGE",
    "JsonPayload",
    "MultipartPayload",
    "TIMEOUT_MESSAGE",
    "WebhookClient",
    "attachment_from_file",
    "attachment_to_data_url",
    "decode_data_url",
    "encode_data_url",
    "job_posting_payload",
    "marker_payload",
]
