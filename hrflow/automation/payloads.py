"""Outbound payload shapes for the automation webhook."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

MESSAGE_FIELD = "message"
JOB_TITLE_FIELD = "job_title"
IMAGE_FIELD = "image"


@dataclass(frozen=True, slots=True)
class Attachment:
    """A single binary file sent as a named multipart field."""

    field_name: str
    filename: str
    content: bytes
    content_type: str

    def as_requests_file(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


@dataclass(frozen=True, slots=True)
class JsonPayload:
    """Structured body sent as ``application/json``."""

    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def as_dict(self) -> dict[str, Any]:
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class MultipartPayload:
    """Text fields plus exactly one binary attachment."""

    fields: Mapping[str, str]
    attachment: Attachment

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "fields", MappingProxyType({str(k): str(v) for k, v in self.fields.items()})
        )


AutomationRequest = Union[JsonPayload, MultipartPayload]


def marker_payload(marker: str, **extra: Any) -> JsonPayload:
    """Build the JSON body ``{"message": marker, ...}``."""
    return JsonPayload({MESSAGE_FIELD: marker, **extra})


def job_posting_payload(marker: str, job_title: str, image: Attachment) -> MultipartPayload:
    """Build the multipart body that asks the automation to post a job banner."""
    if image.field_name != IMAGE_FIELD:
        image = Attachment(
            field_name=IMAGE_FIELD,
            filename=image.filename,
            content=image.content,
            content_type=image.content_type,
        )
    return MultipartPayload(
        fields={MESSAGE_FIELD: marker, JOB_TITLE_FIELD: job_title},
        attachment=image,
    )


__all__ = [
    "Attachment",
    "AutomationRequest",
    "IMAGE_FIELD",
    "JOB_TITLE_FIELD",
    "JsonPayload",
    "MESSAGE_FIELD",
    "MultipartPayload",
    "job_posting_payload",
    "marker_payload",
]
