"""Banner image handling: inline ``data:`` URLs and binary attachments.

Job banners are persisted as inline ``data:`` URLs so the row store needs no
file storage. Before a banner is re-submitted to the automation webhook it is
decoded back into an :class:`Attachment` whose content type comes from the
URL's media type.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import urllib.parse
from pathlib import Path, PurePosixPath

import requests

from ..errors import TransportError, ValidationError
from ..utils.logging import get_logger
from .payloads import IMAGE_FIELD, Attachment

LOGGER = get_logger(__name__)

DEFAULT_IMAGE_TYPE = "image/png"
_DATA_PREFIX = "data:"


def guess_content_type(filename: str, default: str = DEFAULT_IMAGE_TYPE) -> str:
    return mimetypes.guess_type(filename)[0] or default


def is_data_url(reference: str | None) -> bool:
    return bool(reference) and reference.startswith(_DATA_PREFIX)


def encode_data_url(content: bytes, content_type: str) -> str:
    """Encode binary content as a ``data:<type>;base64,`` URL."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"{_DATA_PREFIX}{content_type};base64,{encoded}"


def decode_data_url(reference: str) -> tuple[bytes, str]:
    """Return ``(content, content_type)`` for a ``data:`` URL."""
    if not is_data_url(reference):
        raise ValidationError("banner", "Banner reference is not an inline data URL")
    header, sep, data = reference[len(_DATA_PREFIX):].partition(",")
    if not sep:
        raise ValidationError("banner", "Malformed banner data URL")

    params = header.split(";")
    content_type = params[0].strip() or "text/plain"
    if "base64" in (p.strip().lower() for p in params[1:]):
        try:
            content = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("banner", "Banner data URL is not valid base64") from exc
    else:
        content = urllib.parse.unquote_to_bytes(data)
    return content, content_type


def attachment_from_file(path: Path) -> Attachment:
    """Read a local image file into an attachment."""
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ValidationError("banner", f"Cannot read banner image {path}: {exc}") from exc
    return Attachment(
        field_name=IMAGE_FIELD,
        filename=path.name,
        content=content,
        content_type=guess_content_type(path.name),
    )


def attachment_to_data_url(attachment: Attachment) -> str:
    return encode_data_url(attachment.content, attachment.content_type)


class BannerLoader:
    """Turns a stored banner reference back into an uploadable attachment."""

    def __init__(self, *, session: requests.Session | None = None, timeout: float = 15.0) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def load(self, reference: str | None, title: str) -> Attachment:
        if not reference:
            raise ValidationError("banner", "This job has no banner image to share")
        if is_data_url(reference):
            content, content_type = decode_data_url(reference)
            return Attachment(
                field_name=IMAGE_FIELD,
                filename=f"{title}.png",
                content=content,
                content_type=content_type,
            )
        return self._download(reference, title)

    def _download(self, url: str, title: str) -> Attachment:
        LOGGER.info("Downloading stored banner", extra={"event": "banner.download", "url": url})
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(
                "Failed to download banner image",
                details={"url": url, "reason": str(exc)},
            ) from exc

        filename = PurePosixPath(urllib.parse.urlparse(url).path).name or f"{title}.png"
        header_type = response.headers.get("Content-Type", "").split(";", 1)[0].strip()
        return Attachment(
            field_name=IMAGE_FIELD,
            filename=filename,
            content=response.content,
            content_type=header_type or guess_content_type(filename),
        )


__all__ = [
    "BannerLoader",
    "DEFAULT_IMAGE_TYPE",
    "attachment_from_file",
    "attachment_to_data_url",
    "decode_data_url",
    "encode_data_url",
    "guess_content_type",
    "is_data_url",
]
