"""Error taxonomy shared by the automation, data-store and identity layers."""

from __future__ import annotations

import json
from typing import Any, Mapping


class HrflowError(RuntimeError):
    """Base class for failures that end up as a user-visible notification."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    @property
    def message(self) -> str:
        return super().__str__()

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class ValidationError(HrflowError):
    """Local, field-scoped input problem detected before any network call."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={"field": field})
        self.field = field


class TransportError(HrflowError):
    """Network failure or malformed response from a remote endpoint."""


class AutomationTimeoutError(TransportError):
    """The automation webhook did not answer within its time bound."""


class RemoteError(HrflowError):
    """A remote call completed but reported a logical failure."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if status is not None:
            merged.setdefault("status", status)
        super().__init__(message, details=merged)
        self.status = status


__all__ = [
    "AutomationTimeoutError",
    "HrflowError",
    "RemoteError",
    "TransportError",
    "ValidationError",
]
