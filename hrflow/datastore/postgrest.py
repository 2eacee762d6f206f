"""Row store backed by a PostgREST endpoint (``/rest/v1``)."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

import requests

from ..errors import RemoteError, TransportError
from ..settings import BackendSettings
from ..utils.logging import get_logger
from .base import Filters, Row

LOGGER = get_logger(__name__)


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestStore:
    """Thin HTTP adapter implementing :class:`hrflow.datastore.RowStore`."""

    def __init__(
        self,
        settings: BackendSettings,
        api_key: str,
        *,
        session: requests.Session | None = None,
        access_token: Callable[[], str | None] | None = None,
    ) -> None:
        self._base_url = settings.rest_url
        self._timeout = settings.timeout
        self._api_key = api_key
        self._session = session or requests.Session()
        self._access_token = access_token

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        columns: str = "*",
        order: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        params = self._params(filters)
        params["select"] = columns
        if order:
            params["order"] = f"{order}.{'desc' if descending else 'asc'}"
        return self._request("GET", table, params=params)

    def insert(self, table: str, row: Mapping[str, Any]) -> list[Row]:
        return self._request(
            "POST",
            table,
            body=dict(row),
            prefer="return=representation",
        )

    def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> list[Row]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        return self._request(
            "PATCH",
            table,
            params=self._params(filters),
            body=dict(patch),
            prefer="return=representation",
        )

    def upsert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        on_conflict: str,
        access_token: str | None = None,
    ) -> list[Row]:
        return self._request(
            "POST",
            table,
            params={"on_conflict": on_conflict},
            body=dict(row),
            prefer="resolution=merge-duplicates,return=representation",
            token=access_token,
        )

    def _params(self, filters: Filters | None) -> dict[str, str]:
        return {str(key): _filter_value(value) for key, value in (filters or {}).items()}

    def _headers(self, prefer: str | None, token: str | None = None) -> dict[str, str]:
        if token is None and self._access_token is not None:
            token = self._access_token()
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
        prefer: str | None = None,
        token: str | None = None,
    ) -> list[Row]:
        url = f"{self._base_url}/{table}"
        try:
            response = self._session.request(
                method,
                url,
                params=dict(params or {}),
                json=body,
                headers=self._headers(prefer, token),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(
                "Unable to reach the data store",
                details={"table": table, "reason": str(exc)},
            ) from exc

        if not response.ok:
            message = _error_message(response) or f"Data store request failed ({response.status_code})"
            LOGGER.warning(
                "Data store rejected request",
                extra={"event": "datastore.error", "table": table, "method": method, "status": response.status_code},
            )
            raise RemoteError(message, status=response.status_code, details={"table": table})

        if not response.content:
            return []
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise TransportError(
                "Failed to parse data store response",
                details={"table": table, "response": response.text[:200]},
            ) from exc
        if isinstance(data, dict):
            return [data]
        return list(data)


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = data.get(key)
            if value:
                return str(value)
    return response.text.strip()


__all__ = ["PostgrestStore"]
