"""Identity provider backed by a GoTrue endpoint (``/auth/v1``)."""

from __future__ import annotations

import urllib.parse
from typing import Any, Mapping

import requests

from ..errors import RemoteError, TransportError
from ..settings import BackendSettings
from ..utils.logging import get_logger
from .base import Session, User

LOGGER = get_logger(__name__)


class GoTrueClient:
    """Implements :class:`hrflow.identity.IdentityProvider` over HTTP."""

    def __init__(
        self,
        settings: BackendSettings,
        api_key: str,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = settings.auth_url
        self._timeout = settings.timeout
        self._api_key = api_key
        self._http = session or requests.Session()

    def sign_up(
        self,
        email: str,
        password: str,
        *,
        full_name: str,
        redirect_to: str | None = None,
    ) -> Session | None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = self._call(
            "POST",
            "signup",
            params=params,
            body={"email": email, "password": password, "data": {"full_name": full_name}},
        )
        if data.get("access_token"):
            return _session_from(data)
        return None

    def sign_in(self, email: str, password: str) -> Session:
        data = self._call(
            "POST",
            "token",
            params={"grant_type": "password"},
            body={"email": email, "password": password},
        )
        return _session_from(data)

    def oauth_url(self, provider: str, *, redirect_to: str | None = None) -> str:
        params = {"provider": provider}
        if redirect_to:
            params["redirect_to"] = redirect_to
        return f"{self._base_url}/authorize?{urllib.parse.urlencode(params)}"

    def sign_out(self, access_token: str) -> None:
        self._call("POST", "logout", token=access_token)

    def reset_password(self, email: str, *, redirect_to: str | None = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        self._call("POST", "recover", params=params, body={"email": email})

    def update_user(self, access_token: str, metadata: Mapping[str, Any]) -> User:
        data = self._call("PUT", "user", token=access_token, body={"data": dict(metadata)})
        return User.from_payload(data)

    def _call(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
        }
        try:
            response = self._http.request(
                method,
                f"{self._base_url}/{path}",
                params=dict(params or {}),
                json=dict(body) if body is not None else None,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(
                "Unable to reach the identity provider",
                details={"path": path, "reason": str(exc)},
            ) from exc

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        if not response.ok:
            message = ""
            if isinstance(data, dict):
                message = str(
                    data.get("error_description") or data.get("msg") or data.get("message") or ""
                )
            LOGGER.warning(
                "Identity provider rejected request",
                extra={"event": "identity.error", "path": path, "status": response.status_code},
            )
            raise RemoteError(
                message or response.text.strip() or "Authentication request failed",
                status=response.status_code,
            )
        return data if isinstance(data, dict) else {}


def _session_from(data: Mapping[str, Any]) -> Session:
    user_data = data.get("user")
    if not isinstance(user_data, Mapping):
        raise TransportError("Identity provider response is missing the user", details={"keys": sorted(data)})
    expires_in = data.get("expires_in")
    return Session(
        access_token=str(data["access_token"]),
        user=User.from_payload(user_data),
        refresh_token=data.get("refresh_token"),
        expires_in=int(expires_in) if expires_in is not None else None,
    )


__all__ = ["GoTrueClient"]
