"""Identity collaborator contract and session value types."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol


@dataclass(slots=True)
class User:
    id: str
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            metadata=dict(data.get("user_metadata") or {}),
        )

    @property
    def full_name(self) -> str:
        return str(self.metadata.get("full_name") or self.metadata.get("name") or "")

    @property
    def avatar_url(self) -> str:
        return str(self.metadata.get("avatar_url") or self.metadata.get("picture") or "")


@dataclass(slots=True)
class Session:
    access_token: str
    user: User
    refresh_token: str | None = None
    expires_in: int | None = None


class SessionEvent(enum.Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    USER_UPDATED = "user_updated"


class IdentityProvider(Protocol):
    """Hosted auth service. Failures raise :class:`hrflow.errors.RemoteError`."""

    def sign_up(
        self,
        email: str,
        password: str,
        *,
        full_name: str,
        redirect_to: str | None = None,
    ) -> Session | None:
        """Register a user; ``None`` means e-mail confirmation is pending."""

    def sign_in(self, email: str, password: str) -> Session:
        """Exchange credentials for a session."""

    def oauth_url(self, provider: str, *, redirect_to: str | None = None) -> str:
        """Return the URL that starts an OAuth sign-in."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session tied to ``access_token``."""

    def reset_password(self, email: str, *, redirect_to: str | None = None) -> None:
        """Send a password-reset e-mail."""

    def update_user(self, access_token: str, metadata: Mapping[str, Any]) -> User:
        """Merge ``metadata`` into the user's profile metadata."""


__all__ = ["IdentityProvider", "Session", "SessionEvent", "User"]
