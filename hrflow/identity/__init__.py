"""Identity collaborator and session handling."""

from __future__ import annotations

from .base import IdentityProvider, Session, SessionEvent, User
from .gotrue import GoTrueClient
from .session import SessionManager

__all__ = [
    "GoTrueClient",
    "IdentityProvider",
    "Session",
    "SessionEvent",
    "SessionManager",
    "User",
]
