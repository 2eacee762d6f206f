"""Session lifecycle on top of an :class:`IdentityProvider`."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable

from ..datastore import RowStore
from ..errors import HrflowError, RemoteError
from ..utils.logging import get_logger
from .base import IdentityProvider, Session, SessionEvent, User

LOGGER = get_logger(__name__)

PROFILES_TABLE = "profiles"
CONFIRM_EMAIL_MESSAGE = "Please check your email to confirm your account"

Listener = Callable[[SessionEvent, Session | None], None]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SessionManager:
    """Owns the current session and notifies subscribers of changes.

    After every session is established a profile row is upserted on a
    background thread. That upsert is best effort: its failures are logged
    and never reach the caller or block sign-in.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        store: RowStore,
        *,
        redirect_base: str | None = None,
    ) -> None:
        self._provider = provider
        self._store = store
        self._redirect_base = redirect_base.rstrip("/") if redirect_base else None
        self._session: Session | None = None
        self._listeners: list[Listener] = []
        self._profile_task: threading.Thread | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_up(self, email: str, password: str, full_name: str) -> Session:
        session = self._provider.sign_up(
            email,
            password,
            full_name=full_name,
            redirect_to=self._redirect("/dashboard"),
        )
        if session is None:
            raise RemoteError(CONFIRM_EMAIL_MESSAGE)
        self.establish(session)
        return session

    def sign_in(self, email: str, password: str) -> Session:
        session = self._provider.sign_in(email, password)
        self.establish(session)
        return session

    def sign_in_with_oauth(self, provider: str = "google") -> str:
        return self._provider.oauth_url(provider, redirect_to=self._redirect("/dashboard"))

    def establish(self, session: Session) -> None:
        """Adopt ``session`` (after sign-in, OAuth callback or restore)."""
        self._session = session
        self._emit(SessionEvent.SIGNED_IN)
        self.ensure_profile_record(session.user, session.access_token)

    def sign_out(self) -> None:
        """Drop the local session even when the provider call fails."""
        session = self._session
        try:
            if session is not None:
                self._provider.sign_out(session.access_token)
        except HrflowError as exc:
            LOGGER.error(
                "Sign out failed at provider; clearing local session anyway",
                extra={"event": "identity.sign_out_error", "reason": exc.message},
            )
        finally:
            self._session = None
            self._emit(SessionEvent.SIGNED_OUT)

    def reset_password(self, email: str) -> None:
        self._provider.reset_password(email, redirect_to=self._redirect("/reset-password"))

    def update_profile(self, full_name: str, avatar_url: str | None = None) -> User:
        session = self._session
        if session is None:
            raise RemoteError("You must be signed in to update your profile")
        metadata = {"full_name": full_name}
        if avatar_url:
            metadata["avatar_url"] = avatar_url
        user = self._provider.update_user(session.access_token, metadata)
        session.user = user
        self._emit(SessionEvent.USER_UPDATED)
        return user

    def ensure_profile_record(self, user: User, access_token: str | None = None) -> threading.Thread:
        """Start the best-effort profile upsert for ``user``.

        The upsert runs as ``access_token`` even if the session is replaced or
        signed out before it gets to the store. Nothing in the sign-in path
        waits on it; short-lived callers may use :meth:`wait_for_profile`.
        """
        worker = threading.Thread(
            target=self._upsert_profile,
            args=(user, access_token),
            name=f"ensure-profile-{user.id}",
            daemon=True,
        )
        worker.start()
        self._profile_task = worker
        return worker

    def wait_for_profile(self, timeout: float) -> bool:
        """Join the latest profile upsert for at most ``timeout`` seconds."""
        worker = self._profile_task
        if worker is None:
            return True
        worker.join(timeout)
        if worker.is_alive():
            LOGGER.warning(
                "Profile upsert still running",
                extra={"event": "identity.profile_upsert_pending", "timeout": timeout},
            )
            return False
        return True

    def _upsert_profile(self, user: User, access_token: str | None) -> None:
        row = {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "avatar_url": user.avatar_url,
            "updated_at": _now(),
        }
        try:
            self._store.upsert(PROFILES_TABLE, row, on_conflict="id", access_token=access_token)
        except Exception as exc:  # best effort: log only
            LOGGER.warning(
                "Profile upsert skipped",
                extra={"event": "identity.profile_upsert_skipped", "user_id": user.id, "reason": str(exc)},
            )
            return
        LOGGER.debug("Profile record ensured", extra={"event": "identity.profile_upserted", "user_id": user.id})

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self._session)

    def _redirect(self, path: str) -> str | None:
        return f"{self._redirect_base}{path}" if self._redirect_base else None


__all__ = ["CONFIRM_EMAIL_MESSAGE", "PROFILES_TABLE", "SessionManager"]
