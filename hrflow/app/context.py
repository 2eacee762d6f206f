"""Wires configuration, collaborators and services for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..automation import BannerLoader, WebhookClient
from ..datastore import PostgrestStore
from ..identity import GoTrueClient, SessionManager
from ..notifications import Notifier
from ..security import ChainedSecretProvider, EnvSecretProvider, FileSecretProvider, SecretProvider
from ..services import CandidateScreeningService, JobPostingService
from ..settings import AppConfig, ConfigError


@dataclass(slots=True)
class AppContext:
    config: AppConfig
    sessions: SessionManager
    store: PostgrestStore
    jobs: JobPostingService
    candidates: CandidateScreeningService

    def sign_in(self, secrets: SecretProvider) -> None:
        email = secrets.get_secret("auth.email")
        password = secrets.get_secret("auth.password")
        self.sessions.sign_in(email, password)

    def user_id(self) -> str | None:
        user = self.sessions.user
        return user.id if user else None


def default_secrets(secrets_file: Path | None) -> SecretProvider:
    providers: list[SecretProvider] = [EnvSecretProvider()]
    if secrets_file is not None:
        providers.append(FileSecretProvider(secrets_file))
    return ChainedSecretProvider(providers)


def build_context(config: AppConfig, secrets: SecretProvider, notifier: Notifier) -> AppContext:
    backend = config.backend
    if backend is None:
        raise ConfigError("[backend] url is required for this command")
    api_key = secrets.get_secret("backend.key")

    webhook = WebhookClient(config.webhook)
    identity = GoTrueClient(backend, api_key)
    store = PostgrestStore(backend, api_key, access_token=lambda: sessions.access_token())
    sessions = SessionManager(identity, store, redirect_base=backend.redirect_base)

    def current_user_id() -> str | None:
        user = sessions.user
        return user.id if user else None

    jobs = JobPostingService(
        webhook,
        store,
        notifier,
        webhook_settings=config.webhook,
        current_user_id=current_user_id,
        banner_loader=BannerLoader(timeout=config.webhook.timeout),
    )
    candidates = CandidateScreeningService(
        webhook,
        store,
        notifier,
        webhook_settings=config.webhook,
    )
    return AppContext(
        config=config,
        sessions=sessions,
        store=store,
        jobs=jobs,
        candidates=candidates,
    )


__all__ = ["AppContext", "build_context", "default_secrets"]
