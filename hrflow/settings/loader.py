"""Helpers for loading configuration from ``config.toml``."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "HRFLOW_CONFIG"
DEFAULT_WEBHOOK_TIMEOUT = 15.0


class ConfigError(ValueError):
    """Raised when the configuration file is missing required values."""


@dataclass(slots=True)
class WebhookSettings:
    """Where the automation webhook lives and how long a call may take."""

    url: str
    timeout: float = DEFAULT_WEBHOOK_TIMEOUT
    screening_marker: str = "resume screening activated"
    job_posting_marker: str = "job posting"


@dataclass(slots=True)
class BackendSettings:
    url: str
    secrets_file: Path | None = None
    timeout: float = 10.0
    redirect_base: str | None = None

    @property
    def rest_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1"

    @property
    def auth_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/v1"


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"
    structured: bool = True


@dataclass(slots=True)
class AppConfig:
    webhook: WebhookSettings
    backend: BackendSettings | None
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source: Path | None = None


def _config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    candidate: Path
    if explicit:
        candidate = Path(explicit)
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        candidate = Path(env_value) if env_value else PROJECT_ROOT / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_absolute() else Path.cwd() / candidate


def _to_path(value: Any | None) -> Path | None:
    if not value:
        return None
    candidate = Path(str(value)).expanduser()
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _as_float(section: dict[str, Any], key: str, default: float) -> float:
    raw = section.get(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"'{key}' must be positive, got {value}")
    return value


def _build_webhook(section: dict[str, Any]) -> WebhookSettings:
    url = str(section.get("url") or "").strip()
    if not url:
        raise ConfigError("[webhook] url is required")
    settings = WebhookSettings(
        url=url,
        timeout=_as_float(section, "timeout", DEFAULT_WEBHOOK_TIMEOUT),
    )
    if section.get("screening_marker"):
        settings.screening_marker = str(section["screening_marker"])
    if section.get("job_posting_marker"):
        settings.job_posting_marker = str(section["job_posting_marker"])
    return settings


def _build_backend(section: dict[str, Any]) -> BackendSettings | None:
    url = str(section.get("url") or "").strip()
    if not url:
        return None
    return BackendSettings(
        url=url,
        secrets_file=_to_path(section.get("secrets_file")),
        timeout=_as_float(section, "timeout", 10.0),
        redirect_base=section.get("redirect_base"),
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path = _config_path(config_path)
    data = _load_toml(path)

    logging_section = data.get("logging", {})
    logging_settings = LoggingSettings(
        level=str(logging_section.get("level", "INFO")).upper(),
        structured=bool(logging_section.get("structured", True)),
    )

    return AppConfig(
        webhook=_build_webhook(data.get("webhook", {})),
        backend=_build_backend(data.get("backend", {})),
        logging=logging_settings,
        source=path,
    )
