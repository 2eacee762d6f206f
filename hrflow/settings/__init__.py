"""Settings package exports."""

from .loader import (
    AppConfig,
    BackendSettings,
    ConfigError,
    LoggingSettings,
    WebhookSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "BackendSettings",
    "ConfigError",
    "LoggingSettings",
    "WebhookSettings",
    "load_config",
]
