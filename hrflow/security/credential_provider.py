"""Secret resolution for backend keys and operator credentials."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from configparser import ConfigParser
from pathlib import Path
from typing import Iterable, Mapping


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


class SecretProvider(ABC):
    """Abstract secret lookup contract; keys look like ``section.option``."""

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``."""

    def get_optional(self, key: str) -> str | None:
        try:
            return self.get_secret(key)
        except SecretNotFoundError:
            return None


class EnvSecretProvider(SecretProvider):
    """Reads ``backend.key`` from ``<PREFIX>BACKEND_KEY``."""

    def __init__(self, prefix: str = "HRFLOW_", env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ
        self._prefix = prefix

    def get_secret(self, key: str) -> str:
        compound = f"{self._prefix}{key}".upper().replace(".", "_")
        value = self._env.get(compound)
        if not value:
            raise SecretNotFoundError(compound)
        return value


class FileSecretProvider(SecretProvider):
    """Loads secrets from an INI file, ``[backend] key = ...``."""

    def __init__(self, path: Path) -> None:
        self._parser = ConfigParser()
        if path.exists():
            self._parser.read(path, encoding="utf-8")

    def get_secret(self, key: str) -> str:
        section, _, option = key.partition(".")
        if not section or not option:
            raise SecretNotFoundError(key)
        if self._parser.has_option(section, option):
            value = self._parser.get(section, option)
            if value:
                return value
        raise SecretNotFoundError(key)


class ChainedSecretProvider(SecretProvider):
    """Tries multiple providers until one returns a secret."""

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = tuple(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                continue
        raise SecretNotFoundError(key)


__all__ = [
    "ChainedSecretProvider",
    "EnvSecretProvider",
    "FileSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
]
