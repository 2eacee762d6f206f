"""User-visible transient notifications."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Protocol


class Level(enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    level: Level
    message: str


class Notifier(Protocol):
    """Receives one notification per finished user action."""

    def notify(self, notification: Notification) -> None:
        """Show ``notification`` to the user."""


class RecordingNotifier:
    """Keeps every notification in memory; used by the CLI and in tests."""

    def __init__(self, listener: Callable[[Notification], None] | None = None) -> None:
        self.history: list[Notification] = []
        self._listener = listener

    def notify(self, notification: Notification) -> None:
        self.history.append(notification)
        if self._listener is not None:
            self._listener(notification)

    def messages(self, level: Level | None = None) -> list[str]:
        return [n.message for n in self.history if level is None or n.level is level]

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None


def success(notifier: Notifier, message: str) -> None:
    notifier.notify(Notification(Level.SUCCESS, message))


def error(notifier: Notifier, message: str) -> None:
    notifier.notify(Notification(Level.ERROR, message))


__all__ = [
    "Level",
    "Notification",
    "Notifier",
    "RecordingNotifier",
    "error",
    "success",
]
