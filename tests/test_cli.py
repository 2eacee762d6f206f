from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from hrflow.app import cli
from hrflow.errors import RemoteError
from hrflow.notifications import Level, Notification


def _config(tmp_path: Path, *, backend: bool = True) -> Path:
    body = '[webhook]\nurl = "https://automation.test/hook"\n'
    if backend:
        body += '[backend]\nurl = "https://db.example.co"\n'
    path = tmp_path / "config.toml"
    path.write_text(body, encoding="utf-8")
    return path


class FakeSessions:
    def __init__(self) -> None:
        self.signed_out = False
        self.calls: list[str] = []

    def wait_for_profile(self, timeout: float) -> bool:
        self.calls.append(f"wait:{timeout:g}")
        return True

    def sign_out(self) -> None:
        self.signed_out = True
        self.calls.append("sign_out")


class FakeCandidates:
    def __init__(self, notifier, outcome: Notification) -> None:
        self._notifier = notifier
        self._outcome = outcome

    def trigger_screening(self) -> bool:
        self._notifier.notify(self._outcome)
        return self._outcome.level is not Level.ERROR


def _install_context(monkeypatch: pytest.MonkeyPatch, outcome: Notification, *, sign_in_error=None):
    sessions = FakeSessions()

    def build_context(config, secrets, notifier):
        def sign_in(_secrets) -> None:
            if sign_in_error is not None:
                raise sign_in_error

        return SimpleNamespace(
            config=config,
            sessions=sessions,
            candidates=FakeCandidates(notifier, outcome),
            sign_in=sign_in,
        )

    monkeypatch.setattr(cli, "build_context", build_context)
    return sessions


def test_no_command_prints_help_and_exits_with_usage() -> None:
    assert cli.main([]) == cli.EXIT_USAGE


def test_missing_config_exits_with_usage(tmp_path: Path) -> None:
    assert cli.main(["--config", str(tmp_path / "nope.toml"), "screening", "trigger"]) == cli.EXIT_USAGE


def test_missing_backend_section_exits_with_usage(tmp_path: Path) -> None:
    path = _config(tmp_path, backend=False)
    assert cli.main(["--log-plain", "--config", str(path), "screening", "trigger"]) == cli.EXIT_USAGE


def test_trigger_success_exits_ok(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    sessions = _install_context(monkeypatch, Notification(Level.SUCCESS, "Resume screening triggered successfully!"))

    code = cli.main(["--log-plain", "--config", str(_config(tmp_path)), "screening", "trigger"])

    assert code == cli.EXIT_OK
    assert sessions.signed_out
    assert sessions.calls == ["wait:10", "sign_out"]
    assert "[success] Resume screening triggered successfully!" in capsys.readouterr().out


def test_error_notification_exits_failed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    sessions = _install_context(monkeypatch, Notification(Level.ERROR, "Workflow is inactive"))

    code = cli.main(["--log-plain", "--config", str(_config(tmp_path)), "screening", "trigger"])

    assert code == cli.EXIT_FAILED
    assert sessions.signed_out
    assert "[error] Workflow is inactive" in capsys.readouterr().err


def test_sign_in_failure_exits_failed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_context(
        monkeypatch,
        Notification(Level.SUCCESS, "unused"),
        sign_in_error=RemoteError("Invalid login credentials", status=400),
    )

    code = cli.main(["--log-plain", "--config", str(_config(tmp_path)), "screening", "trigger"])

    assert code == cli.EXIT_FAILED
