"""Tests for the root application and the console-script entry point."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from crude import __version__
from crude import app as app_module
from crude.app import app, main
from crude.exceptions import ConfigError, NotFoundError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestRootApp:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"crude {__version__}"

    def test_no_args_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, [])
        assert "Usage" in result.output

    @pytest.mark.parametrize("command", ["init", "pluralize", "resources", "url", "call"])
    def test_commands_registered(self, runner: CliRunner, command: str) -> None:
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0, result.output


class TestMain:
    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)

    def _raising(self, exc: BaseException):
        def fake_app() -> None:
            raise exc

        return fake_app

    def test_crude_error_exit_code(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        monkeypatch.setattr(app_module, "app", self._raising(NotFoundError("HTTP 404")))
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 4
        assert "HTTP 404" in capsys.readouterr().err

    def test_config_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "app", self._raising(ConfigError("bad")))
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        monkeypatch.setattr(app_module, "app", self._raising(RuntimeError("boom")))
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Unexpected error: boom" in capsys.readouterr().err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "app", self._raising(KeyboardInterrupt()))
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 130
