"""Tests for the root app and the console-script entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from meshctl import __version__
from meshctl.app import app, main
from meshctl.exceptions import NotFoundError
from meshctl.exit_codes import EXIT_GENERIC_FAILURE, EXIT_NOT_FOUND

from conftest import write_yaml


def test_version(cli_runner) -> None:
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"meshctl {__version__}" in result.output


def test_config_from_env(isolated_config: Path, cli_runner, monkeypatch: pytest.MonkeyPatch) -> None:
    path = write_yaml(isolated_config / "env.yaml", {"tokens": [{"name": "envtok"}]})
    monkeypatch.setenv("MESHCTL_CONFIG", str(path))
    result = cli_runner.invoke(app, ["--no-color", "token", "list"])
    assert result.exit_code == 0, result.output
    assert "envtok" in result.output.splitlines()


def test_default_config_location(isolated_config: Path, cli_runner) -> None:
    result = cli_runner.invoke(app, ["--no-color", "context", "create", "local"])
    assert result.exit_code == 0, result.output
    assert (isolated_config / "config" / "meshctl" / "config.yaml").is_file()


def test_verbose_shows_config_path(config_file: Path, invoke) -> None:
    result = invoke(config_file, "token", "list", global_args=["--verbose"])
    assert f"[debug] Using config: {config_file}" in result.output


def test_main_maps_meshctl_error(monkeypatch: pytest.MonkeyPatch, isolated_config: Path) -> None:
    def _boom() -> None:
        raise NotFoundError("gone")

    monkeypatch.setattr("meshctl.app.app", _boom)
    monkeypatch.setattr("meshctl.app._setup_signal_handlers", lambda: None)
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == EXIT_NOT_FOUND


def test_main_writes_crash_log(
    monkeypatch: pytest.MonkeyPatch, isolated_config: Path, capsys
) -> None:
    def _boom() -> None:
        raise RuntimeError("unexpected")

    monkeypatch.setattr("meshctl.app.app", _boom)
    monkeypatch.setattr("meshctl.app._setup_signal_handlers", lambda: None)
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == EXIT_GENERIC_FAILURE
    logs = list((isolated_config / "data" / "meshctl" / "logs").glob("crash-*.log"))
    assert len(logs) == 1
    assert "RuntimeError: unexpected" in logs[0].read_text()
    assert "Unexpected error. Debug log:" in capsys.readouterr().err


def test_crash_log_single_logs_dir_on_non_xdg(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys
) -> None:
    def _boom() -> None:
        raise RuntimeError("unexpected")

    monkeypatch.setattr("meshctl.config._is_xdg_platform", lambda: False)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    monkeypatch.setattr("meshctl.app.app", _boom)
    monkeypatch.setattr("meshctl.app._setup_signal_handlers", lambda: None)
    with pytest.raises(SystemExit):
        main()
    assert len(list((tmp_path / ".meshctl" / "logs").glob("crash-*.log"))) == 1
    assert not (tmp_path / ".meshctl" / "logs" / "logs").exists()
