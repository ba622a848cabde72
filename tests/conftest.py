"""Shared test fixtures for meshctl.

Provides isolated config environments, a seeded meshconfig file, output
state management, and a CLI runner bound to the root app. These fixtures are
discovered by pytest and available to all test modules without imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from meshctl.output import OutputFormat, OutputManager, reset_output, set_output


SEED_CONFIG: dict[str, Any] = {
    "contexts": {
        "local": {
            "endpoint": "http://localhost:9081",
            "token": "default",
            "platform": "docker",
        },
        "staging": {
            "endpoint": "https://staging.example.com",
            "platform": "kubernetes",
        },
    },
    "current-context": "local",
    "tokens": [
        {"name": "default", "location": "auth.json"},
        {"name": "ci", "location": "/secrets/ci.json"},
    ],
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager binds sys.stdout/sys.stderr when it is created. Once
    CliRunner restores the real streams those references are stale, so a
    fresh manager must be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME into tmp_path, clears the
    MESHCTL_* variables, disables colour, and changes into tmp_path.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("meshctl.config._is_xdg_platform", lambda: True)
    for var in ["MESHCTL_CONFIG", "MESHCTL_CONTEXT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_yaml(path: Path, data: Any) -> Path:
    """Write *data* as YAML to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def read_yaml(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


@pytest.fixture
def config_file(isolated_config: Path) -> Path:
    """A meshconfig seeded with two contexts and two tokens."""
    return write_yaml(isolated_config / "meshconfig.yaml", SEED_CONFIG)


@pytest.fixture
def empty_config_file(isolated_config: Path) -> Path:
    """A meshconfig with no contexts, no current-context, and no tokens."""
    return write_yaml(isolated_config / "meshconfig.yaml", {"contexts": {}, "tokens": []})


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for handler-level tests."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def invoke(cli_runner) -> Callable[..., Any]:
    """Invoke the root app against an explicit meshconfig path.

    Usage::

        result = invoke(config_file, "token", "list")
        result = invoke(config_file, "token", "list", global_args=["--json"])
    """
    from meshctl.app import app

    def _invoke(path: Path, *args: str, global_args: list[str] | None = None):
        argv = ["--no-color", "--config", str(path), *(global_args or []), *args]
        return cli_runner.invoke(app, argv)

    return _invoke
