"""Tests for the output formatting system.

Covers format resolution, colour disabling, stdout/stderr discipline,
quiet and verbose modes, tables, and the global instance helpers.
"""

from __future__ import annotations

import json

import pytest

from meshctl import output as output_module
from meshctl.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("meshctl.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("meshctl.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_with_no_color(self, tty):
        assert OutputManager(format=OutputFormat.AUTO, no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_kept(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStreams:
    def test_data_goes_to_stdout(self, non_tty, capsys):
        OutputManager(no_color=True).print_data("foo")
        captured = capsys.readouterr()
        assert captured.out == "foo\n"
        assert captured.err == ""

    def test_diagnostics_go_to_stderr(self, non_tty, capsys):
        mgr = OutputManager(no_color=True)
        mgr.info("info line")
        mgr.success("done")
        mgr.warning("careful")
        mgr.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == [
            "info line",
            "done",
            "Warning: careful",
            "Error: broken",
        ]

    def test_quiet_keeps_warnings_and_errors(self, non_tty, capsys):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        mgr.suggest("hidden")
        mgr.warning("shown")
        mgr.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert err.count("shown") == 2

    def test_debug_only_when_verbose(self, non_tty, capsys):
        OutputManager(no_color=True).debug("quiet")
        OutputManager(no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "[debug] loud" in err


class TestStructuredOutput:
    def test_json_document(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_json({"name": "foo"})
        assert json.loads(capsys.readouterr().out) == {"name": "foo"}

    def test_plain_table(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(["A", "B"], [["1", "2"]])
        assert capsys.readouterr().out == "A\tB\n1\t2\n"

    def test_json_table(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(["A", "B"], [["1", "2"]])
        assert json.loads(capsys.readouterr().out) == [{"A": "1", "B": "2"}]


class TestGlobalInstance:
    def test_lazy_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_and_use(self, capsys):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("via global")
        output_module.warning("w")
        captured = capsys.readouterr()
        assert captured.out == "via global\n"
        assert captured.err == "Warning: w\n"

    def test_module_table_uses_global_format(self, capsys):
        set_output(OutputManager(format=OutputFormat.JSON))
        output_module.print_table(["Name"], [["local"]])
        assert json.loads(capsys.readouterr().out) == [{"Name": "local"}]
