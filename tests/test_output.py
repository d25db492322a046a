"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- Parse result and annotation reporting
- print_table in JSON and plain modes
- Global instance management
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from swagger_refract import output as output_module
from swagger_refract.elements import Annotation, SourceMap
from swagger_refract.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("swagger_refract.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("swagger_refract.output._is_tty", lambda: True)


@pytest.fixture()
def clean_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


def _warning(message: str = "lost", source_map=None) -> Annotation:
    return Annotation(severity="warning", code=3, message=message, source_map=source_map)


# ------------------------------------------------------------------ #
# Format resolution
# ------------------------------------------------------------------ #


class TestFormatResolution:

    def test_auto_on_tty_is_rich(self, tty, clean_env) -> None:
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_off_tty_is_plain(self, non_tty, clean_env) -> None:
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_without_color_is_plain(self, tty, clean_env) -> None:
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format(self, tty) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:

    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default(self, clean_env) -> None:
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Data output
# ------------------------------------------------------------------ #


class TestPrintResult:

    def test_plain_is_json_on_stdout(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_result({"element": "parseResult"})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"element": "parseResult"}
        assert captured.err == ""

    def test_output_file(self, tmp_path: Path, capsys) -> None:
        target = tmp_path / "out.json"
        OutputManager(format=OutputFormat.PLAIN).print_result({"a": 1}, str(target))
        assert json.loads(target.read_text(encoding="utf-8")) == {"a": 1}
        assert capsys.readouterr().out == ""


class TestPrintTable:

    def test_json(self, capsys) -> None:
        OutputManager(format=OutputFormat.JSON).print_table(["code", "message"], [["3", "lost"]])
        assert json.loads(capsys.readouterr().out) == [{"code": "3", "message": "lost"}]

    def test_plain(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(["code", "message"], [["3", "lost"]])
        assert capsys.readouterr().out == "code\tmessage\n3\tlost\n"


# ------------------------------------------------------------------ #
# Diagnostics
# ------------------------------------------------------------------ #


class TestDiagnostics:

    def test_warning_annotation_goes_to_stderr(self, capsys) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        out.annotation(_warning("lost", SourceMap(offset=4, length=10)))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Warning: [3] lost (offset 4, length 10)\n"

    def test_error_annotation(self, capsys) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        out.annotation(Annotation(severity="error", code=1, message="bad input"))
        assert capsys.readouterr().err == "Error: [1] bad input\n"

    def test_quiet_hides_warnings_not_errors(self, capsys) -> None:
        out = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        out.annotation(_warning())
        out.info("hello")
        out.annotation(Annotation(severity="error", code=1, message="bad input"))
        assert capsys.readouterr().err == "Error: [1] bad input\n"

    def test_debug_needs_verbose(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:

    def test_lazy_default(self) -> None:
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_convenience_functions_delegate(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.warning("careful")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "Warning: careful\n"
