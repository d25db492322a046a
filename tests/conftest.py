"""Shared test fixtures for swagger-refract.

Provides fixture documents, an isolated configuration environment, output
state management, and a CLI runner.  These fixtures are discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from swagger_refract.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Source documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_text(petstore_path: Path) -> str:
    """The petstore YAML document as text."""
    return petstore_path.read_text(encoding="utf-8")


@pytest.fixture
def minimal_path() -> Path:
    return FIXTURES_DIR / "minimal.json"


@pytest.fixture
def minimal_text(minimal_path: Path) -> str:
    """A one-operation JSON document."""
    return minimal_path.read_text(encoding="utf-8")


@pytest.fixture
def make_swagger():
    """Return a helper that prefixes a YAML fragment with a Swagger 2.0 header."""

    def _make(body: str) -> str:
        header = textwrap.dedent("""\
            swagger: "2.0"
            info:
              title: Test
              version: "1.0"
        """)
        return header + textwrap.dedent(body)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the config directory at ``tmp_path/config``, clears every
    ``SWAGGER_REFRACT_*`` environment variable, and changes the working
    directory to ``tmp_path``.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("swagger_refract.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in [
        "SWAGGER_REFRACT_SOURCE_MAP",
        "SWAGGER_REFRACT_DOCS_URL",
        "SWAGGER_REFRACT_STRICT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
