"""Shared test fixtures for svcschema.

Provides reusable fixtures for loading raw spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from svcschema.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def widgets_raw() -> dict[str, Any]:
    """Load the raw widget service spec dict."""
    with open(FIXTURES_DIR / "widgets_service.json") as f:
        return json.load(f)


@pytest.fixture
def widgets_spec_file(tmp_path: Path) -> Path:
    """Copy the widget service spec into tmp_path as ``widgets.json``."""
    path = tmp_path / "specs" / "widgets.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text((FIXTURES_DIR / "widgets_service.json").read_text())
    return path


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    SVCSCHEMA_* environment variables, and changes the working directory to
    tmp_path.
    """
    monkeypatch.setattr("svcschema.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SVCSCHEMA_OUTPUT_DIR", "SVCSCHEMA_SOURCE", "SVCSCHEMA_CACHE_DIR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, plain-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
