"""End-to-end tests for the svcschema CLI."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from svcschema import __version__
from svcschema.app import app

runner = CliRunner()

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
WIDGETS_SPEC = str(FIXTURES_DIR / "widgets_service.json")


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _flat(text: str) -> str:
    """Undo rich's line wrapping so messages compare as single lines."""
    return " ".join(_strip_ansi(text).split())


@pytest.fixture
def workspace(isolated_config: Path, widgets_spec_file: Path) -> Path:
    """Isolated cwd with ``specs/widgets.json`` in place."""
    return isolated_config


# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"svcschema {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        text = _strip_ansi(result.output)
        for name in ("build", "validate", "inspect", "config"):
            assert name in text


# ---------------------------------------------------------------------------
# build
# ---------------------------------------------------------------------------


class TestBuild:
    def test_build_with_default_source(self, workspace: Path) -> None:
        result = runner.invoke(app, ["--json", "-q", "build", "widgets"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows == [
            {
                "Service": "widgets",
                "Status": "ok",
                "Operations": "6",
                "Errors": "3",
                "Resources": "3",
                "Output": str(Path("schemas") / "widgets.json"),
            }
        ]
        doc = json.loads((workspace / "schemas" / "widgets.json").read_text())
        assert doc["schemaVersion"] == "1.0.0"

    def test_build_with_explicit_options(self, workspace: Path) -> None:
        out_dir = workspace / "elsewhere"
        result = runner.invoke(
            app,
            [
                "build",
                "widgets",
                "--source",
                str(workspace / "specs" / "{service}.json"),
                "--output-dir",
                str(out_dir),
                "--workers",
                "2",
                "--no-cache",
            ],
        )
        assert result.exit_code == 0, result.output
        assert (out_dir / "widgets.json").is_file()

    def test_continue_on_error_reports_failure(self, workspace: Path) -> None:
        result = runner.invoke(
            app, ["--plain", "build", "widgets", "ghost", "--continue-on-error"]
        )
        assert result.exit_code == 1
        assert "failed" in result.output
        assert "1 of 2 service(s) failed" in _flat(result.output)
        assert (workspace / "schemas" / "widgets.json").is_file()

    def test_fail_fast_aborts(self, workspace: Path) -> None:
        result = runner.invoke(
            app, ["build", "ghost", "widgets", "--fail-fast", "--workers", "1"]
        )
        assert result.exit_code == 9
        assert "Build aborted at 'ghost'" in _flat(result.output)

    def test_rebuild_after_changing_source(self, workspace: Path) -> None:
        assert runner.invoke(app, ["-q", "build", "widgets"]).exit_code == 0
        other = workspace / "other"
        other.mkdir()
        (other / "widgets.json").write_text(json.dumps({"operations": {"PingThing": {}}}))

        result = runner.invoke(app, ["-q", "build", "widgets", "--source", "other/{service}.json"])
        assert result.exit_code == 0, result.output
        doc = json.loads((workspace / "schemas" / "widgets.json").read_text())
        assert [op["name"] for op in doc["operations"]] == ["ping-thing"]

    def test_rebuild_after_editing_local_spec(self, workspace: Path) -> None:
        assert runner.invoke(app, ["-q", "build", "widgets"]).exit_code == 0
        (workspace / "specs" / "widgets.json").write_text(
            json.dumps({"operations": {"PingThing": {}}})
        )
        assert runner.invoke(app, ["-q", "build", "widgets"]).exit_code == 0
        doc = json.loads((workspace / "schemas" / "widgets.json").read_text())
        assert [op["name"] for op in doc["operations"]] == ["ping-thing"]

    def test_env_output_dir(self, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SVCSCHEMA_OUTPUT_DIR", str(workspace / "from-env"))
        result = runner.invoke(app, ["-q", "build", "widgets"])
        assert result.exit_code == 0, result.output
        assert (workspace / "from-env" / "widgets.json").is_file()

    def test_duplicate_services(self, workspace: Path) -> None:
        result = runner.invoke(app, ["build", "widgets", "widgets"])
        assert result.exit_code == 2
        assert "listed more than once" in _flat(result.output)

    def test_path_like_service_name(self, workspace: Path) -> None:
        result = runner.invoke(app, ["build", "../escaped"])
        assert result.exit_code == 2
        assert "Invalid service name" in _flat(result.output)
        assert not (workspace / "escaped.json").exists()

    def test_invalid_project_config(self, workspace: Path) -> None:
        (workspace / "svcschema.json").write_text("[]")
        result = runner.invoke(app, ["build", "widgets"])
        assert result.exit_code == 1
        assert "must be a JSON object" in _flat(result.output)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_built_document_is_valid(self, workspace: Path) -> None:
        assert runner.invoke(app, ["-q", "build", "widgets"]).exit_code == 0
        result = runner.invoke(app, ["validate", str(workspace / "schemas" / "widgets.json")])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_invalid_document(self, workspace: Path) -> None:
        path = workspace / "broken.json"
        path.write_text(json.dumps({"service": "x", "operations": [{"name": "a"}]}))
        result = runner.invoke(app, ["--json", "validate", str(path)])
        assert result.exit_code == 8
        assert "Missing required field 'metadata'" in _flat(result.output)
        assert "operations[0] (a): missing required field 'httpUri'" in _flat(result.output)

    def test_unreadable_document(self, workspace: Path) -> None:
        path = workspace / "garbage.json"
        path.write_text("{nope")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 7


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    def test_operations(self) -> None:
        result = runner.invoke(app, ["--json", "-q", "inspect", "operations", WIDGETS_SPEC])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        first = rows[0]
        assert first["Name"] == "list-widgets"
        assert first["Method"] == "GET"
        assert first["URI"] == "/widgets"
        assert first["Paginated"] == "yes"
        assert {r["Name"]: r["Deprecated"] for r in rows}["delete-widget"] == "yes"

    def test_errors(self) -> None:
        result = runner.invoke(app, ["--json", "-q", "inspect", "errors", WIDGETS_SPEC])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["Status"] for r in rows] == ["429", "409", "500"]

    def test_resources(self) -> None:
        result = runner.invoke(app, ["--json", "-q", "inspect", "resources", WIDGETS_SPEC])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [(r["Resource"], r["Kind"]) for r in rows] == [
            ("widgets", "list_inferred"),
            ("parts", "list_inferred"),
            ("widget", "crud_inferred"),
        ]

    def test_shape_marks_cycles(self) -> None:
        result = runner.invoke(app, ["--json", "-q", "inspect", "shape", WIDGETS_SPEC, "Widget"])
        assert result.exit_code == 0
        tree = json.loads(result.stdout)
        assert tree["kind"] == "record"
        assert tree["children"]["Parent"]["circular"] is True
        assert tree["children"]["Parent"]["kind"] == "any"

    def test_unknown_shape(self) -> None:
        result = runner.invoke(app, ["inspect", "shape", WIDGETS_SPEC, "Nope"])
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_missing_spec_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["inspect", "operations", str(tmp_path / "none.json")])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfig:
    def test_set_then_show(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "build.workers", "8"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["build"]["workers"] == 8

    def test_set_unknown_key(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "build.threads", "8"])
        assert result.exit_code == 2
        assert "Unknown config key" in _flat(result.output)

    def test_show_resolved_includes_cache_dir(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "-q", "config", "show", "--resolved"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["cache"]["directory"] == str(isolated_config / "cache" / "svcschema")

    def test_reset_force(self, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "build.workers", "8"])
        result = runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0
        result = runner.invoke(app, ["--json", "-q", "config", "show"])
        assert json.loads(result.stdout)["build"]["workers"] == 4
