"""End-to-end tests for the project-refs CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from project_refs import __version__
from project_refs.cli import app


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


class TestLinkCommand:
    def test_write_updates_files(self, runner, simple_monorepo):
        result = runner.invoke(app, ["link", "--root", str(simple_monorepo)])

        assert result.exit_code == 0, result.output
        assert "Updated project references in 3 file(s)" in result.output
        tsconfig = json.loads((simple_monorepo / "packages" / "b" / "tsconfig.json").read_text())
        assert tsconfig["references"] == [{"path": "../a"}]

    def test_updated_paths_printed_verbatim(self, runner, make_monorepo):
        root = make_monorepo({"packages/x:fire:": {"name": "x"}})

        result = runner.invoke(app, ["link", "--root", str(root)])

        assert result.exit_code == 0, result.output
        assert "packages/tsconfig.json" in result.output
        assert "\U0001f525" not in result.output
        packages = json.loads((root / "packages" / "tsconfig.json").read_text())
        assert packages["references"] == [{"path": "x:fire:"}]

    def test_second_run_reports_up_to_date(self, runner, simple_monorepo):
        runner.invoke(app, ["link", "--root", str(simple_monorepo)])

        result = runner.invoke(app, ["link", "--root", str(simple_monorepo)])

        assert result.exit_code == 0
        assert "Project references are up-to-date" in result.output

    def test_lint_out_of_date_exit_code(self, runner, simple_monorepo):
        result = runner.invoke(app, ["link", "--root", str(simple_monorepo), "--action", "lint"])

        assert result.exit_code == 1
        assert "File has out-of-date project references: packages/b/tsconfig.json" in result.output
        assert "not up-to-date" in result.output
        assert not (simple_monorepo / "packages" / "tsconfig.json").exists()

    def test_lint_clean_exit_code(self, runner, simple_monorepo):
        runner.invoke(app, ["link", "--root", str(simple_monorepo)])

        result = runner.invoke(app, ["link", "--root", str(simple_monorepo), "--action", "LINT"])

        assert result.exit_code == 0

    def test_action_from_environment(self, runner, simple_monorepo):
        result = runner.invoke(
            app,
            ["link"],
            env={"PROJECT_REFS_ROOT": str(simple_monorepo), "PROJECT_REFS_ACTION": "lint"},
        )

        assert result.exit_code == 1

    def test_error_exit_code(self, runner, tmp_path):
        result = runner.invoke(app, ["link", "--root", str(tmp_path)])

        assert result.exit_code == 2
        assert "Error:" in result.output
        assert "No workspace configuration found" in result.output


class TestQueryCommand:
    def test_internal_dependencies_by_name(self, runner, simple_monorepo):
        result = runner.invoke(
            app, ["query", "internal-dependencies", "--root", str(simple_monorepo)]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"a": [], "b": ["a"]}

    def test_internal_dependencies_by_path(self, runner, simple_monorepo):
        result = runner.invoke(
            app,
            ["query", "internal-dependencies", "--root", str(simple_monorepo), "--format", "path"],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"packages/a": [], "packages/b": ["packages/a"]}

    def test_internal_dependencies_error(self, runner, tmp_path):
        result = runner.invoke(app, ["query", "internal-dependencies", "--root", str(tmp_path)])

        assert result.exit_code == 2


def test_version(runner):
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
