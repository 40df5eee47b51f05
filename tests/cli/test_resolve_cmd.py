"""Tests for ``versionsolve resolve`` command.

Verifies:
    - Exit code 0 with a table or JSON when every name resolves.
    - Exit code 1 and the unmet constraints when a name is unsatisfied.
    - Exit code 2 on malformed manifests and demands.
    - Exit code 3 when the backtrack bound is hit.
    - ``--demand`` replaces the manifest's demands.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from versionsolve.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestResolveFound:
    """Tests for manifests where every name resolves."""

    def test_exit_code_zero(self, runner: CliRunner, manifest_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(manifest_file)])
        assert result.exit_code == 0
        assert "All demands resolved" in result.output
        assert "nginx" in result.output
        assert "1.2.0" in result.output

    def test_json_output(self, runner: CliRunner, manifest_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(manifest_file), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "mysql": {"status": "found", "version": "1.2.0"},
            "nginx": {"status": "found", "version": "1.0.0"},
        }

    def test_plain_json_output(self, runner: CliRunner, manifest_file: Path) -> None:
        result = runner.invoke(
            cli, ["resolve", str(manifest_file), "--json", "--plain"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"mysql": "1.2.0", "nginx": "1.0.0"}

    def test_demand_option_replaces_manifest_demands(
        self, runner: CliRunner, manifest_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["resolve", str(manifest_file), "-d", "mysql >= 2", "--json", "--plain"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"mysql": "2.0.0"}

    def test_cycle_resolves(self, runner: CliRunner, cyclic_manifest: Path) -> None:
        result = runner.invoke(
            cli, ["resolve", str(cyclic_manifest), "--json", "--plain"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"A": "1.0.0", "B": "1.0.0", "C": "1.0.0"}

    def test_verbose_logs_summary(
        self,
        runner: CliRunner,
        manifest_file: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="versionsolve"):
            result = runner.invoke(cli, ["--verbose", "resolve", str(manifest_file)])
        assert result.exit_code == 0
        assert "Resolved 2 demands" in caplog.text


class TestResolveUnsatisfied:
    """Tests for manifests with an unsatisfiable name."""

    def test_exit_code_one(
        self, runner: CliRunner, unsatisfied_manifest: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(unsatisfied_manifest)])
        assert result.exit_code == 1
        assert "1 artifact(s) unsatisfied" in result.output
        assert ">= 2.0.0" in result.output

    def test_json_reports_unmet_constraints(
        self, runner: CliRunner, unsatisfied_manifest: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(unsatisfied_manifest), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["mysql"] == {"status": "unsatisfied", "constraints": [">= 2.0.0"]}
        assert data["web"] == {"status": "found", "version": "2.0.0"}
        assert data["cache"] == {"status": "found", "version": "1.1.0"}


class TestResolveErrors:
    """Tests for malformed input and exhausted budgets."""

    def test_malformed_manifest(
        self, runner: CliRunner, malformed_manifest: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(malformed_manifest)])
        assert result.exit_code == 2
        assert "Error" in result.output

    def test_malformed_demand_option(
        self, runner: CliRunner, manifest_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(manifest_file), "-d", "mysql => 1"])
        assert result.exit_code == 2

    def test_missing_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(tmp_path / "absent.yaml")])
        assert result.exit_code == 2

    def test_non_positive_timeout_rejected(
        self, runner: CliRunner, manifest_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(manifest_file), "--timeout", "0"])
        assert result.exit_code == 2

    def test_backtrack_bound_exit_code_three(
        self, runner: CliRunner, exhaustive_manifest: Path
    ) -> None:
        result = runner.invoke(
            cli, ["resolve", str(exhaustive_manifest), "--max-backtracks", "5"]
        )
        assert result.exit_code == 3
        assert "backtracks" in result.output

    def test_default_bound_finds_solution(
        self, runner: CliRunner, exhaustive_manifest: Path
    ) -> None:
        result = runner.invoke(
            cli, ["resolve", str(exhaustive_manifest), "--json", "--plain"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "A": "0.0.0", "B": "0.0.0", "C": "0.0.0", "D": "0.0.0",
        }
