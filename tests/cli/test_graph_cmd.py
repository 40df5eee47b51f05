"""Tests for ``versionsolve graph`` command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from versionsolve.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestGraphCommand:
    """Tests for listing artifacts and cycles."""

    def test_lists_versions(self, runner: CliRunner, manifest_file: Path) -> None:
        result = runner.invoke(cli, ["graph", str(manifest_file)])
        assert result.exit_code == 0
        assert "mysql" in result.output
        assert "2.0.0, 1.2.0" in result.output
        assert "No dependency cycles" in result.output

    def test_reports_cycles(self, runner: CliRunner, cyclic_manifest: Path) -> None:
        result = runner.invoke(cli, ["graph", str(cyclic_manifest)])
        assert result.exit_code == 0
        assert "1 dependency cycle(s)" in result.output
        assert "A -> B -> C -> A" in result.output

    def test_json_output(self, runner: CliRunner, cyclic_manifest: Path) -> None:
        result = runner.invoke(cli, ["graph", str(cyclic_manifest), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "artifacts": {"A": ["1.0.0"], "B": ["1.0.0"], "C": ["1.0.0", "0.9.0"]},
            "cycles": [["A", "B", "C", "A"]],
        }

    def test_malformed_manifest(
        self, runner: CliRunner, malformed_manifest: Path
    ) -> None:
        result = runner.invoke(cli, ["graph", str(malformed_manifest)])
        assert result.exit_code == 2
