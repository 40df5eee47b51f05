"""Shared fixtures for CLI tests.

Provides temporary manifests covering the resolve outcomes the CLI maps
to exit codes: fully resolved, partly unsatisfied, malformed and too
expensive to search.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def unsatisfied_manifest(tmp_path: Path) -> Path:
    """Create a manifest whose demand needs a mysql release that does not exist."""
    manifest = tmp_path / "broken.yaml"
    manifest.write_text(
        "artifacts:\n"
        "  web:\n"
        "    2.0.0:\n"
        "      mysql: \">= 2.0.0\"\n"
        "  mysql:\n"
        "    1.2.0: {}\n"
        "  cache:\n"
        "    1.1.0: {}\n"
        "demands:\n"
        "  - web\n"
        "  - cache\n"
    )
    return manifest


@pytest.fixture
def malformed_manifest(tmp_path: Path) -> Path:
    """Create a manifest with an invalid constraint operator."""
    manifest = tmp_path / "malformed.yaml"
    manifest.write_text(
        "artifacts:\n"
        "  web:\n"
        "    1.0.0:\n"
        "      mysql: \"=> 1.0\"\n"
    )
    return manifest


@pytest.fixture
def cyclic_manifest(tmp_path: Path) -> Path:
    """Create a manifest whose artifacts depend on each other in a ring."""
    manifest = tmp_path / "cycle.yaml"
    manifest.write_text(
        "artifacts:\n"
        "  A:\n"
        "    1.0.0: {B: \"1.0.0\"}\n"
        "  B:\n"
        "    1.0.0: {C: \"1.0.0\"}\n"
        "  C:\n"
        "    1.0.0: {A: \"1.0.0\"}\n"
        "    0.9.0: {}\n"
        "demands:\n"
        "  - A\n"
    )
    return manifest


@pytest.fixture
def exhaustive_manifest(tmp_path: Path) -> Path:
    """Create a manifest whose only solution is found after many backtracks."""
    lines = ["artifacts:"]
    for name, target in (("A", "B"), ("B", "C"), ("C", "D")):
        lines.append(f"  {name}:")
        for v in ("1.0.0", "1.0.1", "1.0.2"):
            constraint = "= 1.0.0" if target == "D" else "~> 1.0.0"
            lines.append(f"    {v}: {{{target}: \"{constraint}\"}}")
        lines.append(f"    0.0.0: {{{target}: \"0.0.0\"}}")
    lines += [
        "  D:",
        "    1.0.0: {A: \"< 0.0.0\"}",
        "    0.0.0: {A: \"0.0.0\"}",
        "demands:",
        "  - A",
    ]
    manifest = tmp_path / "exhaustive.yaml"
    manifest.write_text("\n".join(lines) + "\n")
    return manifest
