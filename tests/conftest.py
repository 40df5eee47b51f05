"""Shared fixtures for versionsolve tests."""

import pathlib

import pytest


@pytest.fixture
def manifest_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a small resolvable manifest: nginx pins an older mysql."""
    manifest = tmp_path / "deps.yaml"
    manifest.write_text(
        "artifacts:\n"
        "  nginx:\n"
        "    1.0.0:\n"
        "      mysql: \"= 1.2.0\"\n"
        "  mysql:\n"
        "    1.2.0: {}\n"
        "    2.0.0: {}\n"
        "demands:\n"
        "  - nginx = 1.0.0\n"
        "  - mysql\n"
    )
    return manifest
