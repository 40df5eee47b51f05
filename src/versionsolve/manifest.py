"""Manifest loading: YAML or JSON document -> (Graph, demands).

A manifest lists artifact releases with their dependencies and, optionally,
the demands to resolve:

.. code-block:: yaml

    artifacts:
      nginx:
        1.0.0:
          mysql: "= 1.2.0"
      mysql:
        1.2.0: {}
        2.0.0:
    demands:
      - nginx = 1.0.0
      - mysql

A dependency value is a constraint string, a list of constraint strings
(all of which must hold) or empty for "any". A demand is ``"name"``,
``"name <constraint>"`` or a one-entry mapping ``{name: constraint}``.
JSON documents with the same shape are accepted since JSON is valid YAML.
Two-component versions such as ``"1.10"`` must be quoted: YAML reads them
as floats, which would lose trailing zeros, so unquoted float keys are
rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from versionsolve.core.dependency import Demand, Graph
from versionsolve.exceptions import ManifestError, ParseError

logger = logging.getLogger(__name__)


@dataclass
class Manifest:
    """A loaded manifest.

    Attributes:
        graph: The artifact graph built from the ``artifacts`` section.
        demands: Demands from the ``demands`` section, in document order.
    """

    graph: Graph
    demands: list[Demand] = field(default_factory=list)


def load_manifest(path: str | Path) -> Manifest:
    """Read and parse a manifest file.

    Raises:
        ManifestError: If the file cannot be read or is malformed.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest {file_path}: {exc}") from exc
    manifest = parse_manifest(raw)
    logger.debug(
        "Loaded %s: %d releases, %d demands",
        file_path, manifest.graph.artifact_count, len(manifest.demands),
    )
    return manifest


def parse_manifest(text: str) -> Manifest:
    """Parse manifest text.

    Raises:
        ManifestError: If the text is not valid YAML/JSON or has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Invalid manifest syntax: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a mapping with 'artifacts' and 'demands'")

    try:
        graph = _build_graph(data.get("artifacts") or {})
        demands = [_parse_demand(item) for item in data.get("demands") or []]
    except ParseError as exc:
        raise ManifestError(str(exc)) from exc
    return Manifest(graph=graph, demands=demands)


def _build_graph(artifacts: Any) -> Graph:
    if not isinstance(artifacts, dict):
        raise ManifestError("'artifacts' must map names to versions")

    graph = Graph()
    for name, releases in artifacts.items():
        if not isinstance(releases, dict):
            raise ManifestError(f"Artifact {name!r} must map versions to dependencies")
        for version, deps in releases.items():
            artifact = graph.add_artifact(str(name), _version_text(name, version))
            for target, constraint in _iter_dependencies(name, version, deps):
                artifact.depends(target, constraint)
    return graph


def _version_text(name: Any, version: Any) -> str:
    if isinstance(version, str) or (
        isinstance(version, int) and not isinstance(version, bool)
    ):
        return str(version)
    raise ManifestError(
        f"Version {version!r} of {name!r} must be a string or integer; "
        f"quote versions such as \"1.10\""
    )


def _iter_dependencies(name: Any, version: Any, deps: Any) -> list[tuple[str, str | None]]:
    if deps is None:
        return []
    if not isinstance(deps, dict):
        raise ManifestError(
            f"Dependencies of {name}@{version} must be a mapping of name -> constraint"
        )
    edges: list[tuple[str, str | None]] = []
    for target, value in deps.items():
        if value is None or isinstance(value, str):
            edges.append((str(target), value))
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            edges.extend((str(target), v) for v in value)
        else:
            raise ManifestError(
                f"Constraint for {target!r} in {name}@{version} must be a string or list"
            )
    return edges


def _parse_demand(item: Any) -> Demand:
    if isinstance(item, str):
        return Demand.parse(item)
    if isinstance(item, dict) and len(item) == 1:
        ((name, constraint),) = item.items()
        if constraint is not None and not isinstance(constraint, str):
            raise ManifestError(f"Demand constraint for {name!r} must be a string")
        return Demand.coerce((str(name), constraint))
    raise ManifestError(f"Invalid demand entry: {item!r}")
