"""Artifact graph data structure.

Implements the universe the resolver searches: artifact releases keyed by
(name, version), each carrying dependency edges onto other artifact names,
plus name-level cycle detection used as a diagnostic.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from versionsolve.core.dependency.constraints import Constraint, Dependency
from versionsolve.core.dependency.version import Version


# ---------------------------------------------------------------------------
# Artifact: A vertex in the graph
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Artifact:
    """A specific release of an artifact and its dependency edges.

    Returned by ``Graph.add_artifact``; ``depends`` appends an edge and
    returns the same artifact so declarations can be chained::

        graph.add_artifact("A", "1.0.0").depends("B", "~> 1.0").depends("C")
    """

    name: str
    version: Version
    dependencies: list[Dependency] = field(default_factory=list)

    def depends(self, name: str, constraint: str | Constraint | None = "any") -> Artifact:
        """Declare that this release requires *name* within *constraint*.

        Repeated declarations accumulate; all of them must hold.

        Args:
            name: Target artifact name. It does not need to exist in the graph.
            constraint: Constraint text, defaulting to any version.

        Returns:
            This artifact, for chaining.

        Raises:
            ConstraintParseError: If *constraint* is malformed.
        """
        self.dependencies.append(Dependency(name, Constraint.parse(constraint)))
        return self

    def __repr__(self) -> str:
        return f"Artifact({self.name!r}, {str(self.version)!r})"


# ---------------------------------------------------------------------------
# Graph: name -> releases
# ---------------------------------------------------------------------------


class Graph:
    """All known artifact releases and their dependency edges.

    A graph is populated once by a caller and then handed to the resolver,
    which only reads it. Concurrent resolutions against a fully built graph
    need no locking; building it concurrently is not supported.
    """

    def __init__(self) -> None:
        self._artifacts: dict[str, dict[Version, Artifact]] = {}

    @property
    def names(self) -> set[str]:
        """Return the set of names with at least one registered release."""
        return set(self._artifacts)

    @property
    def artifact_count(self) -> int:
        """Return the total number of (name, version) releases."""
        return sum(len(releases) for releases in self._artifacts.values())

    def __contains__(self, name: object) -> bool:
        return name in self._artifacts

    def add_artifact(self, name: str, version: str | Version) -> Artifact:
        """Register a release, or return the existing one for the same key.

        Versions equal up to trailing zeros share one release, displayed
        with the longest form declared (``1.0`` then ``1.0.0`` gives
        ``1.0.0`` in either order).

        Args:
            name: Artifact name.
            version: Version text or ``Version``.

        Returns:
            The ``Artifact`` registered under (name, version).

        Raises:
            ParseError: If *version* is malformed.
        """
        parsed = Version.parse(version)
        releases = self._artifacts.setdefault(name, {})
        artifact = releases.get(parsed)
        if artifact is None:
            artifact = Artifact(name, parsed)
            releases[parsed] = artifact
        elif len(parsed.components) > len(artifact.version.components):
            artifact.version = parsed
        return artifact

    def get_artifact(self, name: str, version: str | Version) -> Artifact | None:
        """Retrieve a release by name and version, or None if absent."""
        return self._artifacts.get(name, {}).get(Version.parse(version))

    def versions_of(self, name: str) -> list[Version]:
        """Return all versions registered for *name*, newest first.

        An unknown name yields an empty list: an artifact with no published
        versions is a valid state, not an error.
        """
        releases = self._artifacts.get(name, {})
        return sorted((a.version for a in releases.values()), reverse=True)

    def detect_cycles(self) -> list[list[str]]:
        """Detect name-level dependency cycles using iterative DFS.

        Versions are collapsed so an edge A -> B exists if any release of A
        depends on B. Cycles are legal input for the resolver; this is a
        diagnostic only.

        Returns:
            A list of cycles, each a path of names that starts and ends at
            the same name (e.g. ``["A", "B", "C", "A"]``). Empty if acyclic.
        """
        adj: dict[str, set[str]] = defaultdict(set)
        for name, releases in self._artifacts.items():
            for artifact in releases.values():
                for dep in artifact.dependencies:
                    adj[name].add(dep.name)

        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = defaultdict(int)
        cycles: list[list[str]] = []

        for root in sorted(adj):
            if color[root] != WHITE:
                continue
            path = [root]
            color[root] = GRAY
            stack = [iter(sorted(adj[root]))]
            while stack:
                child = next(stack[-1], None)
                if child is None:
                    stack.pop()
                    color[path.pop()] = BLACK
                    continue
                if color[child] == GRAY:
                    start = path.index(child)
                    cycles.append(path[start:] + [child])
                elif color[child] == WHITE:
                    color[child] = GRAY
                    path.append(child)
                    stack.append(iter(sorted(adj.get(child, ()))))

        return cycles
