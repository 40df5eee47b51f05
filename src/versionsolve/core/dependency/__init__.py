"""Artifact graph and backtracking version resolution.

All public names are re-exported here so callers can use
``from versionsolve.core.dependency import X`` without knowing which
submodule defines ``X``.

Model
-----
- **Version**: ordered tuple of non-negative integers.
- **Constraint**: operator + version predicate, or "any".
- **Graph**: name -> releases, each release with dependency edges.
- **Resolver**: (Graph, demands) -> Result, one outcome per reached name.
"""

from versionsolve.core.dependency.version import Version, compare
from versionsolve.core.dependency.constraints import (
    Constraint,
    Dependency,
    Operator,
    normalize,
    satisfies_all,
)
from versionsolve.core.dependency.graph import Artifact, Graph
from versionsolve.core.dependency.result import (
    Found,
    Outcome,
    ResolutionStats,
    Result,
    Unsatisfied,
)
from versionsolve.core.dependency.resolver import (
    DEFAULT_MAX_BACKTRACKS,
    Demand,
    Resolver,
    ResolverLimits,
    resolve,
)

__all__ = [
    "Version",
    "compare",
    "Constraint",
    "Dependency",
    "Operator",
    "normalize",
    "satisfies_all",
    "Artifact",
    "Graph",
    "Found",
    "Outcome",
    "ResolutionStats",
    "Result",
    "Unsatisfied",
    "DEFAULT_MAX_BACKTRACKS",
    "Demand",
    "Resolver",
    "ResolverLimits",
    "resolve",
]
