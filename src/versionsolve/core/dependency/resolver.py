"""Backtracking dependency resolution with per-name diagnostics.

The resolver turns a ``Graph`` and a list of demands into a ``Result``.
It runs exhaustive backtracking passes (see ``search.py``). When a pass
finds no complete assignment, the name that conflicted in its deepest
branch is *relaxed*: it is reported as ``Unsatisfied`` and the next pass
searches for the best consistent assignment of everything else. Each pass
relaxes one more name, so the loop ends after at most one pass per name.
Once a pass succeeds, relaxed names that the assignment leaves room for are
reinstated one at a time, so a name is only reported Unsatisfied when no
version of it can join the returned assignment.

Unsatisfiable names never raise. Only malformed input
(``ConstraintParseError``), an exhausted budget (``ResourceExhausted``) and
cancellation (``ResolutionCancelled``) do, and none of them returns a
partial Result.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Union

from versionsolve.core.dependency.constraints import Constraint
from versionsolve.core.dependency.graph import Graph
from versionsolve.core.dependency.result import (
    Found,
    Outcome,
    ResolutionStats,
    Result,
    Unsatisfied,
)
from versionsolve.core.dependency.search import Catalog, SearchBudget, SearchPass
from versionsolve.core.dependency.version import Version
from versionsolve.exceptions import ConstraintParseError

logger = logging.getLogger(__name__)

_DEMAND_RE = re.compile(r"^\s*(?P<name>[^\s=<>~]+)\s*(?P<constraint>.*?)\s*$")

DEFAULT_MAX_BACKTRACKS = 100_000


# ---------------------------------------------------------------------------
# Demand & limits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Demand:
    """A top-level requirement: artifact *name* within *constraint*."""

    name: str
    constraint: Constraint = field(default_factory=Constraint.any)

    @classmethod
    def parse(cls, text: str) -> Demand:
        """Parse ``"name"`` or ``"name <constraint>"`` (e.g. ``"nginx >= 1.0"``).

        Raises:
            ConstraintParseError: If the text is empty or the constraint is malformed.
        """
        m = _DEMAND_RE.match(text)
        if not m:
            raise ConstraintParseError(f"Invalid demand: {text!r}")
        return cls(m.group("name"), Constraint.parse(m.group("constraint")))

    @classmethod
    def coerce(cls, item: DemandLike) -> Demand:
        """Accept a ``Demand``, a plain name, ``(name,)`` or ``(name, constraint)``.

        A plain string is always a bare name; use ``Demand.parse`` for
        ``"name constraint"`` text.

        Raises:
            ConstraintParseError: If the shape or the constraint is invalid.
        """
        if isinstance(item, Demand):
            return item
        if isinstance(item, str):
            if not item.strip():
                raise ConstraintParseError("Demand name must not be empty")
            return cls(item)
        if isinstance(item, (tuple, list)) and 1 <= len(item) <= 2:
            name = item[0]
            if not isinstance(name, str) or not name.strip():
                raise ConstraintParseError(f"Invalid demand name in {item!r}")
            text = item[1] if len(item) == 2 else None
            return cls(name, Constraint.parse(text))
        raise ConstraintParseError(f"Invalid demand: {item!r}")

    def __str__(self) -> str:
        if self.constraint.is_any:
            return self.name
        return f"{self.name} {self.constraint}"


DemandLike = Union[Demand, str, Sequence[str]]


@dataclass(frozen=True)
class ResolverLimits:
    """Resource bounds for one resolution call.

    Attributes:
        max_backtracks: Tentative assignments that may be retracted across
            all passes before ``ResourceExhausted`` is raised. None disables it.
        timeout: Wall-clock budget in seconds. None disables it.
    """

    max_backtracks: int | None = DEFAULT_MAX_BACKTRACKS
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.max_backtracks is not None and self.max_backtracks < 0:
            raise ValueError("max_backtracks must be >= 0 or None")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0 or None")


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class Resolver:
    """Backtracking resolver bound to one graph.

    A resolver holds no search state between calls; every ``resolve`` builds
    its own, so one instance (or one graph) may serve concurrent calls.

    Args:
        graph: The fully built artifact graph. It is never modified.
        limits: Resource bounds; defaults to ``ResolverLimits()``.
    """

    def __init__(self, graph: Graph, limits: ResolverLimits | None = None) -> None:
        self._graph = graph
        self._limits = limits or ResolverLimits()

    @property
    def limits(self) -> ResolverLimits:
        return self._limits

    def resolve(
        self,
        demands: Iterable[DemandLike],
        cancel_event: threading.Event | None = None,
    ) -> Result:
        """Resolve *demands* against the graph.

        Args:
            demands: Top-level requirements; see ``Demand.coerce``.
            cancel_event: Set it from another thread to abort the call.

        Returns:
            A ``Result`` covering every demanded name and every dependency
            target of a found artifact.

        Raises:
            ConstraintParseError: If a demand is malformed.
            ResourceExhausted: If the configured bound is exceeded.
            ResolutionCancelled: If *cancel_event* was set.
        """
        parsed = [Demand.coerce(d) for d in demands]
        seeds = [(d.name, d.constraint) for d in parsed]
        budget = SearchBudget(
            self._limits.max_backtracks, self._limits.timeout, cancel_event
        )
        catalog = Catalog(self._graph)
        history: dict[str, dict[str, None]] = {}
        relaxed: set[str] = set()

        passes = 0

        def run_pass(excluded: set[str]) -> tuple[SearchPass, dict[str, Version] | None]:
            nonlocal passes
            passes += 1
            search = SearchPass(catalog, seeds, frozenset(excluded), history, budget)
            return search, search.run()

        while True:
            search, assignment = run_pass(relaxed)
            if assignment is not None:
                break
            culprit = search.culprit()
            logger.debug(
                "Pass %d found no assignment; giving up on %r (%d conflicts)",
                passes, culprit, search.conflicts[culprit],
            )
            relaxed.add(culprit)

        # A name given up on early may fit once later names were relaxed.
        # Reinstate such names one at a time until none can be.
        reinstated = True
        while reinstated:
            reinstated = False
            for name in sorted(relaxed & search.constrained_names):
                if not search.has_candidates(name):
                    continue
                trial, trial_assignment = run_pass(relaxed - {name})
                if trial_assignment is None:
                    continue
                logger.debug("Pass %d reinstated %r", passes, name)
                relaxed.discard(name)
                search, assignment = trial, trial_assignment
                reinstated = True
                break

        outcomes: dict[str, Outcome] = {
            name: Found(version) for name, version in assignment.items()
        }
        for name in relaxed & search.constrained_names:
            outcomes[name] = Unsatisfied(tuple(history[name]))

        logger.debug(
            "Resolved %d demands: %d found, %d unsatisfied, %d passes, %d backtracks",
            len(parsed), len(assignment), len(outcomes) - len(assignment),
            passes, budget.backtracks,
        )
        return Result(outcomes, ResolutionStats(passes, budget.backtracks))


def resolve(
    graph: Graph,
    demands: Iterable[DemandLike],
    limits: ResolverLimits | None = None,
    cancel_event: threading.Event | None = None,
) -> Result:
    """Resolve *demands* against *graph*; shorthand for ``Resolver(...).resolve``."""
    return Resolver(graph, limits).resolve(demands, cancel_event=cancel_event)
