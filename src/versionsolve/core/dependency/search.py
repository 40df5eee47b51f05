"""One backtracking pass over artifact names.

A ``SearchPass`` treats every artifact name as a decision variable whose
domain is the name's versions, newest first, filtered by the constraints
accumulated for it so far. It walks an explicit decision stack instead of
recursing, so deep or cyclic graphs cannot overflow the interpreter stack
and the ``SearchBudget`` can stop it at any step.

Conflicts are charged to the *target* of the edge that could not be
honoured: either the target's fixed version fails the new constraint, or
the target is left with no candidate at all. When a pass fails, the name
that conflicted in the deepest branch is the one the resolver gives up on.
"""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from versionsolve.core.dependency.constraints import (
    Constraint,
    Dependency,
    satisfies_all,
)
from versionsolve.core.dependency.graph import Graph
from versionsolve.core.dependency.version import Version
from versionsolve.exceptions import ResolutionCancelled, ResourceExhausted


# ---------------------------------------------------------------------------
# SearchBudget: Backtrack / wall-clock / cancellation guard
# ---------------------------------------------------------------------------


class SearchBudget:
    """Bounds one resolution call across all of its passes.

    Args:
        max_backtracks: Maximum retractions allowed, or None for no limit.
        timeout: Wall-clock budget in seconds, or None for no limit.
        cancel_event: Optional event; once set, the next checkpoint raises.
    """

    def __init__(
        self,
        max_backtracks: int | None = None,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.max_backtracks = max_backtracks
        self.timeout = timeout
        self.backtracks = 0
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancel_event = cancel_event

    def checkpoint(self) -> None:
        """Raise if the call was cancelled or ran out of time."""
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise ResolutionCancelled("Resolution was cancelled")
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise ResourceExhausted(
                f"Resolution exceeded its {self.timeout}s time budget "
                f"after {self.backtracks} backtracks"
            )

    def charge_backtrack(self) -> None:
        """Count one retraction and raise once the limit is passed."""
        self.backtracks += 1
        if self.max_backtracks is not None and self.backtracks > self.max_backtracks:
            raise ResourceExhausted(
                f"Resolution exceeded {self.max_backtracks} backtracks"
            )


# ---------------------------------------------------------------------------
# Catalog: Per-call read-only view of the graph
# ---------------------------------------------------------------------------


class Catalog:
    """Memoized lookups into a ``Graph`` for the lifetime of one call.

    The graph is never written to; the caches are private to the call so
    concurrent resolutions do not share mutable state.
    """

    def __init__(self, graph: Graph) -> None:
        self._graph = graph
        self._versions: dict[str, list[Version]] = {}
        self._edges: dict[tuple[str, Version], list[Dependency]] = {}

    def versions(self, name: str) -> list[Version]:
        cached = self._versions.get(name)
        if cached is None:
            cached = self._versions[name] = self._graph.versions_of(name)
        return cached

    def dependencies(self, name: str, version: Version) -> list[Dependency]:
        key = (name, version)
        cached = self._edges.get(key)
        if cached is None:
            artifact = self._graph.get_artifact(name, version)
            cached = list(artifact.dependencies) if artifact else []
            self._edges[key] = cached
        return cached


# ---------------------------------------------------------------------------
# SearchPass: Depth-first search with an explicit decision stack
# ---------------------------------------------------------------------------


@dataclass
class _Frame:
    """A decision point on the stack."""

    name: str
    candidates: deque[Version]
    chosen: Version | None = None
    pushed: set[str] = field(default_factory=set)


class SearchPass:
    """A single exhaustive depth-first search for a complete assignment.

    Args:
        catalog: Graph lookups shared by the passes of one call.
        demands: ``(name, constraint)`` pairs seeding the search.
        relaxed: Names given up on by earlier passes. They are never
            decided and constraints pushed onto them are only recorded.
        history: Per-name ordered set of constraint text, shared by all
            passes of one call and extended in place.
        budget: Guard charged on every retraction.
    """

    def __init__(
        self,
        catalog: Catalog,
        demands: Iterable[tuple[str, Constraint]],
        relaxed: frozenset[str],
        history: dict[str, dict[str, None]],
        budget: SearchBudget,
    ) -> None:
        self._catalog = catalog
        self._demands = list(demands)
        self._relaxed = relaxed
        self._history = history
        self._budget = budget
        # name -> [(constraint, source name or None for a demand)]
        self._active: dict[str, list[tuple[Constraint, str | None]]] = {}
        self._assigned: dict[str, Version] = {}
        self.conflicts: Counter[str] = Counter()
        # conflicts seen at the deepest point any branch reached
        self._deepest = -1
        self._blamed: Counter[str] = Counter()

    @property
    def constrained_names(self) -> set[str]:
        """Names holding at least one active constraint."""
        return set(self._active)

    def has_candidates(self, name: str) -> bool:
        """True if some version of *name* meets all of its active constraints."""
        return bool(self._domain(name))

    def run(self) -> dict[str, Version] | None:
        """Search for an assignment; return it, or None if none exists."""
        for name, constraint in self._demands:
            self._constrain(name, constraint, None)

        infeasible = [
            name for name in sorted(self._active)
            if name not in self._relaxed and not self._domain(name)
        ]
        if infeasible:
            for name in infeasible:
                self._charge(name)
            return None

        stack: list[_Frame] = []
        while True:
            self._budget.checkpoint()
            name = self._select()
            if name is None:
                return dict(self._assigned)

            stack.append(_Frame(name, deque(self._domain(name))))
            while not self._try_next(stack[-1]):
                stack.pop()
                if not stack:
                    return None
                self._retract(stack[-1])

    def culprit(self) -> str:
        """The name to give up on after a failed pass.

        Blame goes to the names that conflicted in the branch holding the
        most assignments, i.e. the most nearly consistent one. Among those,
        the most frequent offender wins, then the smallest name.
        """
        return max(sorted(self._blamed), key=self._blamed.__getitem__)

    def _select(self) -> str | None:
        pending = [
            name for name in self._active
            if name not in self._assigned and name not in self._relaxed
        ]
        return min(pending, default=None)

    def _domain(self, name: str) -> list[Version]:
        constraints = [c for c, _ in self._active.get(name, ())]
        return [
            v for v in self._catalog.versions(name)
            if satisfies_all(constraints, v)
        ]

    def _constrain(self, name: str, constraint: Constraint, source: str | None) -> None:
        self._history.setdefault(name, {}).setdefault(str(constraint), None)
        self._active.setdefault(name, []).append((constraint, source))

    def _admits(self, name: str, constraint: Constraint) -> bool:
        if name in self._relaxed:
            return True
        chosen = self._assigned.get(name)
        if chosen is not None:
            return constraint.satisfies(chosen)
        return bool(self._domain(name))

    def _charge(self, name: str) -> None:
        self.conflicts[name] += 1
        depth = len(self._assigned)
        if depth > self._deepest:
            self._deepest = depth
            self._blamed.clear()
        if depth == self._deepest:
            self._blamed[name] += 1

    def _try_next(self, frame: _Frame) -> bool:
        """Assign the frame's next viable candidate; False once exhausted.

        Every edge of a candidate is checked even after the first conflict,
        and each rejecting target is charged once per candidate, so tallies
        do not depend on declaration order.
        """
        while frame.candidates:
            version = frame.candidates.popleft()
            frame.chosen = version
            self._assigned[frame.name] = version

            rejected: set[str] = set()
            for dep in self._catalog.dependencies(frame.name, version):
                self._constrain(dep.name, dep.constraint, frame.name)
                frame.pushed.add(dep.name)
                if not self._admits(dep.name, dep.constraint):
                    rejected.add(dep.name)
            if not rejected:
                return True
            for name in sorted(rejected):
                self._charge(name)
            self._retract(frame)
        return False

    def _retract(self, frame: _Frame) -> None:
        """Undo the frame's current choice and every constraint it pushed."""
        self._assigned.pop(frame.name, None)
        frame.chosen = None
        for target in frame.pushed:
            kept = [(c, src) for c, src in self._active[target] if src != frame.name]
            if kept:
                self._active[target] = kept
            else:
                del self._active[target]
        frame.pushed.clear()
        self._budget.charge_backtrack()
