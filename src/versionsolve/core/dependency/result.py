"""Resolution outcomes.

A ``Result`` maps every artifact name reached during resolution to exactly
one tagged outcome: ``Found`` with the chosen version, or ``Unsatisfied``
with every distinct constraint that was required of the name.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from versionsolve.core.dependency.version import Version
from versionsolve.exceptions import OutcomeError


@dataclass(frozen=True)
class Found:
    """The search chose ``version`` for this name."""

    version: Version

    @property
    def status(self) -> str:
        return "found"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "version": str(self.version)}


@dataclass(frozen=True)
class Unsatisfied:
    """No version satisfies the conjunction of ``constraints``.

    Attributes:
        constraints: Normalized constraint text, de-duplicated, in the order
            the search first encountered each entry. Never empty.
    """

    constraints: tuple[str, ...]

    @property
    def status(self) -> str:
        return "unsatisfied"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "constraints": list(self.constraints)}


Outcome = Union[Found, Unsatisfied]


@dataclass(frozen=True)
class ResolutionStats:
    """Search effort spent producing a Result.

    Attributes:
        passes: Number of backtracking passes run (one per relaxed name, plus one).
        backtracks: Tentative assignments retracted across all passes.
    """

    passes: int = 0
    backtracks: int = 0


class Result(Mapping[str, Outcome]):
    """Read-only mapping from artifact name to its outcome.

    Callers must inspect each entry; there is no single overall success flag
    beyond the convenience ``all_found``.
    """

    def __init__(
        self,
        outcomes: Mapping[str, Outcome],
        stats: ResolutionStats | None = None,
    ) -> None:
        self._outcomes = {name: outcomes[name] for name in sorted(outcomes)}
        self.stats = stats or ResolutionStats()

    def __getitem__(self, name: str) -> Outcome:
        return self._outcomes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def is_found(self, name: str) -> bool:
        """True if a version was chosen for *name*.

        Raises:
            KeyError: If *name* was never reached during resolution.
        """
        return isinstance(self._outcomes[name], Found)

    def version(self, name: str) -> Version:
        """Return the chosen version for *name*.

        Raises:
            KeyError: If *name* was never reached.
            OutcomeError: If *name* is unsatisfied.
        """
        outcome = self._outcomes[name]
        if not isinstance(outcome, Found):
            raise OutcomeError(f"{name!r} is unsatisfied; it has no version")
        return outcome.version

    def constraints(self, name: str) -> tuple[str, ...]:
        """Return the unmet constraints reported for *name*.

        Raises:
            KeyError: If *name* was never reached.
            OutcomeError: If *name* was found.
        """
        outcome = self._outcomes[name]
        if not isinstance(outcome, Unsatisfied):
            raise OutcomeError(f"{name!r} was found; it has no unmet constraints")
        return outcome.constraints

    @property
    def found(self) -> dict[str, Version]:
        """Chosen versions of all found names."""
        return {
            name: outcome.version
            for name, outcome in self._outcomes.items()
            if isinstance(outcome, Found)
        }

    @property
    def unsatisfied(self) -> dict[str, tuple[str, ...]]:
        """Unmet constraints of all unsatisfied names."""
        return {
            name: outcome.constraints
            for name, outcome in self._outcomes.items()
            if isinstance(outcome, Unsatisfied)
        }

    @property
    def all_found(self) -> bool:
        return all(isinstance(o, Found) for o in self._outcomes.values())

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Serialize as ``{name: {"status": ..., ...}}`` for JSON output."""
        return {name: outcome.to_dict() for name, outcome in self._outcomes.items()}

    def __repr__(self) -> str:
        return f"Result({self._outcomes!r})"
