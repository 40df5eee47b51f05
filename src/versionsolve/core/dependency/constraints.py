"""Version constraints and dependency edges.

This module provides the predicate types used both by caller demands and by
artifact dependency declarations.

Constraint grammar is ``[<op>] <version>`` with ``<op>`` one of ``=``,
``>``, ``>=``, ``<``, ``<=`` and ``~>`` (optimistic match). A bare version
means ``=``; empty text, ``None`` and ``"any"`` mean "any version".

Constraint sets are reported as normalized text (``"<op> <version>"``) and
de-duplicated by that text, never by semantic equivalence: ``"= 1.0"`` and
``"= 1.0.0"`` are two distinct entries.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable
from dataclasses import dataclass

from versionsolve.core.dependency.version import Version
from versionsolve.exceptions import ConstraintParseError

_CONSTRAINT_RE = re.compile(
    r"^\s*(?P<op>~>|>=|<=|=|>|<)?\s*(?P<ver>\d+(?:\.\d+)*)\s*$"
)

_ANY_TOKENS = frozenset({"", "any", "*"})


class Operator(str, enum.Enum):
    """Comparison operator of a ``Constraint``."""

    EQ = "="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    APPROX = "~>"


# ---------------------------------------------------------------------------
# Constraint: An operator + version predicate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Constraint:
    """A predicate restricting the acceptable versions of one artifact name.

    ``operator`` and ``version`` are both ``None`` for the "any" constraint,
    which every version satisfies.

    Attributes:
        operator: The comparison operator, or None for "any".
        version: The operand version, or None for "any".
    """

    operator: Operator | None = None
    version: Version | None = None

    @classmethod
    def any(cls) -> Constraint:
        """Return the constraint that matches every version."""
        return _ANY

    @classmethod
    def parse(cls, text: str | Constraint | None) -> Constraint:
        """Parse constraint text such as ``">= 1.2.0"`` or ``"~> 1.0"``.

        Args:
            text: Constraint text. ``None``, ``""``, ``"any"`` and ``"*"``
                yield the "any" constraint; a ``Constraint`` is returned as is.

        Returns:
            The parsed ``Constraint``.

        Raises:
            ConstraintParseError: If the text does not follow the grammar.
        """
        if text is None:
            return _ANY
        if isinstance(text, Constraint):
            return text
        if not isinstance(text, str):
            raise ConstraintParseError(
                f"Constraint must be a string, got {type(text).__name__}"
            )
        if text.strip().lower() in _ANY_TOKENS:
            return _ANY

        m = _CONSTRAINT_RE.match(text)
        if not m:
            raise ConstraintParseError(f"Invalid constraint: {text!r}")
        return cls(Operator(m.group("op") or "="), Version.parse(m.group("ver")))

    @property
    def is_any(self) -> bool:
        """True for the constraint that matches every version."""
        return self.operator is None

    @property
    def ceiling(self) -> Version | None:
        """Exclusive upper bound of a ``~>`` constraint, None for other operators.

        The operand is padded to at least three components, then the
        second-to-last component is incremented and everything after it
        zeroed: ``~> 1.2`` -> ``1.3.0``, ``~> 1.2.3`` -> ``1.3.0``,
        ``~> 1.2.3.4`` -> ``1.2.4.0``.
        """
        if self.operator is not Operator.APPROX or self.version is None:
            return None
        comps = list(self.version.padded(3))
        pivot = len(comps) - 2
        comps[pivot] += 1
        for i in range(pivot + 1, len(comps)):
            comps[i] = 0
        return Version(tuple(comps))

    def satisfies(self, version: Version | str) -> bool:
        """Check whether *version* satisfies this constraint.

        Args:
            version: A ``Version`` or version text.

        Returns:
            True if the version is accepted.

        Raises:
            ParseError: If *version* is text that is not a valid version.
        """
        if self.operator is None or self.version is None:
            return True
        ver = Version.parse(version)
        target = self.version
        op = self.operator

        if op is Operator.EQ:
            return ver == target
        elif op is Operator.GT:
            return ver > target
        elif op is Operator.GE:
            return ver >= target
        elif op is Operator.LT:
            return ver < target
        elif op is Operator.LE:
            return ver <= target
        elif op is Operator.APPROX:
            ceiling = self.ceiling
            return ver >= target and ceiling is not None and ver < ceiling
        else:  # pragma: no cover
            raise ValueError(f"Unknown operator: {op!r}")

    def __str__(self) -> str:
        if self.operator is None or self.version is None:
            return ">= 0.0.0"
        return f"{self.operator.value} {self.version}"

    def __repr__(self) -> str:
        return f"Constraint({str(self)!r})"


_ANY = Constraint()


def satisfies_all(constraints: Iterable[Constraint], version: Version) -> bool:
    """True if *version* satisfies every constraint in *constraints*."""
    return all(c.satisfies(version) for c in constraints)


def normalize(constraints: Iterable[Constraint | str | None]) -> tuple[str, ...]:
    """Normalize constraints to their canonical text, de-duplicated.

    First-seen order is kept so the output is stable for a given input.

    Raises:
        ConstraintParseError: If a textual entry is malformed.
    """
    seen: dict[str, None] = {}
    for item in constraints:
        seen.setdefault(str(Constraint.parse(item)), None)
    return tuple(seen)


# ---------------------------------------------------------------------------
# Dependency: Edge type in the artifact graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Dependency:
    """A directed dependency edge from one artifact release to another name.

    Represents: "choosing this release *requires* that ``name`` is resolved
    to some version satisfying ``constraint``."

    Attributes:
        name: The name of the required artifact.
        constraint: Version constraint that the chosen version must satisfy.
    """

    name: str
    constraint: Constraint
