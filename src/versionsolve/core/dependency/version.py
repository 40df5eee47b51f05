"""Version parsing and ordering.

A version is a dot-separated sequence of non-negative integers of any arity
(``"2"``, ``"1.2"``, ``"1.2.3"``, ``"1.2.3.4"``). Versions compare
component-wise from left to right, the shorter one padded with zeros, so
``1.2`` and ``1.2.0`` are the same version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from versionsolve.exceptions import ParseError

_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")


# ---------------------------------------------------------------------------
# Version: Immutable, totally ordered release number
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Version:
    """An immutable, totally ordered version number.

    Equality and hashing ignore trailing zero components so that versions
    which compare equal also collide as dictionary keys. The declared
    components are kept for display.

    Attributes:
        components: The integer components as declared (e.g., ``(1, 2, 0)``).
    """

    components: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.components:
            raise ParseError("A version needs at least one component")
        if any(c < 0 for c in self.components):
            raise ParseError(f"Negative version component in {self.components!r}")

    @classmethod
    def parse(cls, text: str | Version) -> Version:
        """Parse version text such as ``"1.2.3"``.

        Args:
            text: The version string. A ``Version`` is returned unchanged.

        Returns:
            The parsed ``Version``.

        Raises:
            ParseError: If the text is not dot-separated non-negative integers.
        """
        if isinstance(text, Version):
            return text
        if not isinstance(text, str):
            raise ParseError(f"Version must be a string, got {type(text).__name__}")
        stripped = text.strip()
        if not _VERSION_RE.match(stripped):
            raise ParseError(f"Invalid version: {text!r}")
        return cls(tuple(int(part) for part in stripped.split(".")))

    @property
    def _key(self) -> tuple[int, ...]:
        comps = list(self.components)
        while len(comps) > 1 and comps[-1] == 0:
            comps.pop()
        return tuple(comps)

    def padded(self, width: int) -> tuple[int, ...]:
        """Return the components zero-padded to at least *width* entries."""
        missing = width - len(self.components)
        return self.components + (0,) * max(missing, 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) >= 0

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


def compare(a: Version, b: Version) -> int:
    """Three-way comparison of two versions.

    Returns:
        ``-1`` if *a* sorts before *b*, ``0`` if equal, ``1`` otherwise.
    """
    width = max(len(a.components), len(b.components))
    left, right = a.padded(width), b.padded(width)
    return (left > right) - (left < right)
