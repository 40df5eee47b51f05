"""versionsolve exception hierarchy.

All public exceptions inherit from SolveError, giving callers a single
base class to catch when they want to handle any versionsolve-specific
failure without swallowing unrelated errors.

An artifact name that cannot be satisfied is *not* an error: it is reported
as an ``Unsatisfied`` entry inside a normal ``Result``.
"""


class SolveError(Exception):
    """Base exception for all versionsolve errors."""


class ParseError(SolveError):
    """Raised when version text cannot be parsed.

    Covers empty strings, non-numeric components, negative numbers and
    empty components such as ``"1..2"``.
    """


class ConstraintParseError(ParseError):
    """Raised when constraint text cannot be parsed.

    Covers unknown operators and malformed version operands in demands
    and dependency declarations.
    """


class ResolutionError(SolveError):
    """Raised when a resolution call cannot produce a Result at all.

    Only hard failures use this branch of the hierarchy; unsatisfiable
    constraints are reported inside the Result instead.
    """


class ResourceExhausted(ResolutionError):
    """Raised when the search exceeds its backtrack count or time budget."""


class ResolutionCancelled(ResolutionError):
    """Raised when a caller cancels a resolution that is in progress."""


class OutcomeError(SolveError):
    """Raised when a Result entry is queried for the wrong outcome kind.

    Asking for the version of an unsatisfied name, or for the constraints
    of a found name, raises this.
    """


class ManifestError(SolveError):
    """Raised when a manifest file is malformed.

    Covers unreadable files, invalid YAML/JSON, and documents whose shape
    does not match the ``artifacts`` / ``demands`` layout.
    """
