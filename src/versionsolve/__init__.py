"""versionsolve: Backtracking version resolution for versioned artifact graphs."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
