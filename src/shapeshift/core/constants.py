"""
Shapeshift core defaults.

Defines the error-rendering and path-naming defaults consumed by the enforcement engine,
the representation bridge, and the settings layer. This module is zero-IO and uses only the
Python standard library.

Notes:
    - ``DEFAULT_KEY`` is the root of every dotted/bracketed error path (e.g. ``target.items[3].id``).
    - Error snapshots are rendered as canonical JSON and truncated to ``MAX_DISPLAY_LENGTH``
      characters, the last ``len(TRUNCATION_MARKER)`` of which become the marker.
    - ``shapeshift.io.config.EngineSettings`` sources its defaults from here.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_KEY",
    "MAX_DISPLAY_LENGTH",
    "TRUNCATION_MARKER",
    "NON_FINITE_LITERALS",
]

# Root segment of error paths when the caller does not name the value.
DEFAULT_KEY: str = "target"

# Maximum length of the rendered value snapshot embedded in error messages.
MAX_DISPLAY_LENGTH: int = 64

TRUNCATION_MARKER: str = "..."

# Literal spellings of non-finite floats on the JSON and string-object boundaries.
NON_FINITE_LITERALS: dict[str, float] = {
    "NaN": float("nan"),
    "Infinity": float("inf"),
    "-Infinity": float("-inf"),
}
