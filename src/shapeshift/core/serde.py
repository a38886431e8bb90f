"""
Canonical and pretty JSON dumps.

Provides the single canonical JSON policy used for error snapshots, descriptor dumps and CLI
output. This module is zero-IO and stdlib-only.

Notes:
    - Canonical JSON: sort_keys=True, separators=(",", ":"), ensure_ascii=False.
    - Inputs must already be JSON-safe; convert typed values first with
      ``shapeshift.core.parser.json_tree``.
    - ``json_dumps_pretty`` is the human-facing variant (two-space indent, sorted keys) used when
      a descriptor is embedded in an ``InvalidDescriptor`` message.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "json_dumps_pretty",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sorted keys, compact separators and
        ensure_ascii=False.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_dumps_pretty(obj: Any) -> str:
    """Serialize an object to sorted, two-space indented JSON."""
    return json.dumps(obj, sort_keys=True, indent=2, ensure_ascii=False)

