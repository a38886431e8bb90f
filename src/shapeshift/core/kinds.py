"""
Canonical value kinds and runtime classification helpers.

Defines the closed set of kinds a schema descriptor may declare and the helper that
classifies arbitrary Python values into those kinds. Every type check, error message and
dispatch table in the engine speaks in terms of these kinds.

Responsibilities
- Define the ``Kind`` enum (serialized values are the descriptor ``type`` strings).
- Classify runtime values (``kind_of``) with bool/number and str/sequence disambiguation.
- Parse descriptor type names into ``Kind`` (``kind_from_value``).
- Provide ``ensure_dispatch_covers_kinds`` so per-kind dispatch tables are checked for
  exhaustiveness at import time.

Mapping
-------
| Kind       | Accepted Python values                            |
|------------|---------------------------------------------------|
| string     | ``str``                                           |
| number     | ``int`` / ``float`` (``bool`` excluded)           |
| boolean    | ``bool``                                          |
| date       | ``datetime.datetime``                             |
| regex      | ``re.Pattern``                                    |
| function   | any other callable                                |
| array      | ``list`` / ``tuple``                              |
| object     | any ``collections.abc.Mapping``                   |

``None`` classifies as ``"null"`` and is treated as an absent value everywhere.

Examples
--------
>>> from shapeshift.core.kinds import Kind, kind_of, kind_from_value
>>> kind_of(True), kind_of(3), kind_of([1, 2])
('boolean', 'number', 'array')
>>> kind_from_value("date") is Kind.DATE
True
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Final

__all__ = [
    "Kind",
    "SCALAR_KINDS",
    "COLLECTION_KINDS",
    "kind_of",
    "kind_from_value",
    "ensure_dispatch_covers_kinds",
]


class Kind(Enum):
    """
    The eight kinds a schema descriptor may declare via its ``type`` field.

    Notes:
        The set is closed: dispatch tables keyed by ``Kind`` are checked for full coverage
        when their module is imported (see ``ensure_dispatch_covers_kinds``).
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    REGEX = "regex"
    FUNCTION = "function"
    ARRAY = "array"
    OBJECT = "object"


# Kinds allowed as string-object leaves.
SCALAR_KINDS: Final[frozenset[Kind]] = frozenset({Kind.STRING, Kind.NUMBER, Kind.BOOLEAN, Kind.DATE})

COLLECTION_KINDS: Final[frozenset[Kind]] = frozenset({Kind.ARRAY, Kind.OBJECT})


def kind_of(value: Any) -> str:
    """
    Classify a runtime value.

    Args:
        value (Any): Value to classify.

    Returns:
        str: A ``Kind`` value, ``"null"`` for None, or the bracketed Python type name for
        values that fall outside the eight kinds (e.g. ``"<bytes>"``, ``"<date>"``). The brackets
        keep foreign types such as ``datetime.date`` from passing for a kind of the same name.

    Notes:
        Order matters: ``bool`` is checked before numbers, ``str`` before sequences, and
        patterns before the generic callable test.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return Kind.BOOLEAN.value
    if isinstance(value, (int, float)):
        return Kind.NUMBER.value
    if isinstance(value, str):
        return Kind.STRING.value
    if isinstance(value, datetime):
        return Kind.DATE.value
    if isinstance(value, re.Pattern):
        return Kind.REGEX.value
    if isinstance(value, (list, tuple)):
        return Kind.ARRAY.value
    if isinstance(value, Mapping):
        return Kind.OBJECT.value
    if callable(value):
        return Kind.FUNCTION.value
    return f"<{type(value).__name__}>"


def kind_from_value(s: Any) -> Kind:
    """
    Parse a descriptor ``type`` string into a Kind.

    Args:
        s (Any): Candidate type name.

    Returns:
        Kind: Parsed kind.

    Raises:
        ValueError: If s is not one of the eight kind names.
    """
    if isinstance(s, Kind):
        return s
    try:
        return Kind(s)
    except ValueError:
        allowed = sorted(k.value for k in Kind)
        raise ValueError(f"type must be one of {allowed} (got {s!r})") from None


def ensure_dispatch_covers_kinds(table: Mapping[Kind, Any], name: str, kinds: Iterable[Kind] = Kind) -> None:
    """
    Assert that a per-kind dispatch table handles exactly the expected kinds.

    Args:
        table (Mapping[Kind, Any]): Dispatch table to check.
        name (str): Table name used in the error message.
        kinds (Iterable[Kind]): Expected keys (defaults to every Kind).

    Raises:
        AssertionError: If any kind is missing or unexpected.
    """
    expected = set(kinds)
    actual = set(table)
    if actual != expected:
        missing = sorted(k.value for k in expected - actual)
        extra = sorted(k.value for k in actual - expected)
        raise AssertionError(f"dispatch table {name!r} out of sync with Kind: missing {missing}, unexpected {extra}")
