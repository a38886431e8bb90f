"""
Per-kind value parser and leaf stringifiers.

Converts raw leaves from the two external representations back into typed values, and typed
scalars into those representations. The representation bridge drives these functions node by
node; they know nothing about schemas beyond the declared kind.

Responsibilities
- ``parse(kind, raw)``: string-object leaf (always a ``str``) → typed value.
- ``parse_json(kind, raw)``: JSON leaf → typed value.
- ``stringify(value)`` / ``to_json_value(value)``: typed scalar → leaf.
- ``stringify_tree(value)`` / ``json_tree(value)``: generic, schema-less tree conversion used for
  static descriptor descriptions.

Leaf formats
------------
| Kind     | string-object leaf                         | JSON leaf                              |
|----------|--------------------------------------------|----------------------------------------|
| string   | as-is                                      | ``str``                                |
| number   | ``"3"``, ``"1.5"``, ``"NaN"``, ``"-Infinity"`` | number, or the non-finite literals   |
| boolean  | ``"true"`` / ``"false"``                   | ``bool``                               |
| date     | ISO-8601, or integer epoch millis (UTC)    | ISO-8601 string, or epoch millis int   |
| regex    | never                                      | ``{"pattern": str, "flags": int}``     |
| function | never                                      | never                                  |

Notes:
    - Parsing failures raise ``ParseError``; stringifying an unrepresentable value raises
      ``UnrepresentableConversion``.
    - Zero-IO, stdlib-only.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime, timedelta
from typing import Any

from .constants import NON_FINITE_LITERALS
from .errors import ParseError, UnrepresentableConversion
from .kinds import Kind, ensure_dispatch_covers_kinds, kind_from_value, kind_of

__all__ = [
    "parse",
    "parse_json",
    "stringify",
    "to_json_value",
    "stringify_tree",
    "json_tree",
]

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_LeafParser = Callable[[Any, "str | None"], Any]


# -----------------------------------------------------------------------------
# Shared leaf decoders
# -----------------------------------------------------------------------------


def _number_from_text(raw: str, key: str | None) -> int | float:
    if raw in NON_FINITE_LITERALS:
        return NON_FINITE_LITERALS[raw]
    if _INT_RE.match(raw):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    raise ParseError(Kind.NUMBER.value, raw, "not a number literal", key=key)


def _date_from_text(raw: str, key: str | None) -> datetime:
    if _INT_RE.match(raw):
        return _EPOCH + timedelta(milliseconds=int(raw))
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ParseError(Kind.DATE.value, raw, "not an ISO-8601 date", key=key) from exc


def _never(kind: Kind) -> _LeafParser:
    def _reject(raw: Any, key: str | None) -> Any:
        raise ParseError(kind.value, raw, f"{kind.value} values have no serialized form", key=key)

    return _reject


# -----------------------------------------------------------------------------
# String-object leaves
# -----------------------------------------------------------------------------


def _parse_string(raw: str, key: str | None) -> str:
    return raw


def _parse_boolean(raw: str, key: str | None) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ParseError(Kind.BOOLEAN.value, raw, 'expected "true" or "false"', key=key)


_STRING_PARSERS: dict[Kind, _LeafParser] = {
    Kind.STRING: _parse_string,
    Kind.NUMBER: _number_from_text,
    Kind.BOOLEAN: _parse_boolean,
    Kind.DATE: _date_from_text,
    Kind.REGEX: _never(Kind.REGEX),
    Kind.FUNCTION: _never(Kind.FUNCTION),
    Kind.ARRAY: _never(Kind.ARRAY),
    Kind.OBJECT: _never(Kind.OBJECT),
}
ensure_dispatch_covers_kinds(_STRING_PARSERS, "_STRING_PARSERS")


def parse(kind: Kind | str, raw: Any, *, key: str | None = None) -> Any:
    """
    Parse a string-object leaf into a typed value.

    Args:
        kind (Kind | str): Declared kind of the leaf.
        raw (Any): Raw leaf; must be a ``str``.
        key (str | None): Path used in error messages.

    Returns:
        Any: Typed value.

    Raises:
        ParseError: If raw is not a string or is malformed for kind. Regex, function and
            collection kinds always fail (collections are rebuilt structurally by the bridge).

    Examples:
        >>> from shapeshift.core.parser import parse
        >>> parse("number", "350"), parse("boolean", "false")
        (350, False)
    """
    k = kind_from_value(kind)
    if not isinstance(raw, str):
        raise ParseError(k.value, raw, f"expected a string leaf (got {kind_of(raw)})", key=key)
    return _STRING_PARSERS[k](raw, key)


# -----------------------------------------------------------------------------
# JSON leaves
# -----------------------------------------------------------------------------


def _json_string(raw: Any, key: str | None) -> str:
    if not isinstance(raw, str):
        raise ParseError(Kind.STRING.value, raw, "expected a JSON string", key=key)
    return raw


def _json_number(raw: Any, key: str | None) -> int | float:
    if isinstance(raw, bool):
        raise ParseError(Kind.NUMBER.value, raw, "expected a JSON number", key=key)
    if isinstance(raw, (int, float)):
        return raw
    if isinstance(raw, str) and raw in NON_FINITE_LITERALS:
        return NON_FINITE_LITERALS[raw]
    raise ParseError(Kind.NUMBER.value, raw, "expected a JSON number", key=key)


def _json_boolean(raw: Any, key: str | None) -> bool:
    if not isinstance(raw, bool):
        raise ParseError(Kind.BOOLEAN.value, raw, "expected a JSON boolean", key=key)
    return raw


def _json_date(raw: Any, key: str | None) -> datetime:
    # YAML loaders already produce datetimes for unquoted timestamps, and dates for bare days.
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=UTC)
    if isinstance(raw, int) and not isinstance(raw, bool):
        return _EPOCH + timedelta(milliseconds=raw)
    if isinstance(raw, str):
        return _date_from_text(raw, key)
    raise ParseError(Kind.DATE.value, raw, "expected an ISO-8601 string or epoch millis", key=key)


def _json_regex(raw: Any, key: str | None) -> re.Pattern[str]:
    if not isinstance(raw, Mapping) or not isinstance(raw.get("pattern"), str):
        raise ParseError(Kind.REGEX.value, raw, 'expected {"pattern": str, "flags": int}', key=key)
    flags = raw.get("flags", 0)
    if isinstance(flags, bool) or not isinstance(flags, int):
        raise ParseError(Kind.REGEX.value, raw, "flags must be an integer", key=key)
    try:
        return re.compile(raw["pattern"], flags)
    except re.error as exc:
        raise ParseError(Kind.REGEX.value, raw, f"invalid pattern: {exc}", key=key) from exc


_JSON_PARSERS: dict[Kind, _LeafParser] = {
    Kind.STRING: _json_string,
    Kind.NUMBER: _json_number,
    Kind.BOOLEAN: _json_boolean,
    Kind.DATE: _json_date,
    Kind.REGEX: _json_regex,
    Kind.FUNCTION: _never(Kind.FUNCTION),
    Kind.ARRAY: _never(Kind.ARRAY),
    Kind.OBJECT: _never(Kind.OBJECT),
}
ensure_dispatch_covers_kinds(_JSON_PARSERS, "_JSON_PARSERS")


def parse_json(kind: Kind | str, raw: Any, *, key: str | None = None) -> Any:
    """
    Parse a JSON leaf into a typed value.

    Args:
        kind (Kind | str): Declared kind of the leaf.
        raw (Any): Decoded JSON value.
        key (str | None): Path used in error messages.

    Returns:
        Any: Typed value.

    Raises:
        ParseError: If raw does not have the JSON shape of kind.
    """
    k = kind_from_value(kind)
    return _JSON_PARSERS[k](raw, key)


# -----------------------------------------------------------------------------
# Stringifiers
# -----------------------------------------------------------------------------


def _non_finite_literal(value: float) -> str | None:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return None


def stringify(value: Any, *, key: str | None = None) -> str:
    """
    Render a typed scalar as a string-object leaf.

    Raises:
        UnrepresentableConversion: For patterns, functions, collections and foreign objects.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _non_finite_literal(value) or repr(value)
    if isinstance(value, datetime):
        return value.isoformat()
    raise UnrepresentableConversion(f"{kind_of(value)} values cannot be converted to a string object", key=key)


def to_json_value(value: Any, *, key: str | None = None) -> Any:
    """
    Render a typed scalar as a JSON leaf.

    Raises:
        UnrepresentableConversion: For functions, collections and foreign objects.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return _non_finite_literal(value) or value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return {"pattern": value.pattern, "flags": int(value.flags)}
    raise UnrepresentableConversion(f"{kind_of(value)} values cannot be converted to JSON", key=key)


def stringify_tree(value: Any) -> Any:
    """Schema-less conversion of a tree to string-object form (None entries are dropped from mappings)."""
    if isinstance(value, (list, tuple)):
        return [stringify_tree(v) for v in value]
    if isinstance(value, Mapping):
        return {_key(k): stringify_tree(v) for k, v in value.items() if v is not None}
    return stringify(value)


def json_tree(value: Any) -> Any:
    """Schema-less conversion of a tree to JSON-compatible form."""
    if isinstance(value, (list, tuple)):
        return [json_tree(v) for v in value]
    if isinstance(value, Mapping):
        return {_key(k): json_tree(v) for k, v in value.items()}
    return to_json_value(value)


def _key(k: Any) -> str:
    if not isinstance(k, str):
        raise UnrepresentableConversion(f"mapping keys must be strings (got {kind_of(k)})")
    return k
