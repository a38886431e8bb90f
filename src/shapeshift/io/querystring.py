"""
Query-string codec for string objects.

Encodes a string object (nested mappings and lists whose leaves are strings, as produced by
``shapeshift.core.bridge.to_string_object``) into a URL query string using bracket notation,
and decodes such a query string back into a string object.

| String object                       | Query string                     |
|-------------------------------------|----------------------------------|
| ``{"page": "2"}``                   | ``page=2``                       |
| ``{"filter": {"lang": "fr"}}``      | ``filter[lang]=fr``              |
| ``{"tags": ["a", "b"]}``            | ``tags[0]=a&tags[1]=b``          |

Notes:
    - Absent (None) values and empty lists emit nothing, so they decode as absent.
    - ``tags[]=a&tags[]=b`` and repeated plain keys (``tags=a&tags=b``) decode as lists.
    - A mapping whose keys are all decimal indices decodes as a list ordered by index.
    - Built on ``urllib.parse``; brackets are left unescaped for readability.

Examples:
    >>> from shapeshift.io.querystring import decode, encode
    >>> encode({"page": "2", "tags": ["a", "b"]})
    'page=2&tags[0]=a&tags[1]=b'
    >>> decode("page=2&tags[0]=a&tags[1]=b")
    {'page': '2', 'tags': ['a', 'b']}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode

from shapeshift.core.kinds import kind_of

__all__ = [
    "encode",
    "decode",
]

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def encode(string_object: Mapping[str, Any]) -> str:
    """
    Encode a string object as a query string.

    Args:
        string_object (Mapping[str, Any]): Nested mappings/lists with string leaves.

    Returns:
        str: Query string without a leading ``?``.

    Raises:
        TypeError: If string_object is not a mapping or holds a non-string leaf.
    """
    if not isinstance(string_object, Mapping):
        raise TypeError(f"only mappings can be encoded as a query string (got {kind_of(string_object)})")
    pairs: list[tuple[str, str]] = []
    for name, value in string_object.items():
        _flatten(str(name), value, pairs)
    return urlencode(pairs, safe="[]", quote_via=quote)


def _flatten(prefix: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for name, item in value.items():
            _flatten(f"{prefix}[{name}]", item, pairs)
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _flatten(f"{prefix}[{i}]", item, pairs)
    elif isinstance(value, str):
        pairs.append((prefix, value))
    else:
        raise TypeError(f"query-string leaves must be strings (got {kind_of(value)} at {prefix})")


def decode(query: str) -> dict[str, Any]:
    """
    Decode a query string into a string object.

    Args:
        query (str): Query string, with or without a leading ``?``.

    Returns:
        dict[str, Any]: Nested dicts/lists with string leaves.

    Raises:
        ValueError: If a key is used both as a leaf and as a container.
    """
    root: dict[str, Any] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        match = _KEY_RE.match(key)
        path = [match.group(1), *_SEGMENT_RE.findall(match.group(2))] if match else [key]
        _insert(root, path, value, key)
    return {name: _listify(item) for name, item in root.items()}


def _insert(container: dict[str, Any], path: list[str], value: str, key: str) -> None:
    *parents, last = path
    for seg in parents:
        seg = seg or str(len(container))
        child = container.setdefault(seg, {})
        if not isinstance(child, dict):
            raise ValueError(f"query key {key!r} conflicts with an earlier value")
        container = child
    last = last or str(len(container))
    existing = container.get(last)
    if existing is None:
        container[last] = value
    elif isinstance(existing, str):
        container[last] = {"0": existing, "1": value}
    elif _is_index_map(existing):
        existing[str(len(existing))] = value
    else:
        raise ValueError(f"query key {key!r} conflicts with an earlier value")


def _is_index_map(value: Any) -> bool:
    return isinstance(value, dict) and bool(value) and all(k.isdigit() for k in value)


def _listify(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    items = {k: _listify(v) for k, v in value.items()}
    if _is_index_map(items):
        return [items[k] for k in sorted(items, key=int)]
    return items
