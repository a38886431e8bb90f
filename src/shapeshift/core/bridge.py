"""
Representation bridge: typed values <-> string objects <-> JSON trees.

Every compiled node knows (memoized at construction) whether the values it governs can take
the string-object and JSON forms. The functions here consult those flags and convert values
structurally, node by node, delegating leaves to ``shapeshift.core.parser``.

Responsibilities
- ``to_json`` / ``to_string_object``: describe the schema itself (no value) or convert a value.
- ``from_json`` / ``from_string_object``: parse a raw tree back into typed values, then enforce.
- ``to_path_string_object`` / ``from_path_string_object``: the flat variant of the string-object
  form, keyed by dotted property paths (``{"filter.lang": "fr"}``). Arrays have no place in it,
  so schemas containing one are not path-string-object representable.

Strict vs. non-strict
---------------------
| Situation                      | strict=True                  | strict=False                          |
|--------------------------------|------------------------------|---------------------------------------|
| schema lacks the capability    | ``UnrepresentableConversion`` | converted best-effort                 |
| malformed leaf                 | ``ParseError`` with the path  | raw leaf kept for ``enforce`` to reject |
| undeclared object property     | ``UnknownProperty``           | raw property kept for ``enforce`` to reject |

Notes
- ``noenforce=True`` skips the final ``enforce``; the recursive walk itself never enforces, so
  only the outermost call validates the assembled tree.
- Absent (None) object properties are omitted from both output forms.

Examples
--------
>>> from shapeshift.core.factory import compile
>>> from shapeshift.core.bridge import from_string_object, to_string_object
>>> node = compile({"type": "object", "schema": {"page": {"type": "number", "min": 0}}})
>>> to_string_object(node, {"page": 2})
{'page': '2'}
>>> from_string_object(node, {"page": "2"})
{'page': 2}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .constants import DEFAULT_KEY
from .enforcement import enforce
from .errors import ParseError, UnknownProperty, UnrepresentableConversion
from .kinds import Kind
from .nodes import ArrayNode, ObjectNode, SchemaNode
from .parser import json_tree, parse, parse_json, stringify, stringify_tree, to_json_value
from .values import UNSET, clone

__all__ = [
    "to_json",
    "to_string_object",
    "from_json",
    "from_string_object",
    "to_path_string_object",
    "from_path_string_object",
]

logger = logging.getLogger(__name__)

_Leaf = Callable[..., Any]


# -----------------------------------------------------------------------------
# Outbound
# -----------------------------------------------------------------------------


def to_json(node: SchemaNode, value: Any = UNSET, *, strict: bool = True, key: str = DEFAULT_KEY) -> Any:
    """
    Convert a value (or, without a value, the schema itself) to a JSON-compatible tree.

    Args:
        node (SchemaNode): Compiled schema.
        value (Any): Typed value. Omit to get the schema's own JSON description.
        strict (bool): Refuse schemas that are not JSON representable.
        key (str): Path used in error messages.

    Returns:
        Any: JSON-compatible tree (a fresh copy for schema descriptions).

    Raises:
        UnrepresentableConversion: If the schema (or the value) has no JSON form.
    """
    if value is UNSET:
        return _describe(node.descriptor_json, "JSON")
    if strict and not node.json_representable:
        raise UnrepresentableConversion("values of this schema cannot be converted to JSON", key=key)
    return _outbound(node, value, key, strict, to_json_value, json_tree)


def to_string_object(node: SchemaNode, value: Any = UNSET, *, strict: bool = True, key: str = DEFAULT_KEY) -> Any:
    """
    Convert a value (or, without a value, the schema itself) to a string object.

    Raises:
        UnrepresentableConversion: If the schema (or the value) has no string-object form.
    """
    if value is UNSET:
        return _describe(node.descriptor_string_object, "a string object")
    if strict and not node.string_object_representable:
        raise UnrepresentableConversion("values of this schema cannot be converted to a string object", key=key)
    return _outbound(node, value, key, strict, stringify, stringify_tree)


def to_path_string_object(node: SchemaNode, value: Any, *, strict: bool = True, key: str = DEFAULT_KEY) -> Any:
    """
    Convert a value to a path-string object.

    Object values become a flat mapping from dotted property paths to string leaves; scalar
    values become a single string.

    Raises:
        UnrepresentableConversion: If the schema (or the value) has no path-string-object form.
    """
    if strict and not node.path_string_object_representable:
        raise UnrepresentableConversion("values of this schema cannot be converted to a path-string object", key=key)
    tree = _outbound(node, value, key, strict, stringify, stringify_tree)
    return _flatten_paths(tree) if isinstance(tree, Mapping) else tree


def _describe(description: Any, target: str) -> Any:
    if description is None:
        raise UnrepresentableConversion(f"this schema cannot be converted to {target}")
    return clone(description)


def _outbound(node: SchemaNode, value: Any, key: str, strict: bool, leaf: _Leaf, tree: _Leaf) -> Any:
    if value is None:
        return None
    if isinstance(node, ArrayNode) and isinstance(value, (list, tuple)):
        if node.element is None:
            return tree(value)
        return [_outbound(node.element, item, f"{key}[{i}]", strict, leaf, tree) for i, item in enumerate(value)]
    if isinstance(node, ObjectNode) and isinstance(value, Mapping):
        if node.properties is None:
            return tree(value)
        out = {}
        for name, item in value.items():
            if item is None:
                continue
            child = node.properties.get(name)
            if child is not None:
                out[name] = _outbound(child, item, f"{key}.{name}", strict, leaf, tree)
            elif strict:
                raise UnknownProperty(key=key, value=value, property_name=str(name), node=node)
            else:
                out[name] = tree(item)
        return out
    return leaf(value, key=key)


# -----------------------------------------------------------------------------
# Inbound
# -----------------------------------------------------------------------------


def from_json(
    node: SchemaNode,
    raw: Any,
    *,
    strict: bool = True,
    noenforce: bool = False,
    key: str = DEFAULT_KEY,
) -> Any:
    """
    Parse a JSON tree into a typed value.

    Args:
        node (SchemaNode): Compiled schema.
        raw (Any): Decoded JSON tree.
        strict (bool): See the module table.
        noenforce (bool): Return the parsed tree without enforcing the schema on it.
        key (str): Path used in error messages.

    Returns:
        Any: Typed (and, unless noenforce, canonical) value.

    Raises:
        UnrepresentableConversion: In strict mode, if the schema is not JSON representable.
        ParseError: In strict mode, for a malformed leaf.
        ValidationError: If the parsed value fails the schema.
    """
    if strict and not node.json_representable:
        raise UnrepresentableConversion("values of this schema cannot be parsed from JSON", key=key)
    value = _inbound(node, raw, key, strict, parse_json)
    return value if noenforce else enforce(node, value, key)


def from_string_object(
    node: SchemaNode,
    raw: Any,
    *,
    strict: bool = True,
    noenforce: bool = False,
    key: str = DEFAULT_KEY,
) -> Any:
    """
    Parse a string object into a typed value.

    Raises:
        UnrepresentableConversion: In strict mode, if the schema is not string-object representable.
        ParseError: In strict mode, for a malformed leaf.
        ValidationError: If the parsed value fails the schema.
    """
    if strict and not node.string_object_representable:
        raise UnrepresentableConversion("values of this schema cannot be parsed from a string object", key=key)
    value = _inbound(node, raw, key, strict, parse)
    return value if noenforce else enforce(node, value, key)


def from_path_string_object(
    node: SchemaNode,
    raw: Any,
    *,
    strict: bool = True,
    noenforce: bool = False,
    key: str = DEFAULT_KEY,
) -> Any:
    """
    Parse a path-string object into a typed value.

    Raises:
        UnrepresentableConversion: In strict mode, if the schema is not path-string-object representable.
        ParseError: In strict mode, for a malformed leaf or a path that clashes with another.
        ValidationError: If the parsed value fails the schema.
    """
    if strict and not node.path_string_object_representable:
        raise UnrepresentableConversion("values of this schema cannot be parsed from a path-string object", key=key)
    if isinstance(node, ObjectNode) and isinstance(raw, Mapping):
        raw = _unflatten_paths(raw, key, strict)
    value = _inbound(node, raw, key, strict, parse)
    return value if noenforce else enforce(node, value, key)


def _inbound(node: SchemaNode, raw: Any, key: str, strict: bool, leaf: _Leaf) -> Any:
    if raw is None:
        return None
    if isinstance(node, ArrayNode):
        if not isinstance(raw, (list, tuple)):
            return _malformed(Kind.ARRAY, raw, "expected an array", key, strict)
        if node.element is None:
            return clone(list(raw))
        return [_inbound(node.element, item, f"{key}[{i}]", strict, leaf) for i, item in enumerate(raw)]
    if isinstance(node, ObjectNode):
        if not isinstance(raw, Mapping):
            return _malformed(Kind.OBJECT, raw, "expected an object", key, strict)
        if node.properties is None:
            return clone(dict(raw))
        out = {}
        for name, item in raw.items():
            child = node.properties.get(name)
            if child is not None:
                out[name] = _inbound(child, item, f"{key}.{name}", strict, leaf)
            elif strict:
                raise UnknownProperty(key=key, value=raw, property_name=str(name), node=node)
            else:
                out[name] = clone(item)
        return out
    try:
        return leaf(node.kind, raw, key=key)
    except ParseError as err:
        if strict:
            raise
        logger.debug("keeping unparsed %s leaf at %s: %s", node.kind.value, key, err)
        return raw


def _malformed(kind: Kind, raw: Any, detail: str, key: str, strict: bool) -> Any:
    if strict:
        raise ParseError(kind.value, raw, detail, key=key)
    return clone(raw)


def _flatten_paths(tree: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for name, item in tree.items():
        path = f"{prefix}{name}"
        if isinstance(item, Mapping):
            flat.update(_flatten_paths(item, f"{path}."))
        else:
            flat[path] = item
    return flat


def _unflatten_paths(flat: Mapping[Any, Any], key: str, strict: bool) -> Any:
    tree: dict[str, Any] = {}
    for path, item in flat.items():
        *parents, last = str(path).split(".")
        container = tree
        for seg in parents:
            child = container.setdefault(seg, {})
            if not isinstance(child, dict):
                return _malformed(Kind.OBJECT, flat, f"path {path!r} clashes with an earlier value", key, strict)
            container = child
        if last in container:
            return _malformed(Kind.OBJECT, flat, f"path {path!r} clashes with an earlier value", key, strict)
        container[last] = item
    return tree
