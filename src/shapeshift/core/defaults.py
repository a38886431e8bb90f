"""
Default materializer and minimizer.

``expand`` fills absent values from schema defaults; ``reduce`` strips values equal to their
defaults. For any value without a stray default-valued optional field,
``reduce(node, expand(node, v)) == v``.

Notes:
    - Both functions return new collections and leave their input untouched.
    - Neither validates: undeclared object properties are carried through unchanged.
    - Object and Array defaults are always the empty collection, so a collection reduces to
      absent only when it is empty and the schema declares a default.
    - An absent optional collection without a default stays absent under ``expand``.

Examples:
    >>> from shapeshift.core.factory import compile
    >>> from shapeshift.core.defaults import expand, reduce
    >>> node = compile({"type": "object", "schema": {"page": {"type": "number", "optional": True, "default": 0}}})
    >>> expand(node, {})
    {'page': 0}
    >>> reduce(node, {"page": 0})
    {}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .nodes import ArrayNode, ObjectNode, SchemaNode
from .values import equals

__all__ = [
    "expand",
    "reduce",
]


def expand(node: SchemaNode, value: Any) -> Any:
    """
    Recursively fill absent values from schema defaults.

    Args:
        node (SchemaNode): Compiled schema.
        value (Any): Value to expand; None means absent.

    Returns:
        Any: Expanded value (None if absent and nothing applies).
    """
    if value is None:
        if not isinstance(node, (ArrayNode, ObjectNode)):
            return node.make_default()
        if node.optional and node.default is None:
            return None
        value = node.make_default()
        if value is None:
            value = [] if isinstance(node, ArrayNode) else {}

    if isinstance(node, ArrayNode) and isinstance(value, (list, tuple)):
        if node.element is None:
            return list(value)
        return [expand(node.element, item) for item in value]
    if isinstance(node, ObjectNode) and isinstance(value, Mapping):
        out = dict(value)
        for name, child in (node.properties or {}).items():
            item = expand(child, value.get(name))
            if item is None:
                out.pop(name, None)
            else:
                out[name] = item
        return out
    return value


def reduce(node: SchemaNode, value: Any) -> Any:
    """
    Recursively strip values equal to their schema defaults.

    Args:
        node (SchemaNode): Compiled schema.
        value (Any): Value to reduce.

    Returns:
        Any: Reduced value, or None when value itself reduces away.
    """
    if value is None:
        return None

    if isinstance(node, ArrayNode) and isinstance(value, (list, tuple)):
        if node.element is None:
            items = list(value)
        else:
            items = [r for r in (reduce(node.element, item) for item in value) if r is not None]
        return None if not items and node.default is not None else items

    if isinstance(node, ObjectNode) and isinstance(value, Mapping):
        props = node.properties or {}
        out = {}
        for name, item in value.items():
            child = props.get(name)
            reduced = item if child is None else reduce(child, item)
            if reduced is not None:
                out[name] = reduced
        return None if not out and node.default is not None else out

    if node.default is not None and equals(value, node.default):
        return None
    return value
