"""
Compiled, immutable schema nodes.

A schema node is the validated, long-lived form of a schema descriptor. There is exactly one
node class per ``Kind``; all share the modifiers of ``SchemaNode`` and add only the constraints
their kind supports, so an inconsistent constraint set (a ``regex`` on a number) cannot be
expressed at all.

Responsibilities
- Define the node variants (frozen dataclasses) and the ``NODE_TYPES`` registry.
- Carry the memoized representation-capability flags and static descriptor renderings computed
  by ``shapeshift.core.factory`` at construction.
- Provide ``make_default`` and the recursive schema getter ``lookup``.

Notes
- Nodes are built only by ``shapeshift.core.factory.compile`` (which runs the meta-schema first);
  constructing them directly bypasses descriptor validation.
- Nodes compare and hash by identity. They are safe to share across threads.
- Object properties are held in a read-only mapping; an Object node without declared properties
  accepts any mapping, and an Array node without an element schema accepts any elements.

Examples
--------
>>> from shapeshift.core.factory import compile
>>> from shapeshift.core.nodes import lookup
>>> node = compile({"type": "object", "schema": {"tags": {"type": "array", "schema": {"type": "string"}}}})
>>> lookup(node, "tags[]").kind.value
'string'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, TypeAlias

from .kinds import Kind, ensure_dispatch_covers_kinds
from .values import clone
from .verdict import Predicate

__all__ = [
    "ErrorHook",
    "SchemaNode",
    "StringNode",
    "NumberNode",
    "BooleanNode",
    "DateNode",
    "RegexNode",
    "FunctionNode",
    "ArrayNode",
    "ObjectNode",
    "NODE_TYPES",
    "lookup",
]

ErrorHook: TypeAlias = Callable[[str, Any, "SchemaNode", BaseException], BaseException]


@dataclass(frozen=True, eq=False, kw_only=True)
class SchemaNode:
    """
    Modifiers shared by every kind.

    Attributes:
        optional (bool): Absent values are accepted (and omitted from canonical output).
        default (Any): Value cloned in when the governed value is absent (None: no default).
        eq (Any): Exact-match constraint (None: unset).
        allowed (tuple | None): Allow-list (descriptor key ``in``).
        test (Predicate | None): Custom predicate, see ``shapeshift.core.verdict``.
        on_error (ErrorHook | None): Error-transform hook ``(key, value, node, error) -> error``.
        string_object_representable (bool): Memoized capability flag.
        json_representable (bool): Memoized capability flag.
        path_string_object_representable (bool): Memoized capability flag (string-object capable
            and free of arrays).
        descriptor_json (Any): JSON rendering of the descriptor, None if it has none.
        descriptor_string_object (Any): String-object rendering of the descriptor, None if it has none.
    """

    kind: ClassVar[Kind]

    optional: bool = False
    default: Any = None
    eq: Any = None
    allowed: tuple[Any, ...] | None = None
    test: Predicate | None = None
    on_error: ErrorHook | None = None

    string_object_representable: bool = False
    json_representable: bool = False
    path_string_object_representable: bool = False
    descriptor_json: Any = None
    descriptor_string_object: Any = None

    @property
    def type(self) -> str:
        return self.kind.value

    def make_default(self) -> Any:
        """Deep clone of the declared default, or None when there is none."""
        return clone(self.default)


@dataclass(frozen=True, eq=False, kw_only=True)
class StringNode(SchemaNode):
    """String schema; ``min``/``max`` bound the length, ``regex`` must match somewhere in the value."""

    kind: ClassVar[Kind] = Kind.STRING

    min: float | None = None
    max: float | None = None
    regex: re.Pattern[str] | None = None


@dataclass(frozen=True, eq=False, kw_only=True)
class NumberNode(SchemaNode):
    """Number schema; ``nan`` allows NaN, which is rejected by default."""

    kind: ClassVar[Kind] = Kind.NUMBER

    min: float | None = None
    max: float | None = None
    nan: bool = False


@dataclass(frozen=True, eq=False, kw_only=True)
class BooleanNode(SchemaNode):
    kind: ClassVar[Kind] = Kind.BOOLEAN


@dataclass(frozen=True, eq=False, kw_only=True)
class DateNode(SchemaNode):
    """Date schema; bounds are compared by epoch milliseconds."""

    kind: ClassVar[Kind] = Kind.DATE

    min: datetime | None = None
    max: datetime | None = None


@dataclass(frozen=True, eq=False, kw_only=True)
class RegexNode(SchemaNode):
    kind: ClassVar[Kind] = Kind.REGEX


@dataclass(frozen=True, eq=False, kw_only=True)
class FunctionNode(SchemaNode):
    kind: ClassVar[Kind] = Kind.FUNCTION


@dataclass(frozen=True, eq=False, kw_only=True)
class ArrayNode(SchemaNode):
    """
    Array schema.

    Attributes:
        min (float | None): Minimum length.
        max (float | None): Maximum length.
        element (SchemaNode | None): Schema every element must satisfy.
    """

    kind: ClassVar[Kind] = Kind.ARRAY

    min: float | None = None
    max: float | None = None
    element: SchemaNode | None = None


@dataclass(frozen=True, eq=False, kw_only=True)
class ObjectNode(SchemaNode):
    """
    Object schema.

    Attributes:
        properties (Mapping[str, SchemaNode] | None): Declared properties. Values carrying any
            other property are rejected.
    """

    kind: ClassVar[Kind] = Kind.OBJECT

    properties: Mapping[str, SchemaNode] | None = None


NODE_TYPES: dict[Kind, type[SchemaNode]] = {
    Kind.STRING: StringNode,
    Kind.NUMBER: NumberNode,
    Kind.BOOLEAN: BooleanNode,
    Kind.DATE: DateNode,
    Kind.REGEX: RegexNode,
    Kind.FUNCTION: FunctionNode,
    Kind.ARRAY: ArrayNode,
    Kind.OBJECT: ObjectNode,
}
ensure_dispatch_covers_kinds(NODE_TYPES, "NODE_TYPES")

_PATH_TOKEN_RE = re.compile(r"\[\]|[^.\[\]]+")


def lookup(node: SchemaNode, path: str | Sequence[str]) -> SchemaNode | None:
    """
    Recursive schema getter.

    Args:
        node (SchemaNode): Root node.
        path (str | Sequence[str]): Dotted property path (``"a.b"``); ``[]`` or a numeric
            segment (``"items[3].id"``) steps into an array's element schema. An empty path
            returns node itself.

    Returns:
        SchemaNode | None: The node governing that path, or None if the schema does not declare it.
    """
    segments = _PATH_TOKEN_RE.findall(path) if isinstance(path, str) else list(path)
    current = node
    for seg in segments:
        if isinstance(current, ObjectNode) and current.properties is not None and seg in current.properties:
            current = current.properties[seg]
        elif isinstance(current, ArrayNode) and current.element is not None and (seg == "[]" or seg.isdigit()):
            current = current.element
        else:
            return None
    return current
