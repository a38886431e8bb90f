"""
Schema node factory: descriptor -> validated, immutable ``SchemaNode`` tree.

Responsibilities
- ``compile(descriptor)``: validate against the meta-schema (unless skipped), then build the node
  for ``descriptor["type"]``, compiling Array element and Object property descriptors recursively.
- Compute, once per node, the two representation-capability flags and the static JSON and
  string-object renderings of the descriptor.
- Run the meta-schema bootstrap when this module is imported.

Capability rules
----------------
| Kind            | JSON representable                | string-object representable            |
|-----------------|-----------------------------------|----------------------------------------|
| scalar kinds    | yes                               | yes                                    |
| regex           | yes                               | no                                     |
| function        | no                                | no                                     |
| array           | element declared and JSON-capable | element declared and of a scalar kind  |
| object          | properties declared, all capable  | properties declared, all capable       |

Examples
--------
>>> from shapeshift.core.factory import compile
>>> node = compile({"type": "array", "schema": {"type": "string"}})
>>> node.string_object_representable, node.json_representable
(True, True)
>>> compile({"type": "array", "schema": {"type": "array", "schema": {"type": "number"}}}).string_object_representable
False
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from . import metaschema
from .errors import InvalidDescriptor, UnrepresentableConversion, snapshot
from .kinds import SCALAR_KINDS, Kind, ensure_dispatch_covers_kinds, kind_from_value
from .nodes import NODE_TYPES, SchemaNode
from .parser import json_tree, stringify_tree
from .serde import json_dumps_pretty
from .values import clone

__all__ = ["compile"]

logger = logging.getLogger(__name__)


def compile(descriptor: Mapping[str, Any], skip_validation: bool = False) -> SchemaNode:
    """
    Compile a schema descriptor into a schema node.

    Args:
        descriptor (Mapping[str, Any]): Schema descriptor (see ``META_DESCRIPTORS`` for its keys).
        skip_validation (bool): Bypass the meta-schema. Inherited by child descriptors; only the
            bootstrap sets it.

    Returns:
        SchemaNode: Immutable node, safe to cache and share across threads.

    Raises:
        InvalidDescriptor: If the descriptor fails the meta-schema. The message starts with the
            descriptor's pretty JSON dump.
    """
    if not skip_validation:
        try:
            metaschema.validate_descriptor(descriptor)
        except InvalidDescriptor as err:
            dump = json_dumps_pretty(snapshot(descriptor))
            logger.debug("rejected schema descriptor: %s", err)
            raise InvalidDescriptor(f"invalid schema descriptor:\n{dump}\n{err}", descriptor_json=dump) from err
    return _construct(descriptor, skip_validation)


def _construct(descriptor: Mapping[str, Any], skip_validation: bool) -> SchemaNode:
    kind = kind_from_value(descriptor["type"])
    specific = _SPECIFIC[kind](descriptor, skip_validation)
    allowed = descriptor.get("in")
    fields: dict[str, Any] = {
        "optional": bool(descriptor.get("optional", False)),
        "default": clone(descriptor.get("default")),
        "eq": clone(descriptor.get("eq")),
        "allowed": None if allowed is None else tuple(clone(list(allowed))),
        "test": descriptor.get("test"),
        "on_error": descriptor.get("on_error"),
        "descriptor_json": _render(json_tree, descriptor),
        "descriptor_string_object": _render(stringify_tree, descriptor),
        **specific,
    }
    fields["json_representable"] = _json_capable(kind, specific)
    fields["string_object_representable"] = _string_object_capable(kind, specific)
    fields["path_string_object_representable"] = _path_string_object_capable(kind, specific)
    return NODE_TYPES[kind](**fields)


def _render(convert: Callable[[Any], Any], descriptor: Mapping[str, Any]) -> Any:
    try:
        return convert(descriptor)
    except UnrepresentableConversion:
        return None


# -----------------------------------------------------------------------------
# Kind-specific fields
# -----------------------------------------------------------------------------


def _no_fields(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    return {}


def _bounds(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    return {"min": descriptor.get("min"), "max": descriptor.get("max")}


def _string_fields(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    return {**_bounds(descriptor, skip_validation), "regex": descriptor.get("regex")}


def _number_fields(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    return {**_bounds(descriptor, skip_validation), "nan": bool(descriptor.get("nan", False))}


def _array_fields(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    element = descriptor.get("schema")
    return {
        **_bounds(descriptor, skip_validation),
        "element": None if element is None else compile(element, skip_validation),
    }


def _object_fields(descriptor: Mapping[str, Any], skip_validation: bool) -> dict[str, Any]:
    properties = descriptor.get("schema")
    if properties is None:
        return {"properties": None}
    compiled = {name: compile(sub, skip_validation) for name, sub in properties.items()}
    return {"properties": MappingProxyType(compiled)}


_SPECIFIC: dict[Kind, Callable[[Mapping[str, Any], bool], dict[str, Any]]] = {
    Kind.STRING: _string_fields,
    Kind.NUMBER: _number_fields,
    Kind.BOOLEAN: _no_fields,
    Kind.DATE: _bounds,
    Kind.REGEX: _no_fields,
    Kind.FUNCTION: _no_fields,
    Kind.ARRAY: _array_fields,
    Kind.OBJECT: _object_fields,
}
ensure_dispatch_covers_kinds(_SPECIFIC, "_SPECIFIC")


# -----------------------------------------------------------------------------
# Representation capability
# -----------------------------------------------------------------------------


def _json_capable(kind: Kind, specific: Mapping[str, Any]) -> bool:
    if kind is Kind.FUNCTION:
        return False
    if kind is Kind.ARRAY:
        element: SchemaNode | None = specific["element"]
        return element is not None and element.json_representable
    if kind is Kind.OBJECT:
        properties: Mapping[str, SchemaNode] | None = specific["properties"]
        return properties is not None and all(p.json_representable for p in properties.values())
    return True


def _string_object_capable(kind: Kind, specific: Mapping[str, Any]) -> bool:
    if kind is Kind.ARRAY:
        element: SchemaNode | None = specific["element"]
        return element is not None and element.kind in SCALAR_KINDS
    if kind is Kind.OBJECT:
        properties: Mapping[str, SchemaNode] | None = specific["properties"]
        return properties is not None and all(p.string_object_representable for p in properties.values())
    return kind in SCALAR_KINDS


def _path_string_object_capable(kind: Kind, specific: Mapping[str, Any]) -> bool:
    if kind is Kind.OBJECT:
        properties: Mapping[str, SchemaNode] | None = specific["properties"]
        return properties is not None and all(p.path_string_object_representable for p in properties.values())
    return kind in SCALAR_KINDS


metaschema.bootstrap(compile)
