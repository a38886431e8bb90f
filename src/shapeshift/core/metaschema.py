"""
Self-hosted descriptor validation (the meta-schema).

Every descriptor a user compiles is first enforced against a meta-node: an ordinary compiled
Object schema whose governed values are descriptors of one kind. The meta-nodes themselves are
compiled once, with validation skipped, because no validator exists before they do.

Responsibilities
- Hold the per-kind meta-descriptors (``META_DESCRIPTORS``).
- ``bootstrap(construct)``: compile them into the meta-node registry. Called exactly once by
  ``shapeshift.core.factory`` at import time.
- ``validate_descriptor``: dispatch on ``type``, enforce the matching meta-node, then re-enter
  for nested ``schema`` descriptors with their path (``descriptor.schema.items.schema``).
- ``descriptor_from_json``: decode a JSON/YAML descriptor document into a native descriptor by
  running each field through its meta-node's ``from_json``.

Startup sequence
----------------
1. ``shapeshift.core.factory`` is imported and defines ``compile``.
2. It calls ``bootstrap(compile)``; every meta-descriptor is compiled with
   ``skip_validation=True``.
3. Subsequent ``compile`` calls validate against the registry.

Notes:
    - Meta-descriptors use the same keys users write (``on_error`` rather than ``onError``).
    - Date descriptors take date bounds; string, number and array bounds are numbers.
    - Object and Array defaults must be the empty collection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .bridge import from_json
from .enforcement import enforce
from .errors import InvalidDescriptor, ShapeshiftError, ValidationError
from .kinds import Kind, kind_from_value, kind_of
from .nodes import ObjectNode, SchemaNode

__all__ = [
    "META_DESCRIPTORS",
    "bootstrap",
    "is_bootstrapped",
    "meta_node",
    "validate_descriptor",
    "descriptor_from_json",
]

logger = logging.getLogger(__name__)

_META_NODES: dict[Kind, ObjectNode] = {}


# -----------------------------------------------------------------------------
# Property-name predicate
# -----------------------------------------------------------------------------


def _check_property_names(properties: Any) -> bool | str:
    for name in properties:
        if not isinstance(name, str):
            return f"property names must be strings (got {kind_of(name)})"
    return True


# -----------------------------------------------------------------------------
# Meta-descriptors
# -----------------------------------------------------------------------------


def _meta_descriptor(kind: Kind) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "type": {"type": "string", "eq": kind.value},
        "default": {"type": kind.value, "optional": True},
        "optional": {"type": "boolean", "optional": True},
        "eq": {"type": kind.value, "optional": True},
        "in": {"type": "array", "optional": True, "schema": {"type": kind.value}},
        "test": {"type": "function", "optional": True},
        "on_error": {"type": "function", "optional": True},
    }
    if kind in (Kind.STRING, Kind.NUMBER, Kind.ARRAY):
        fields["min"] = {"type": "number", "optional": True}
        fields["max"] = {"type": "number", "optional": True}
    if kind is Kind.DATE:
        fields["min"] = {"type": "date", "optional": True}
        fields["max"] = {"type": "date", "optional": True}
    if kind is Kind.STRING:
        fields["regex"] = {"type": "regex", "optional": True}
    if kind is Kind.NUMBER:
        fields["nan"] = {"type": "boolean", "optional": True}
    if kind is Kind.OBJECT:
        fields["default"]["eq"] = {}
        fields["schema"] = {"type": "object", "optional": True, "test": _check_property_names}
    if kind is Kind.ARRAY:
        fields["default"]["eq"] = []
        fields["schema"] = {"type": "object", "optional": True, }
    return {"type": "object", "schema": fields}


META_DESCRIPTORS: dict[Kind, dict[str, Any]] = {kind: _meta_descriptor(kind) for kind in Kind}


# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------


def bootstrap(construct: Callable[..., SchemaNode]) -> None:
    """
    Compile the meta-descriptors into the meta-node registry.

    Args:
        construct (Callable[..., SchemaNode]): ``shapeshift.core.factory.compile``; called with
            ``skip_validation=True``.

    Notes:
        Idempotent. The registry is filled only after every meta-node compiled.
    """
    if _META_NODES:
        return
    built: dict[Kind, ObjectNode] = {}
    for kind, descriptor in META_DESCRIPTORS.items():
        node = construct(descriptor, skip_validation=True)
        if not isinstance(node, ObjectNode):
            raise TypeError(f"meta-descriptor for {kind.value} must compile to an object node")
        built[kind] = node
    _META_NODES.update(built)
    logger.debug("meta-schema bootstrapped for kinds: %s", ", ".join(k.value for k in built))


def is_bootstrapped() -> bool:
    return bool(_META_NODES)


def meta_node(kind: Kind | str) -> ObjectNode:
    """
    Meta-node validating descriptors of kind.

    Raises:
        RuntimeError: If the meta-schema has not been bootstrapped.
        ValueError: If kind is not a kind name.
    """
    if not _META_NODES:
        raise RuntimeError("meta-schema not bootstrapped; import shapeshift.core.factory first")
    return _META_NODES[kind_from_value(kind)]


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def _descriptor_kind(descriptor: Any, key: str) -> Kind:
    if not isinstance(descriptor, Mapping):
        raise InvalidDescriptor(f"invalid schema: {key} must be an object (got {kind_of(descriptor)})")
    try:
        return kind_from_value(descriptor.get("type"))
    except ValueError as exc:
        raise InvalidDescriptor(f"invalid schema: invalid type at {key}.type: {descriptor.get('type')!r}") from exc


def validate_descriptor(descriptor: Any, key: str = "descriptor") -> None:
    """
    Check a descriptor against the meta-schema.

    Args:
        descriptor (Any): Candidate schema descriptor.
        key (str): Path of descriptor in error messages. Nested descriptors are checked under
            ``<key>.schema`` (array element) and ``<key>.schema.<name>`` (object property).

    Raises:
        InvalidDescriptor: If descriptor is not a mapping, names an unknown type, or fails its
            kind's meta-node (nested descriptors included).
    """
    kind = _descriptor_kind(descriptor, key)
    try:
        enforce(meta_node(kind), descriptor, key)
    except ValidationError as err:
        raise InvalidDescriptor(f"invalid schema: {err}") from err

    nested = descriptor.get("schema")
    if nested is None:
        return
    if kind is Kind.ARRAY:
        validate_descriptor(nested, f"{key}.schema")
    elif kind is Kind.OBJECT:
        for name, sub in nested.items():
            validate_descriptor(sub, f"{key}.schema.{name}")


def descriptor_from_json(doc: Any, key: str = "descriptor") -> dict[str, Any]:
    """
    Decode a JSON/YAML descriptor document into a native descriptor.

    Each field is parsed by the matching meta-node property in non-strict mode, so dates and
    patterns become typed values while fields that do not parse are kept raw for
    ``validate_descriptor`` to reject with a precise path. Nested ``schema`` fields are decoded
    recursively.

    Args:
        doc (Any): Decoded document, e.g. ``{"type": "date", "min": "2020-01-01T00:00:00Z"}``.
        key (str): Path of doc in error messages.

    Returns:
        dict[str, Any]: Descriptor ready for ``compile``.

    Raises:
        InvalidDescriptor: If doc is not a mapping or names an unknown type.
    """
    kind = _descriptor_kind(doc, key)
    fields = meta_node(kind).properties or {}
    out: dict[str, Any] = {}
    for name, raw in doc.items():
        if name == "schema" and kind is Kind.ARRAY and isinstance(raw, Mapping):
            out[name] = descriptor_from_json(raw, f"{key}.schema")
        elif name == "schema" and kind is Kind.OBJECT and isinstance(raw, Mapping):
            out[name] = {prop: descriptor_from_json(sub, f"{key}.schema.{prop}") for prop, sub in raw.items()}
        elif name in fields and raw is not None:
            try:
                out[name] = from_json(fields[name], raw, strict=False, noenforce=True, key=f"{key}.{name}")
            except ShapeshiftError as err:
                raise InvalidDescriptor(f"invalid schema: {err}") from err
        else:
            out[name] = raw
    return out
