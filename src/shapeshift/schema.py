"""
Schema facade.

Binds one compiled schema node to an ``EngineSettings`` instance and exposes every core
operation as a method, so callers compile once and reuse the object.

Source of truth
- Compilation and descriptor validation: shapeshift.core.factory / shapeshift.core.metaschema
- Enforcement: shapeshift.core.enforcement
- Conversions (JSON, string objects, path-string objects): shapeshift.core.bridge
- Query strings: shapeshift.io.querystring
- Defaults: shapeshift.core.defaults

Examples
--------
>>> import re
>>> from shapeshift import Schema
>>> idpage = Schema.make({
...     "type": "object",
...     "schema": {
...         "id": {"type": "string", "regex": re.compile(r"^[\\da-f]{24}$")},
...         "page": {"type": "number", "optional": True, "default": 0, "min": 0},
...     },
... })
>>> idpage.from_query_string("id=5f1e0c2b9d3e4a0012345678&page=3")
{'id': '5f1e0c2b9d3e4a0012345678', 'page': 3}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from shapeshift.core.bridge import (
    from_json,
    from_path_string_object,
    from_string_object,
    to_json,
    to_path_string_object,
    to_string_object,
)
from shapeshift.core.defaults import expand, reduce
from shapeshift.core.enforcement import enforce
from shapeshift.core.errors import UnrepresentableConversion
from shapeshift.core.factory import compile
from shapeshift.core.nodes import ObjectNode, SchemaNode, lookup
from shapeshift.core.reports import SchemaSummary
from shapeshift.core.values import UNSET, clone
from shapeshift.io.config import EngineSettings
from shapeshift.io.querystring import decode, encode

__all__ = ["Schema"]

logger = logging.getLogger(__name__)


class Schema:
    """
    Facade bound to a compiled schema node and EngineSettings.

    Notes:
        - Construction compiles (and validates) the descriptor; nothing else is cached.
        - ``key``, ``strict`` and ``expand`` arguments default to the bound settings.
        - Instances are immutable in practice and safe to share across threads.
    """

    def __init__(self, descriptor: Mapping[str, Any], settings: EngineSettings | None = None) -> None:
        """
        Compile a descriptor.

        Args:
            descriptor (Mapping[str, Any]): Schema descriptor.
            settings (EngineSettings | None): Defaults; ``EngineSettings()`` when omitted.

        Raises:
            shapeshift.core.errors.InvalidDescriptor: If the descriptor fails the meta-schema.
        """
        self.settings = settings or EngineSettings()
        self.node: SchemaNode = compile(descriptor)
        logger.debug(
            "compiled %s schema (json=%s, string_object=%s)",
            self.node.type,
            self.node.json_representable,
            self.node.string_object_representable,
        )

    @classmethod
    def make(cls, descriptor: Mapping[str, Any], settings: EngineSettings | None = None) -> Schema:
        return cls(descriptor, settings)

    def __repr__(self) -> str:
        return f"Schema(type={self.node.type!r}, optional={self.node.optional!r})"

    def _key(self, key: str | None) -> str:
        return self.settings.default_key if key is None else key

    def _strict(self, strict: bool | None) -> bool:
        return self.settings.strict if strict is None else strict

    # ---------------------------------------------------------------------
    # Enforcement and defaults
    # ---------------------------------------------------------------------
    def enforce(self, value: Any, key: str | None = None, *, expand: bool | None = None) -> Any:
        """Enforce the schema on value and return its canonical form (see ``core.enforcement.enforce``)."""
        return enforce(
            self.node,
            value,
            self._key(key),
            expand=self.settings.expand if expand is None else expand,
        )

    def expand(self, value: Any) -> Any:
        return expand(self.node, value)

    def reduce(self, value: Any) -> Any:
        return reduce(self.node, value)

    # ---------------------------------------------------------------------
    # Conversions
    # ---------------------------------------------------------------------
    def to_json(self, value: Any = UNSET, *, strict: bool | None = None) -> Any:
        """JSON form of value, or of the schema itself when value is omitted."""
        return to_json(self.node, value, strict=self._strict(strict), key=self.settings.default_key)

    def from_json(self, raw: Any, *, strict: bool | None = None, noenforce: bool = False) -> Any:
        return from_json(self.node, raw, strict=self._strict(strict), noenforce=noenforce, key=self.settings.default_key)

    def to_string_object(self, value: Any = UNSET, *, strict: bool | None = None) -> Any:
        """String-object form of value, or of the schema itself when value is omitted."""
        return to_string_object(self.node, value, strict=self._strict(strict), key=self.settings.default_key)

    def from_string_object(self, raw: Any, *, strict: bool | None = None, noenforce: bool = False) -> Any:
        return from_string_object(
            self.node,
            raw,
            strict=self._strict(strict),
            noenforce=noenforce,
            key=self.settings.default_key,
        )

    def to_path_string_object(self, value: Any, *, strict: bool | None = None) -> Any:
        """Flat path-string form of value (``{"filter.lang": "fr"}``)."""
        return to_path_string_object(self.node, value, strict=self._strict(strict), key=self.settings.default_key)

    def from_path_string_object(self, raw: Any, *, strict: bool | None = None, noenforce: bool = False) -> Any:
        return from_path_string_object(
            self.node,
            raw,
            strict=self._strict(strict),
            noenforce=noenforce,
            key=self.settings.default_key,
        )

    def to_query_string(self, value: Any, *, strict: bool | None = None) -> str:
        """
        Encode a value as a URL query string.

        Raises:
            UnrepresentableConversion: If the schema is not string-object representable or the
                value does not convert to a mapping (only object schemas have a query-string form).
        """
        so = self.to_string_object(value, strict=strict)
        if not isinstance(so, Mapping):
            raise UnrepresentableConversion("only object values can be encoded as a query string")
        return encode(so)

    def from_query_string(self, query: str, *, strict: bool | None = None, noenforce: bool = False) -> Any:
        return self.from_string_object(decode(query), strict=strict, noenforce=noenforce)

    # ---------------------------------------------------------------------
    # Introspection
    # ---------------------------------------------------------------------
    def lookup(self, path: str) -> SchemaNode | None:
        """Node governing path (``"a.b"``, ``"items[]"``), or None if undeclared."""
        return lookup(self.node, path)

    def describe(self) -> SchemaSummary:
        """
        Capability summary of the root node.

        Returns:
            SchemaSummary: kind, optionality, capability flags, the descriptor's JSON description
            (None when it holds functions) and declared property names.
        """
        node = self.node
        properties = list(node.properties or {}) if isinstance(node, ObjectNode) else []
        return SchemaSummary(
            kind=node.type,
            optional=node.optional,
            string_object_representable=node.string_object_representable,
            path_string_object_representable=node.path_string_object_representable,
            json_representable=node.json_representable,
            descriptor=clone(node.descriptor_json),
            properties=properties,
        )
