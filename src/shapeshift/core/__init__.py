"""
Core package aggregator for the shapeshift schema engine.

## Contracts
- Kinds: the closed set of descriptor types and runtime classification.
- Nodes: immutable, compiled schema nodes (one dataclass per kind).
- Meta-schema: self-hosted descriptor validation, bootstrapped once at import.
- Factory: ``compile(descriptor)``.
- Enforcement: ``enforce(node, value)``.
- Bridge: ``to_json``/``from_json``/``to_string_object``/``from_string_object`` and the flat
  ``to_path_string_object``/``from_path_string_object`` variant.
- Defaults: ``expand``/``reduce``.
- Errors/Reports: exception taxonomy and its Pydantic wire form.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Nodes are immutable and shared freely; every operation returns fresh values.

## Downstream usage
- shapeshift.schema: the ``Schema`` facade binding a node to ``EngineSettings``.
- shapeshift.io: query-string codec and descriptor/document loading.
- shapeshift.cli: ``check``/``describe``/``encode``/``decode`` subcommands.

## Examples
```python
from shapeshift.core import compile, enforce, to_string_object
node = compile({"type": "number", "min": 0, "max": 350})
enforce(node, 350)  # 350
to_string_object(node, 12)  # '12'
```
"""

from __future__ import annotations

from .bridge import (
    from_json,
    from_path_string_object,
    from_string_object,
    to_json,
    to_path_string_object,
    to_string_object,
)
from .defaults import expand, reduce
from .enforcement import enforce
from .errors import (
    ConstraintViolation,
    InvalidDescriptor,
    MissingRequiredField,
    ParseError,
    ShapeshiftError,
    TypeMismatch,
    UnknownProperty,
    UnrepresentableConversion,
    ValidationError,
)
from .factory import compile
from .kinds import Kind, kind_of
from .metaschema import descriptor_from_json, validate_descriptor
from .nodes import SchemaNode, lookup
from .reports import ErrorReport, SchemaSummary
from .values import UNSET, clone, equals
from .verdict import Verdict

__all__ = [
    "compile",
    "enforce",
    "expand",
    "reduce",
    "to_json",
    "to_string_object",
    "from_json",
    "from_string_object",
    "to_path_string_object",
    "from_path_string_object",
    "validate_descriptor",
    "descriptor_from_json",
    "lookup",
    "Kind",
    "kind_of",
    "SchemaNode",
    "Verdict",
    "UNSET",
    "clone",
    "equals",
    "ErrorReport",
    "SchemaSummary",
    "ShapeshiftError",
    "InvalidDescriptor",
    "ValidationError",
    "MissingRequiredField",
    "TypeMismatch",
    "ConstraintViolation",
    "UnknownProperty",
    "UnrepresentableConversion",
    "ParseError",
]
