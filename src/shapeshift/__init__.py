"""
shapeshift: a declarative schema engine.

Compile a descriptor once, then enforce it on values and convert those values between their
typed form, string objects (query strings) and JSON trees.

```python
from shapeshift import Schema
page = Schema({"type": "number", "min": 0, "max": 350, "optional": True, "default": 0})
page.enforce(12)           # 12
page.enforce(None, expand=True)  # 0
page.from_string_object("350")   # 350
```
"""

from __future__ import annotations

from .core import (
    UNSET,
    ConstraintViolation,
    ErrorReport,
    InvalidDescriptor,
    Kind,
    MissingRequiredField,
    ParseError,
    SchemaNode,
    SchemaSummary,
    ShapeshiftError,
    TypeMismatch,
    UnknownProperty,
    UnrepresentableConversion,
    ValidationError,
    Verdict,
    compile,
    descriptor_from_json,
    enforce,
    expand,
    from_json,
    from_path_string_object,
    from_string_object,
    lookup,
    reduce,
    to_json,
    to_path_string_object,
    to_string_object,
    validate_descriptor,
)
from .io import EngineSettings
from .schema import Schema

__version__ = "0.1.0"

__all__ = [
    "Schema",
    "EngineSettings",
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
    "SchemaNode",
    "Verdict",
    "UNSET",
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
