"""
Pydantic v2 models for the engine's wire-facing reports.

Validation failures and schema descriptions leave the library (CLI output, HTTP error bodies,
documentation endpoints) as plain JSON. These models pin that shape so every consumer sees
the same fields.

Responsibilities
- ``ErrorReport``: JSON-safe rendering of a ``ValidationError`` (key, value snapshot, message,
  which constraint fired, and the original message when an ``on_error`` hook rewrote it).
- ``SchemaSummary``: capability summary of a compiled schema node.

Style
- Zero-IO (stdlib + pydantic only).
- ``extra="forbid"`` and frozen; reports are immutable once built.

Examples
--------
>>> from shapeshift.core.reports import ErrorReport
>>> report = ErrorReport(
...     error="MissingRequiredField",
...     key="target.id",
...     message="invalid target.id value: null. property required",
... )
>>> report.key
'target.id'
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ErrorReport",
    "SchemaSummary",
]


class ErrorReport(BaseModel):
    """
    JSON-safe description of a single validation failure.

    Attributes:
        error (str): Exception class name (e.g. ``"TypeMismatch"``).
        key (str): Dotted/bracketed path of the offending value (e.g. ``target.items[3].id``).
        value (Any): JSON-safe snapshot of the offending value.
        message (str): Full human-readable message.
        constraint (str | None): Constraint that fired for ``ConstraintViolation``
            (one of eq, in, min, max, regex, nan, test).
        original_message (str | None): Message of the original error when an ``on_error`` hook
            replaced it.

    Raises:
        pydantic.ValidationError: If key is empty.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    error: str
    key: str
    value: Any = None
    message: str
    constraint: str | None = None
    original_message: str | None = None

    @field_validator("key")
    @classmethod
    def _check_key(cls, v: str) -> str:
        if not v:
            raise ValueError("key must be a non-empty path")
        return v


class SchemaSummary(BaseModel):
    """
    Capability summary of a compiled schema node.

    Attributes:
        kind (str): Declared kind of the root node.
        optional (bool): Whether the root accepts an absent value.
        string_object_representable (bool): Governed values round-trip through the string-object form.
        json_representable (bool): Governed values round-trip through JSON.
        path_string_object_representable (bool): Governed values round-trip through the flat
            path-string form.
        descriptor (Any): JSON description of the descriptor itself, or None when the descriptor
            holds functions.
        properties (list[str]): Declared property names for object schemas (empty otherwise).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: str
    optional: bool = False
    string_object_representable: bool
    json_representable: bool
    path_string_object_representable: bool = False
    descriptor: Any = None
    properties: list[str] = Field(default_factory=list)
