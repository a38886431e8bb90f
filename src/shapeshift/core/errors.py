"""
Core exception types raised by descriptor validation, enforcement and conversion.

Provides a small, typed taxonomy for schema-engine failures:
- InvalidDescriptor for malformed schema definitions (construction time, never recoverable).
- ValidationError and its subclasses for values that do not satisfy a compiled schema:
    - MissingRequiredField
    - TypeMismatch
    - ConstraintViolation (eq, in, min, max, regex, nan, test)
    - UnknownProperty
- UnrepresentableConversion when a value or schema cannot take the requested representation.
- ParseError when the value parser rejects a raw leaf.

Notes:
    - Failure is fail-fast and single-error: the first violation found during a depth-first walk
      is the one raised.
    - ValidationError messages always embed the dotted/bracketed path and a truncated canonical
      JSON snapshot of the offending value.
    - ``ValidationError.report()`` renders the error as a ``shapeshift.core.reports.ErrorReport``.

Examples:
    Catch a type mismatch and inspect its path.

    >>> from shapeshift.core.errors import TypeMismatch
    >>> err = TypeMismatch(key="target.bookId", value=0, expected="string")
    >>> str(err)
    'invalid target.bookId value: 0. value must be typed string (got number)'
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .constants import MAX_DISPLAY_LENGTH, TRUNCATION_MARKER
from .kinds import kind_of
from .reports import ErrorReport
from .serde import json_dumps_canonical

if TYPE_CHECKING:
    from .nodes import SchemaNode

__all__ = [
    "ShapeshiftError",
    "InvalidDescriptor",
    "ValidationError",
    "MissingRequiredField",
    "TypeMismatch",
    "ConstraintViolation",
    "UnknownProperty",
    "UnrepresentableConversion",
    "ParseError",
    "snapshot",
    "display",
]


class ShapeshiftError(Exception):
    """Base class for every error raised by the schema engine."""


class InvalidDescriptor(ShapeshiftError, ValueError):
    """
    Malformed schema descriptor, detected by the meta-schema before a node is built.

    Attributes:
        descriptor_json (str | None): Pretty JSON dump of the offending descriptor when it could
            be rendered.
    """

    def __init__(self, message: str, *, descriptor_json: str | None = None) -> None:
        super().__init__(message)
        self.descriptor_json = descriptor_json


class ValidationError(ShapeshiftError, ValueError):
    """
    A value failed a compiled schema.

    Attributes:
        key (str): Dotted/bracketed path of the offending value.
        value (Any): JSON-safe snapshot of the offending value.
        display (str): Canonical JSON of the snapshot, truncated for messages.
        detail (str): What was expected, without the path/value prefix.
        node (SchemaNode | None): Schema node whose own check failed.
        original_error (BaseException | None): Set when an ``on_error`` hook replaced this error.
    """

    def __init__(
        self,
        detail: str,
        *,
        key: str,
        value: Any = None,
        node: SchemaNode | None = None,
    ) -> None:
        self.key = key
        self.value = snapshot(value)
        self.display = display(self.value)
        self.detail = detail
        self.node = node
        self.original_error: BaseException | None = None
        super().__init__(f"invalid {key} value: {self.display}. {detail}")

    @property
    def message(self) -> str:
        return str(self)

    @property
    def constraint(self) -> str | None:
        return None

    def report(self) -> ErrorReport:
        """
        Render the error as a JSON-safe report.

        Returns:
            ErrorReport: Frozen report carrying the class name, path, snapshot and message.
        """
        original = self.original_error
        return ErrorReport(
            error=type(self).__name__,
            key=self.key,
            value=self.value,
            message=self.message,
            constraint=self.constraint,
            original_message=str(original) if original is not None else None,
        )


class MissingRequiredField(ValidationError):
    """A required value is absent and the schema declares no default."""

    def __init__(self, *, key: str, node: SchemaNode | None = None) -> None:
        super().__init__("property required", key=key, value=None, node=node)


class TypeMismatch(ValidationError):
    """
    The runtime kind of a value does not match the declared kind.

    Attributes:
        expected (str): Declared kind.
        actual (str): Runtime kind (see ``shapeshift.core.kinds.kind_of``).
    """

    def __init__(self, *, key: str, value: Any, expected: str, node: SchemaNode | None = None) -> None:
        self.expected = expected
        self.actual = kind_of(value)
        super().__init__(
            f"value must be typed {expected} (got {self.actual})",
            key=key,
            value=value,
            node=node,
        )


class ConstraintViolation(ValidationError):
    """A value of the right kind failed one of the schema's constraints."""

    def __init__(
        self,
        detail: str,
        *,
        key: str,
        value: Any,
        constraint: str,
        node: SchemaNode | None = None,
    ) -> None:
        self._constraint = constraint
        super().__init__(detail, key=key, value=value, node=node)

    @property
    def constraint(self) -> str:
        return self._constraint


class UnknownProperty(ValidationError):
    """
    An object value carries a property the schema does not declare.

    Attributes:
        property_name (str): The undeclared property.
    """

    def __init__(self, *, key: str, value: Any, property_name: str, node: SchemaNode | None = None) -> None:
        self.property_name = property_name
        super().__init__(f"invalid property: {property_name}", key=key, value=value, node=node)


class UnrepresentableConversion(ShapeshiftError, ValueError):
    """
    A conversion was requested that the schema or value cannot support.

    Attributes:
        key (str | None): Path of the offending value, when known.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message if key is None else f"{message} (at {key})")
        self.key = key


class ParseError(ShapeshiftError, ValueError):
    """
    The value parser rejected a raw leaf.

    Attributes:
        kind (str): Kind the leaf was parsed as.
        raw (Any): The rejected raw value.
        key (str | None): Path of the leaf, when known.
    """

    def __init__(self, kind: str, raw: Any, detail: str, *, key: str | None = None) -> None:
        self.kind = kind
        self.raw = raw
        self.key = key
        where = "" if key is None else f" at {key}"
        super().__init__(f"cannot parse {kind} from {raw!r}{where}: {detail}")


def snapshot(value: Any) -> Any:
    """
    JSON-safe rendering of an arbitrary value for error reporting.

    Unlike ``shapeshift.core.parser.json_tree`` this never fails: functions and foreign
    objects are rendered as descriptive strings.
    """
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, re.Pattern):
        return {"pattern": value.pattern, "flags": int(value.flags)}
    if isinstance(value, (list, tuple)):
        return [snapshot(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): snapshot(v) for k, v in value.items()}
    if callable(value):
        return f"<function {getattr(value, '__name__', type(value).__name__)}>"
    return repr(value)


def display(snap: Any) -> str:
    """Canonical JSON of a snapshot, truncated to MAX_DISPLAY_LENGTH characters."""
    text = json_dumps_canonical(snap)
    if len(text) > MAX_DISPLAY_LENGTH:
        text = text[: MAX_DISPLAY_LENGTH - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
    return text
