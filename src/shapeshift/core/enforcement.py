"""
Recursive enforcement engine.

``enforce(node, value)`` checks a value against a compiled schema node and returns its canonical
form, or raises the first ``ValidationError`` found during a depth-first walk.

Responsibilities
- Absent-value handling (optional, default, ``MissingRequiredField``).
- Type check, then the shared constraints in fixed order: ``eq``, ``in``, bounds, ``regex``,
  ``nan``, children, custom ``test``.
- Route every error raised by a node's own checks through its ``on_error`` hook.

Notes
- The input is never mutated. Arrays come back as new lists; objects as new dicts holding only
  declared properties whose canonical value is present.
- Nothing here logs: enforcement is the hot path.

Examples
--------
>>> from shapeshift.core.factory import compile
>>> from shapeshift.core.enforcement import enforce
>>> node = compile({"type": "object", "schema": {"n": {"type": "number", "optional": True, "default": 3}}})
>>> enforce(node, {}), enforce(node, {}, expand=True)
({}, {'n': 3})
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any, NoReturn

from .constants import DEFAULT_KEY
from .errors import (
    ConstraintViolation,
    MissingRequiredField,
    ShapeshiftError,
    TypeMismatch,
    UnknownProperty,
    ValidationError,
    display,
    snapshot,
)
from .kinds import Kind, ensure_dispatch_covers_kinds, kind_of
from .nodes import ArrayNode, DateNode, NumberNode, ObjectNode, SchemaNode, StringNode
from .values import epoch_millis, equals
from .verdict import as_verdict

__all__ = ["enforce"]


def enforce(node: SchemaNode, value: Any, key: str = DEFAULT_KEY, *, expand: bool = False) -> Any:
    """
    Enforce a schema node on a value.

    Args:
        node (SchemaNode): Compiled schema.
        value (Any): Value to check; None means absent.
        key (str): Path of value, used in error messages.
        expand (bool): Fill absent optional values that declare a default.

    Returns:
        Any: Canonical value, or None when an optional value is absent.

    Raises:
        ValidationError: First violation found (or whatever an ``on_error`` hook returns).
        ShapeshiftError: Raised unchanged from a custom ``test`` predicate.
    """
    if value is None:
        if expand or not node.optional:
            value = node.make_default()
        if value is None:
            if node.optional:
                return None
            _fail(node, MissingRequiredField(key=key, node=node), None)
    return _ENFORCERS[node.kind](node, value, key, expand)


# -----------------------------------------------------------------------------
# Failure routing
# -----------------------------------------------------------------------------


def _fail(node: SchemaNode, err: ValidationError, value: Any, cause: BaseException | None = None) -> NoReturn:
    if cause is not None:
        err.__cause__ = cause
    hook = node.on_error
    if hook is None:
        raise err
    replacement = hook(err.key, value, node, err)
    if not isinstance(replacement, BaseException):
        raise TypeError(f"on_error must return an exception (got {kind_of(replacement)})") from err
    replacement.original_error = err  # type: ignore[attr-defined]
    raise replacement from err


def _violation(node: SchemaNode, value: Any, key: str, constraint: str, detail: str) -> NoReturn:
    _fail(node, ConstraintViolation(detail, key=key, value=value, constraint=constraint, node=node), value)


# -----------------------------------------------------------------------------
# Shared checks
# -----------------------------------------------------------------------------


def _check_type(node: SchemaNode, value: Any, key: str) -> None:
    if kind_of(value) != node.kind.value:
        _fail(node, TypeMismatch(key=key, value=value, expected=node.kind.value, node=node), value)


def _check_eq_in(node: SchemaNode, value: Any, key: str) -> None:
    if node.eq is not None and not equals(value, node.eq):
        _violation(node, value, key, "eq", f"value must be {display(snapshot(node.eq))}")
    if node.allowed is not None and not any(equals(value, option) for option in node.allowed):
        _violation(node, value, key, "in", f"value must be in {display(snapshot(list(node.allowed)))}")


def _check_bounds(node: SchemaNode, measured: float, low: Any, high: Any, value: Any, key: str, what: str) -> None:
    if low is not None and measured < low:
        _violation(node, value, key, "min", f"{what} must be at least {_bound(node.min)}")
    if high is not None and measured > high:
        _violation(node, value, key, "max", f"{what} must be at most {_bound(node.max)}")


def _bound(bound: Any) -> str:
    return display(snapshot(bound))


def _check_test(node: SchemaNode, value: Any, key: str) -> None:
    if node.test is None:
        return
    try:
        result = node.test(value)
    except ShapeshiftError:
        raise
    except Exception as exc:
        err = ConstraintViolation(f"test raised {type(exc).__name__}: {exc}", key=key, value=value, constraint="test", node=node)
        _fail(node, err, value, cause=exc)
    verdict = as_verdict(result)
    if not verdict.ok:
        _violation(node, value, key, "test", verdict.reason or "value failed test")


# -----------------------------------------------------------------------------
# Per-kind enforcers
# -----------------------------------------------------------------------------


def _enforce_simple(node: SchemaNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    _check_test(node, value, key)
    return value


def _enforce_string(node: StringNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    _check_bounds(node, len(value), node.min, node.max, value, key, "length")
    if node.regex is not None and node.regex.search(value) is None:
        _violation(node, value, key, "regex", f"value must match /{node.regex.pattern}/")
    _check_test(node, value, key)
    return value


def _enforce_number(node: NumberNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    _check_bounds(node, value, node.min, node.max, value, key, "value")
    if not node.nan and isinstance(value, float) and math.isnan(value):
        _violation(node, value, key, "nan", "value must be a number")
    _check_test(node, value, key)
    return value


def _enforce_date(node: DateNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    low = None if node.min is None else epoch_millis(node.min)
    high = None if node.max is None else epoch_millis(node.max)
    _check_bounds(node, epoch_millis(value), low, high, value, key, "date")
    _check_test(node, value, key)
    return value


def _enforce_array(node: ArrayNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    _check_bounds(node, len(value), node.min, node.max, value, key, "length")
    if node.element is None:
        canonical = list(value)
    else:
        canonical = [enforce(node.element, item, f"{key}[{i}]", expand=expand) for i, item in enumerate(value)]
    _check_test(node, canonical, key)
    return canonical


def _enforce_object(node: ObjectNode, value: Any, key: str, expand: bool) -> Any:
    _check_type(node, value, key)
    _check_eq_in(node, value, key)
    if node.properties is None:
        canonical = dict(value)
    else:
        for name in value:
            if name not in node.properties:
                _fail(node, UnknownProperty(key=key, value=value, property_name=str(name), node=node), value)
        canonical = {}
        for name, child in node.properties.items():
            item = enforce(child, value.get(name), f"{key}.{name}", expand=expand)
            if item is not None:
                canonical[name] = item
    _check_test(node, canonical, key)
    return canonical


_Enforcer = Callable[[Any, Any, str, bool], Any]

_ENFORCERS: dict[Kind, _Enforcer] = {
    Kind.STRING: _enforce_string,
    Kind.NUMBER: _enforce_number,
    Kind.BOOLEAN: _enforce_simple,
    Kind.DATE: _enforce_date,
    Kind.REGEX: _enforce_simple,
    Kind.FUNCTION: _enforce_simple,
    Kind.ARRAY: _enforce_array,
    Kind.OBJECT: _enforce_object,
}
ensure_dispatch_covers_kinds(_ENFORCERS, "_ENFORCERS")
