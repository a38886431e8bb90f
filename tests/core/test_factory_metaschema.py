from __future__ import annotations

import re
from datetime import UTC, date, datetime

import pytest

from shapeshift.core.errors import InvalidDescriptor
from shapeshift.core.factory import compile
from shapeshift.core.kinds import Kind
from shapeshift.core.metaschema import (
    META_DESCRIPTORS,
    descriptor_from_json,
    is_bootstrapped,
    meta_node,
    validate_descriptor,
)
from shapeshift.core.nodes import (
    ArrayNode,
    DateNode,
    NumberNode,
    ObjectNode,
    StringNode,
    lookup,
)


def test_meta_schema_is_bootstrapped_for_every_kind() -> None:
    assert is_bootstrapped()
    assert set(META_DESCRIPTORS) == set(Kind)
    for kind in Kind:
        node = meta_node(kind)
        assert isinstance(node, ObjectNode)
        assert node.properties is not None and "type" in node.properties


@pytest.mark.parametrize(
    "descriptor",
    [
        {"type": "string"},
        {"type": "string", "min": 1, "max": 10, "regex": re.compile("^a"), "optional": True, "default": "a"},
        {"type": "number", "min": 0, "max": 350, "nan": True, "in": [1, 2]},
        {"type": "boolean", "eq": True},
        {"type": "date", "min": datetime(2020, 1, 1, tzinfo=UTC)},
        {"type": "regex", "default": re.compile("x")},
        {"type": "function", "optional": True, "test": callable},
        {"type": "array", "schema": {"type": "number"}, "default": []},
        {"type": "object", "schema": {"a": {"type": "string"}}, "default": {}},
        {"type": "object"},
        {"type": "string", "on_error": lambda key, value, node, err: ValueError(key)},
    ],
)
def test_valid_descriptors_compile(descriptor: dict) -> None:
    validate_descriptor(descriptor)
    node = compile(descriptor)
    assert node.type == descriptor["type"]


@pytest.mark.parametrize(
    ("descriptor", "fragment"),
    [
        ("string", "must be an object"),
        ({"type": "integer"}, "invalid type"),
        ({}, "invalid type"),
        ({"type": "number", "regex": re.compile("a")}, "invalid property: regex"),
        ({"type": "number", "min": "0"}, "descriptor.min"),
        ({"type": "string", "optional": "yes"}, "descriptor.optional"),
        ({"type": "number", "default": "zero"}, "descriptor.default"),
        ({"type": "date", "min": 0}, "descriptor.min"),
        ({"type": "array", "default": [1]}, "descriptor.default"),
        ({"type": "object", "default": {"a": 1}}, "descriptor.default"),
        ({"type": "number", "in": ["a"]}, "descriptor.in[0]"),
        ({"type": "string", "test": "not callable"}, "descriptor.test"),
        ({"type": "boolean", "min": 0}, "invalid property: min"),
    ],
)
def test_invalid_descriptors_are_rejected(descriptor: object, fragment: str) -> None:
    with pytest.raises(InvalidDescriptor) as info:
        compile(descriptor)
    message = str(info.value)
    assert message.startswith("invalid schema descriptor:\n")
    assert fragment in message


def test_nested_descriptors_are_validated() -> None:
    with pytest.raises(InvalidDescriptor, match="invalid type"):
        compile({"type": "array", "schema": {"type": "nope"}})
    with pytest.raises(InvalidDescriptor, match="invalid property: regex"):
        compile({"type": "object", "schema": {"a": {"type": "object", "schema": {"b": {"type": "number", "regex": re.compile("x")}}}}})


def test_invalid_descriptor_carries_pretty_dump() -> None:
    with pytest.raises(InvalidDescriptor) as info:
        compile({"type": "number", "max": "high"})
    assert info.value.descriptor_json is not None
    assert '"max": "high"' in info.value.descriptor_json


def test_nodes_are_typed_per_kind_and_immutable() -> None:
    node = compile(
        {
            "type": "object",
            "schema": {
                "name": {"type": "string", "max": 5},
                "page": {"type": "number", "optional": True, "default": 0},
                "born": {"type": "date", "optional": True},
                "tags": {"type": "array", "schema": {"type": "string"}},
            },
        }
    )
    assert isinstance(node, ObjectNode)
    assert isinstance(node.properties["name"], StringNode)
    assert isinstance(node.properties["page"], NumberNode)
    assert isinstance(node.properties["born"], DateNode)
    assert isinstance(node.properties["tags"], ArrayNode)
    with pytest.raises(TypeError):
        node.properties["extra"] = node  # type: ignore[index]
    with pytest.raises(AttributeError):
        node.optional = True  # type: ignore[misc]


def test_compile_does_not_alias_caller_defaults() -> None:
    default: list = []
    node = compile({"type": "array", "optional": True, "default": default})
    default.append(1)
    assert node.default == []
    made = node.make_default()
    made.append(2)
    assert node.make_default() == []


@pytest.mark.parametrize(
    ("descriptor", "string_object", "json"),
    [
        ({"type": "string"}, True, True),
        ({"type": "date"}, True, True),
        ({"type": "regex"}, False, True),
        ({"type": "function"}, False, False),
        ({"type": "array"}, False, False),
        ({"type": "array", "schema": {"type": "number"}}, True, True),
        ({"type": "array", "schema": {"type": "regex"}}, False, True),
        ({"type": "array", "schema": {"type": "array", "schema": {"type": "number"}}}, False, True),
        ({"type": "array", "schema": {"type": "object", "schema": {"a": {"type": "string"}}}}, False, True),
        ({"type": "object"}, False, False),
        ({"type": "object", "schema": {"a": {"type": "string"}, "b": {"type": "array", "schema": {"type": "number"}}}}, True, True),
        ({"type": "object", "schema": {"a": {"type": "object", "schema": {"b": {"type": "boolean"}}}}}, True, True),
        ({"type": "object", "schema": {"f": {"type": "function"}}}, False, False),
    ],
)
def test_representation_capability_flags(descriptor: dict, string_object: bool, json: bool) -> None:
    node = compile(descriptor)
    assert node.string_object_representable is string_object
    assert node.json_representable is json


def test_static_descriptor_renderings() -> None:
    node = compile({"type": "number", "min": 0, "optional": True})
    assert node.descriptor_json == {"type": "number", "min": 0, "optional": True}
    assert node.descriptor_string_object == {"type": "number", "min": "0", "optional": "true"}
    with_test = compile({"type": "number", "test": lambda v: v > 0})
    assert with_test.descriptor_json is None
    assert with_test.descriptor_string_object is None


def test_lookup_walks_properties_and_elements() -> None:
    node = compile(
        {
            "type": "object",
            "schema": {
                "items": {
                    "type": "array",
                    "schema": {"type": "object", "schema": {"id": {"type": "string"}}},
                }
            },
        }
    )
    assert lookup(node, "") is node
    assert lookup(node, "items[3].id").type == "string"
    assert lookup(node, "items[].id").type == "string"
    assert lookup(node, ["items", "[]"]).type == "object"
    assert lookup(node, "items.id") is None
    assert lookup(node, "missing") is None


def test_descriptor_from_json_decodes_typed_fields() -> None:
    doc = {
        "type": "object",
        "schema": {
            "id": {"type": "string", "regex": {"pattern": "^[\\da-f]{24}$"}},
            "since": {"type": "date", "min": "2020-01-01T00:00:00+00:00", "optional": True},
            "tags": {"type": "array", "schema": {"type": "string", "in": ["a", "b"]}},
        },
    }
    descriptor = descriptor_from_json(doc)
    props = descriptor["schema"]
    assert isinstance(props["id"]["regex"], re.Pattern)
    assert props["since"]["min"] == datetime(2020, 1, 1, tzinfo=UTC)
    assert props["tags"]["schema"]["in"] == ["a", "b"]
    node = compile(descriptor)
    assert node.properties["id"].regex.search("0" * 24)


def test_descriptor_from_json_keeps_unparseable_fields_for_validation() -> None:
    descriptor = descriptor_from_json({"type": "date", "min": "yesterday"})
    assert descriptor["min"] == "yesterday"
    with pytest.raises(InvalidDescriptor, match="descriptor.min"):
        compile(descriptor)


def test_descriptor_from_json_rejects_non_descriptors() -> None:
    with pytest.raises(InvalidDescriptor):
        descriptor_from_json(["type", "string"])
    with pytest.raises(InvalidDescriptor):
        descriptor_from_json({"type": "decimal"})


@pytest.mark.parametrize(
    ("descriptor", "fragment"),
    [
        ({"type": "object", "schema": {"a": {"type": "number", "min": "x"}}}, "descriptor.schema.a.min"),
        ({"type": "array", "schema": {"type": "string", "max": "long"}}, "descriptor.schema.max"),
        (
            {"type": "object", "schema": {"items": {"type": "array", "schema": {"type": "nope"}}}},
            "invalid type at descriptor.schema.items.schema.type",
        ),
        ({"type": "object", "schema": {"a": "string"}}, "descriptor.schema.a must be an object"),
    ],
)
def test_nested_descriptor_errors_carry_their_path(descriptor: dict, fragment: str) -> None:
    with pytest.raises(InvalidDescriptor) as info:
        compile(descriptor)
    assert fragment in str(info.value)


def test_validate_descriptor_custom_root_key() -> None:
    with pytest.raises(InvalidDescriptor, match=r"schemas\.page\.max"):
        validate_descriptor({"type": "number", "max": "high"}, "schemas.page")


def test_descriptor_from_json_accepts_calendar_dates() -> None:
    descriptor = descriptor_from_json({"type": "date", "min": date(2020, 1, 1)})
    assert descriptor["min"] == datetime(2020, 1, 1, tzinfo=UTC)
    assert compile(descriptor).min == datetime(2020, 1, 1, tzinfo=UTC)


def test_descriptor_from_json_reports_nested_paths() -> None:
    doc = {"type": "object", "schema": {"when": {"type": "date", "min": "yesterday"}}}
    descriptor = descriptor_from_json(doc)
    with pytest.raises(InvalidDescriptor, match=r"descriptor\.schema\.when\.min"):
        compile(descriptor)
