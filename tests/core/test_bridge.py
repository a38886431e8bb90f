from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime

import pytest

from shapeshift.core.bridge import (
    from_json,
    from_path_string_object,
    from_string_object,
    to_json,
    to_path_string_object,
    to_string_object,
)
from shapeshift.core.errors import (
    ConstraintViolation,
    ParseError,
    TypeMismatch,
    UnknownProperty,
    UnrepresentableConversion,
)
from shapeshift.core.factory import compile


@pytest.fixture
def search_node():
    return compile(
        {
            "type": "object",
            "schema": {
                "q": {"type": "string", "optional": True},
                "page": {"type": "number", "optional": True, "default": 0, "min": 0},
                "exact": {"type": "boolean", "optional": True},
                "since": {"type": "date", "optional": True},
                "tags": {"type": "array", "optional": True, "schema": {"type": "string"}},
                "filter": {
                    "type": "object",
                    "optional": True,
                    "schema": {"lang": {"type": "string", "in": ["fr", "en"]}},
                },
            },
        }
    )


def test_to_string_object_converts_structurally(search_node) -> None:
    value = {
        "q": "shoes",
        "page": 2,
        "exact": False,
        "since": datetime(2020, 1, 1, tzinfo=UTC),
        "tags": ["a", "b"],
        "filter": {"lang": "fr"},
    }
    assert to_string_object(search_node, value) == {
        "q": "shoes",
        "page": "2",
        "exact": "false",
        "since": "2020-01-01T00:00:00+00:00",
        "tags": ["a", "b"],
        "filter": {"lang": "fr"},
    }


def test_from_string_object_parses_and_enforces(search_node) -> None:
    raw = {"page": "3", "exact": "true", "since": "0", "tags": ["x"], "filter": {"lang": "en"}}
    assert from_string_object(search_node, raw) == {
        "page": 3,
        "exact": True,
        "since": datetime(1970, 1, 1, tzinfo=UTC),
        "tags": ["x"],
        "filter": {"lang": "en"},
    }


def test_from_string_object_enforces_after_parsing(search_node) -> None:
    with pytest.raises(ConstraintViolation) as info:
        from_string_object(search_node, {"page": "-1"})
    assert info.value.key == "target.page"


def test_strict_parse_error_carries_path(search_node) -> None:
    with pytest.raises(ParseError) as info:
        from_string_object(search_node, {"page": "two"})
    assert info.value.key == "target.page"


def test_non_strict_leaves_malformed_leaf_for_enforce(search_node) -> None:
    with pytest.raises(TypeMismatch) as info:
        from_string_object(search_node, {"page": "two"}, strict=False)
    assert info.value.key == "target.page"
    parsed = from_string_object(search_node, {"page": "two"}, strict=False, noenforce=True)
    assert parsed == {"page": "two"}


def test_undeclared_keys_strict_and_non_strict(search_node) -> None:
    with pytest.raises(UnknownProperty) as info:
        from_string_object(search_node, {"nope": "1"})
    assert info.value.property_name == "nope"
    with pytest.raises(UnknownProperty):
        from_string_object(search_node, {"nope": "1"}, strict=False)
    assert from_string_object(search_node, {"nope": "1"}, strict=False, noenforce=True) == {"nope": "1"}


def test_json_round_trip_with_special_values() -> None:
    node = compile(
        {
            "type": "object",
            "schema": {
                "ratio": {"type": "number", "nan": True},
                "when": {"type": "date"},
                "pattern": {"type": "regex"},
                "matrix": {"type": "array", "schema": {"type": "array", "schema": {"type": "number"}}},
            },
        }
    )
    value = {
        "ratio": float("nan"),
        "when": datetime(2021, 5, 4, 3, 2, 1, tzinfo=UTC),
        "pattern": re.compile("^a", re.I),
        "matrix": [[1, 2], [3]],
    }
    doc = to_json(node, value)
    assert doc == {
        "ratio": "NaN",
        "when": "2021-05-04T03:02:01+00:00",
        "pattern": {"pattern": "^a", "flags": int(re.compile("^a", re.I).flags)},
        "matrix": [[1, 2], [3]],
    }
    back = from_json(node, doc)
    assert math.isnan(back["ratio"])
    assert back["when"] == value["when"]
    assert back["pattern"].pattern == "^a"
    assert back["matrix"] == [[1, 2], [3]]


def test_strict_mode_checks_capability_up_front() -> None:
    nested = compile({"type": "array", "schema": {"type": "array", "schema": {"type": "number"}}})
    with pytest.raises(UnrepresentableConversion):
        to_string_object(nested, [[1]])
    with pytest.raises(UnrepresentableConversion):
        from_string_object(nested, [["1"]])
    functions = compile({"type": "object", "schema": {"cb": {"type": "function"}}})
    with pytest.raises(UnrepresentableConversion):
        to_json(functions, {"cb": len})
    with pytest.raises(UnrepresentableConversion):
        from_json(functions, {})


def test_non_strict_to_json_still_fails_on_function_values() -> None:
    node = compile({"type": "object", "schema": {"cb": {"type": "function", "optional": True}}})
    assert to_json(node, {}, strict=False) == {}
    with pytest.raises(UnrepresentableConversion):
        to_json(node, {"cb": len}, strict=False)


def test_to_x_without_value_describes_the_schema() -> None:
    node = compile({"type": "number", "min": 0, "max": 350, "optional": True})
    assert to_json(node) == {"type": "number", "min": 0, "max": 350, "optional": True}
    assert to_string_object(node) == {"type": "number", "min": "0", "max": "350", "optional": "true"}
    description = to_json(node)
    description["min"] = -5
    assert to_json(node)["min"] == 0


def test_schema_description_fails_when_descriptor_holds_functions() -> None:
    node = compile({"type": "number", "test": lambda v: True})
    with pytest.raises(UnrepresentableConversion):
        to_json(node)
    regex_node = compile({"type": "string", "regex": re.compile("a")})
    assert to_json(regex_node)["regex"] == {"pattern": "a", "flags": int(re.compile("a").flags)}
    with pytest.raises(UnrepresentableConversion):
        to_string_object(regex_node)


def test_scalar_schemas_convert_leaves_directly() -> None:
    node = compile({"type": "number"})
    assert to_string_object(node, 1.5) == "1.5"
    assert from_string_object(node, "1.5") == 1.5
    assert to_json(node, 7) == 7


def test_absent_optional_values_are_omitted(search_node) -> None:
    assert to_json(search_node, {"q": None, "page": 1}) == {"page": 1}
    assert to_string_object(search_node, {}) == {}


def test_undeclared_keys_on_output() -> None:
    node = compile({"type": "object", "schema": {"a": {"type": "number"}}})
    with pytest.raises(UnknownProperty):
        to_json(node, {"a": 1, "b": 2})
    assert to_json(node, {"a": 1, "b": 2}, strict=False) == {"a": 1, "b": 2}


def test_wrong_container_shape_is_a_parse_error_in_strict_mode() -> None:
    node = compile({"type": "object", "schema": {"tags": {"type": "array", "schema": {"type": "string"}}}})
    with pytest.raises(ParseError):
        from_string_object(node, {"tags": "a"})
    with pytest.raises(TypeMismatch):
        from_string_object(node, {"tags": "a"}, strict=False)


def test_calendar_dates_parse_as_utc_midnight() -> None:
    node = compile({"type": "object", "schema": {"since": {"type": "date"}}})
    expected = {"since": datetime(2020, 1, 1, tzinfo=UTC)}
    assert from_json(node, {"since": date(2020, 1, 1)}) == expected
    assert from_json(node, {"since": date(2020, 1, 1)}, strict=False) == expected


FILTERED = compile(
    {
        "type": "object",
        "schema": {
            "id": {"type": "string"},
            "page": {"type": "number", "optional": True},
            "filter": {
                "type": "object",
                "optional": True,
                "schema": {"lang": {"type": "string"}, "since": {"type": "date", "optional": True}},
            },
        },
    }
)


def test_path_string_object_is_flat() -> None:
    value = {"id": "a", "page": 2, "filter": {"lang": "fr", "since": datetime(2020, 1, 1, tzinfo=UTC)}}
    pso = to_path_string_object(FILTERED, value)
    assert pso == {
        "id": "a",
        "page": "2",
        "filter.lang": "fr",
        "filter.since": "2020-01-01T00:00:00+00:00",
    }
    assert from_path_string_object(FILTERED, pso) == value


def test_path_string_object_of_a_scalar_is_a_string() -> None:
    node = compile({"type": "number"})
    assert to_path_string_object(node, 350) == "350"
    assert from_path_string_object(node, "350") == 350


def test_arrays_have_no_path_string_form() -> None:
    node = compile({"type": "object", "schema": {"tags": {"type": "array", "schema": {"type": "string"}}}})
    assert node.string_object_representable is True
    assert node.path_string_object_representable is False
    with pytest.raises(UnrepresentableConversion):
        to_path_string_object(node, {"tags": ["a"]})
    with pytest.raises(UnrepresentableConversion):
        from_path_string_object(node, {"tags": "a"})
    assert FILTERED.path_string_object_representable is True


def test_path_string_object_clashing_paths() -> None:
    raw = {"id": "a", "filter": "x", "filter.lang": "fr"}
    with pytest.raises(ParseError, match="clashes"):
        from_path_string_object(FILTERED, raw)
    with pytest.raises(UnknownProperty):
        from_path_string_object(FILTERED, raw, strict=False)


def test_path_string_object_bad_leaf_path() -> None:
    with pytest.raises(ParseError) as info:
        from_path_string_object(FILTERED, {"id": "a", "filter.lang": "fr", "filter.since": "soon"})
    assert info.value.key == "target.filter.since"
