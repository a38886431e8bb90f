from __future__ import annotations

import re
from datetime import date, datetime

import pytest

from shapeshift.core.kinds import Kind, ensure_dispatch_covers_kinds, kind_from_value, kind_of


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "null"),
        (True, "boolean"),
        (0, "number"),
        (1.5, "number"),
        ("x", "string"),
        (datetime(2020, 1, 1), "date"),
        (re.compile("a"), "regex"),
        ([1], "array"),
        ((1, 2), "array"),
        ({"a": 1}, "object"),
        (len, "function"),
        (lambda v: v, "function"),
        (b"raw", "<bytes>"),
        (date(2020, 1, 1), "<date>"),
        (object(), "<object>"),
    ],
)
def test_kind_of_classifies_runtime_values(value: object, expected: str) -> None:
    assert kind_of(value) == expected


def test_kind_values_are_lower_case_descriptor_names() -> None:
    assert [k.value for k in Kind] == [
        "string",
        "number",
        "boolean",
        "date",
        "regex",
        "function",
        "array",
        "object",
    ]


def test_kind_from_value_accepts_names_and_members() -> None:
    assert kind_from_value("date") is Kind.DATE
    assert kind_from_value(Kind.ARRAY) is Kind.ARRAY


@pytest.mark.parametrize("bad", ["integer", "", None, ["string"]])
def test_kind_from_value_rejects_unknown(bad: object) -> None:
    with pytest.raises(ValueError, match="type must be one of"):
        kind_from_value(bad)


def test_ensure_dispatch_covers_kinds_reports_missing_and_extra() -> None:
    table = {k: None for k in Kind if k is not Kind.REGEX}
    with pytest.raises(AssertionError, match=r"missing \['regex'\]"):
        ensure_dispatch_covers_kinds(table, "partial")
    ensure_dispatch_covers_kinds({Kind.STRING: 1}, "strings_only", kinds=[Kind.STRING])


@pytest.mark.parametrize("value", [date(2020, 1, 1), object(), b"raw"])
def test_foreign_values_never_pass_for_a_kind(value: object) -> None:
    assert kind_of(value) not in {k.value for k in Kind}
