from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from shapeshift.cli import EXIT_INVALID, EXIT_OK, EXIT_USAGE, main

ID = "5f1e0c2b9d3e4a0012345678"

SCHEMA_YAML = """
type: object
schema:
  id: {type: string, regex: {pattern: '^[\\da-f]{24}$'}}
  page: {type: number, optional: true, default: 0, min: 0, max: 350}
"""


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for key in ["SHAPESHIFT_DEFAULT_KEY", "SHAPESHIFT_STRICT", "SHAPESHIFT_EXPAND", "SHAPESHIFT_LOG_LEVEL"]:
        monkeypatch.delenv(key, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    (tmp_path / "idpage.yaml").write_text(SCHEMA_YAML)
    yield tmp_path
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as info:
        main(argv)
    return info.value.code


def _value(tmp: Path, text: str) -> str:
    p = tmp / "value.yaml"
    p.write_text(text)
    return str(p)


def test_check_prints_canonical_json(workspace: Path, capsys) -> None:
    value = _value(workspace, f"id: '{ID}'\npage: 2\n")
    assert _run(["check", "idpage.yaml", value]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"id": ID, "page": 2}


def test_check_expand(workspace: Path, capsys) -> None:
    value = _value(workspace, f"id: '{ID}'\n")
    assert _run(["check", "idpage.yaml", value, "--expand"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"id": ID, "page": 0}


def test_check_reports_violation(workspace: Path, capsys) -> None:
    value = _value(workspace, f"id: '{ID}'\npage: 351\n")
    assert _run(["check", "idpage.yaml", value, "--key", "query"]) == EXIT_INVALID
    report = json.loads(capsys.readouterr().out)
    assert report["error"] == "ConstraintViolation"
    assert report["key"] == "query.page"
    assert report["constraint"] == "max"


def test_check_malformed_leaf_strict_vs_non_strict(workspace: Path, capsys) -> None:
    value = _value(workspace, f"id: '{ID}'\npage: 'x'\n")

    assert _run(["check", "idpage.yaml", value]) == EXIT_INVALID
    assert "cannot parse number" in capsys.readouterr().err

    assert _run(["check", "idpage.yaml", value, "--non-strict"]) == EXIT_INVALID
    report = json.loads(capsys.readouterr().out)
    assert report["error"] == "TypeMismatch"
    assert report["key"] == "target.page"


def test_describe(workspace: Path, capsys) -> None:
    assert _run(["describe", "idpage.yaml"]) == EXIT_OK
    summary = json.loads(capsys.readouterr().out)
    assert summary["kind"] == "object"
    assert summary["properties"] == ["id", "page"]
    assert summary["string_object_representable"] is True


def test_encode_and_decode(workspace: Path, capsys) -> None:
    value = _value(workspace, f"id: '{ID}'\npage: 3\n")
    assert _run(["encode", "idpage.yaml", value]) == EXIT_OK
    query = capsys.readouterr().out.strip()
    assert query == f"id={ID}&page=3"

    assert _run(["decode", "idpage.yaml", query]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"id": ID, "page": 3}


def test_decode_reports_missing_field(workspace: Path, capsys) -> None:
    assert _run(["decode", "idpage.yaml", "page=1"]) == EXIT_INVALID
    report = json.loads(capsys.readouterr().out)
    assert report["error"] == "MissingRequiredField"
    assert report["key"] == "target.id"


def test_settings_file_sets_default_key(workspace: Path, capsys) -> None:
    (workspace / "shapeshift.toml").write_text('[engine]\ndefault_key = "params"\n')
    assert _run(["decode", "idpage.yaml", "page=1"]) == EXIT_INVALID
    assert json.loads(capsys.readouterr().out)["key"] == "params.id"


def test_missing_schema_file_is_a_usage_error(workspace: Path, capsys) -> None:
    assert _run(["describe", "nope.yaml"]) == EXIT_USAGE
    assert "cannot read" in capsys.readouterr().err


def test_invalid_descriptor_is_a_usage_error(workspace: Path, capsys) -> None:
    (workspace / "bad.yaml").write_text("type: number\nmin: zero\n")
    assert _run(["describe", "bad.yaml"]) == EXIT_USAGE
    assert "invalid schema" in capsys.readouterr().err


def test_unknown_command(capsys) -> None:
    assert _run(["frobnicate"]) == EXIT_USAGE
    assert "Unknown command: frobnicate" in capsys.readouterr().err


def test_no_arguments_prints_help(capsys) -> None:
    main([])
    assert "usage: shapeshift" in capsys.readouterr().out


def test_logs_go_to_stderr(workspace: Path, capsys) -> None:
    assert _run(["describe", "idpage.yaml", "--log-level", "debug"]) == EXIT_OK
    captured = capsys.readouterr()
    assert json.loads(captured.out)["kind"] == "object"
    assert "shapeshift.schema - DEBUG - compiled object schema" in captured.err
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_log_level_falls_back_to_warning(workspace: Path, capsys) -> None:
    assert _run(["describe", "idpage.yaml", "--log-level", "chatty"]) == EXIT_OK
    assert "unknown log level 'chatty'" in capsys.readouterr().err
    assert logging.getLogger().level == logging.WARNING


def test_check_accepts_calendar_dates(workspace: Path, capsys) -> None:
    (workspace / "since.yaml").write_text(
        "type: object\nschema:\n  since: {type: date, min: 2020-01-01}\n"
    )
    value = _value(workspace, "since: 2021-06-01\n")

    assert _run(["check", "since.yaml", value, "--non-strict"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"since": "2021-06-01T00:00:00+00:00"}

    early = _value(workspace, "since: 2019-06-01\n")
    assert _run(["check", "since.yaml", early]) == EXIT_INVALID
    assert json.loads(capsys.readouterr().out)["constraint"] == "min"


def test_module_help_lists_every_subcommand() -> None:
    from shapeshift import cli

    assert cli.__doc__ is not None
    for name in cli._COMMANDS:
        assert f"``{name}" in cli.__doc__
