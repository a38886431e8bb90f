"""
Command-line entry point for the schema engine.

Subcommands
- ``check SCHEMA VALUE``: enforce a schema on a YAML/JSON value document; print its canonical JSON
  form, or an ``ErrorReport`` and exit 1.
- ``describe SCHEMA``: print the schema's ``SchemaSummary``.
- ``encode SCHEMA VALUE`` / ``decode SCHEMA QUERY``: value document <-> URL query string.

Notes
- Settings come from ``EngineSettings.load`` (env > TOML > defaults); ``--key``, ``--non-strict``
  and ``--log-level`` override them per invocation.
- Log records go to stderr so stdout carries only command output.
- Exit codes: 0 ok, 1 invalid value, 2 unreadable or invalid schema / usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Any

from shapeshift.core.errors import InvalidDescriptor, ShapeshiftError, ValidationError
from shapeshift.core.serde import json_dumps_pretty
from shapeshift.io.config import EngineSettings
from shapeshift.io.documents import DocumentError, load_descriptor, load_document
from shapeshift.schema import Schema

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2

_LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("schema", type=str, help="Path to a YAML/JSON schema descriptor.")
    p.add_argument("--config", type=str, default=None, help="Explicit settings TOML (default: search).")
    p.add_argument("--log-level", type=str, default=None, help="Override the configured log level.")


def _setup(args: argparse.Namespace) -> tuple[EngineSettings, Schema]:
    """Load settings, configure logging and compile the schema named on the command line.

    Raises:
        DocumentError: Schema file unreadable.
        InvalidDescriptor: Schema file is not a valid descriptor.
    """
    settings = EngineSettings.load(args.config)
    if getattr(args, "key", None):
        settings = replace(settings, default_key=args.key)
    if getattr(args, "non_strict", False):
        settings = replace(settings, strict=False)
    _configure_logging(args.log_level or settings.log_level)
    return settings, Schema(load_descriptor(args.schema), settings)


def _configure_logging(level: str) -> None:
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        print(f"warning: unknown log level {level!r}, using WARNING", file=sys.stderr)
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=_LOG_FORMAT, stream=sys.stderr, force=True)


def _print_json(obj: Any) -> None:
    print(json_dumps_pretty(obj))


def _cmd_check(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="shapeshift check",
        description="Enforce a schema on a value document and print its canonical JSON form.",
    )
    _add_common(p)
    p.add_argument("value", type=str, help="Path to a YAML/JSON value document.")
    p.add_argument("--expand", action="store_true", help="Fill absent optional values from defaults.")
    p.add_argument("--key", type=str, default=None, help="Root segment of error paths.")
    p.add_argument("--non-strict", action="store_true", help="Leave malformed leaves for enforcement to report.")
    args = p.parse_args(argv)

    settings, schema = _setup(args)
    doc = load_document(args.value)
    try:
        value = schema.from_json(doc, noenforce=True)
        value = schema.enforce(value, expand=args.expand or settings.expand)
    except ValidationError as err:
        print(err.report().model_dump_json(indent=2))
        return EXIT_INVALID
    _print_json(schema.to_json(value, strict=False))
    return EXIT_OK


def _cmd_describe(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="shapeshift describe", description="Summarize a schema's capabilities.")
    _add_common(p)
    args = p.parse_args(argv)

    _, schema = _setup(args)
    print(schema.describe().model_dump_json(indent=2))
    return EXIT_OK


def _cmd_encode(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="shapeshift encode", description="Encode a value document as a query string.")
    _add_common(p)
    p.add_argument("value", type=str, help="Path to a YAML/JSON value document.")
    args = p.parse_args(argv)

    _, schema = _setup(args)
    try:
        value = schema.from_json(load_document(args.value))
    except ValidationError as err:
        print(err.report().model_dump_json(indent=2))
        return EXIT_INVALID
    print(schema.to_query_string(value))
    return EXIT_OK


def _cmd_decode(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="shapeshift decode", description="Decode a query string into canonical JSON.")
    _add_common(p)
    p.add_argument("query", type=str, help="Query string, e.g. 'id=...&page=2'.")
    args = p.parse_args(argv)

    _, schema = _setup(args)
    try:
        value = schema.from_query_string(args.query)
    except ValidationError as err:
        print(err.report().model_dump_json(indent=2))
        return EXIT_INVALID
    _print_json(schema.to_json(value, strict=False))
    return EXIT_OK


_COMMANDS = {
    "check": _cmd_check,
    "describe": _cmd_describe,
    "encode": _cmd_encode,
    "decode": _cmd_decode,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shapeshift", description="Declarative schema engine utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("check", help="Enforce a schema on a value document.")
    sub.add_parser("describe", help="Summarize a schema.")
    sub.add_parser("encode", help="Value document -> query string.")
    sub.add_parser("decode", help="Query string -> canonical JSON.")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        raise SystemExit(EXIT_USAGE)
    try:
        code = handler(rest)
    except (DocumentError, InvalidDescriptor) as err:
        print(f"error: {err}", file=sys.stderr)
        code = EXIT_USAGE
    except ShapeshiftError as err:
        print(f"error: {err}", file=sys.stderr)
        code = EXIT_INVALID
    raise SystemExit(code)


if __name__ == "__main__":
    main()
