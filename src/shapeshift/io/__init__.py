"""
shapeshift.io: settings and the external surfaces of the schema engine.

## Public API
- EngineSettings: facade/CLI defaults (env > TOML > defaults).
- encode / decode: query-string codec for string objects.
- load_document / load_descriptor: YAML/JSON documents via PyYAML.

## Import DAG discipline
- Depends on stdlib, PyYAML and shapeshift.core.*.
- MUST NOT import shapeshift.schema or shapeshift.cli.
"""

from __future__ import annotations

from .config import EngineSettings
from .documents import DocumentError, load_descriptor, load_document
from .querystring import decode, encode

__all__ = [
    "EngineSettings",
    "DocumentError",
    "load_descriptor",
    "load_document",
    "encode",
    "decode",
]
