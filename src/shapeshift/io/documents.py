"""
Descriptor and value documents on disk (YAML or JSON).

Responsibilities
- ``load_document(path)``: read a YAML/JSON file into plain Python data.
- ``load_descriptor(path)``: read a descriptor document and decode it into a native descriptor
  (dates, patterns) via ``shapeshift.core.metaschema.descriptor_from_json``.

Notes
- Files are parsed with PyYAML ``safe_load``; JSON is a subset of YAML so one loader serves both.
- Decoding a descriptor does not validate it; ``compile`` does.

Examples
--------
```yaml
# idpage.yaml
type: object
schema:
  id: {type: string, regex: {pattern: "^[\\da-f]{24}$"}}
  page: {type: number, optional: true, default: 0, min: 0}
```
```python
from shapeshift.io.documents import load_descriptor
from shapeshift.core import compile
node = compile(load_descriptor("idpage.yaml"))
```
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from shapeshift.core.metaschema import descriptor_from_json

__all__ = [
    "DocumentError",
    "load_document",
    "load_descriptor",
]

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """A document could not be read or parsed."""


def load_document(path: str | os.PathLike[str]) -> Any:
    """
    Read a YAML or JSON document.

    Args:
        path (str | PathLike): File to read.

    Returns:
        Any: Parsed document (None for an empty file).

    Raises:
        DocumentError: If the file cannot be read or is not valid YAML/JSON.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"cannot read {p}: {exc}") from exc
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentError(f"cannot parse {p}: {exc}") from exc
    logger.debug("loaded document %s", p)
    return doc


def load_descriptor(path: str | os.PathLike[str]) -> dict[str, Any]:
    """
    Read a descriptor document and decode it into a native descriptor.

    Raises:
        DocumentError: If the file cannot be read or parsed.
        shapeshift.core.errors.InvalidDescriptor: If the document is not a descriptor mapping.
    """
    return descriptor_from_json(load_document(path))
