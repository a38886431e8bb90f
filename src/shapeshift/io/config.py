"""
Configuration for the shapeshift facade and CLI.

Defines EngineSettings, a frozen dataclass carrying the defaults the ``Schema`` facade and the
CLI pass to the core functions (which themselves only take explicit arguments).

Source of truth
- shapeshift.core.constants.DEFAULT_KEY

Import DAG discipline
- Depends only on stdlib and shapeshift.core.constants.

Notes
- Precedence: environment > TOML > defaults.
- Unrecognized or malformed values are ignored and the previous value is kept.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from shapeshift.core.constants import DEFAULT_KEY

__all__ = ["EngineSettings"]

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class EngineSettings:
    """
    Runtime settings for the schema facade.

    Attributes:
        default_key (str): Root segment of error paths (``target`` gives ``target.items[3].id``).
        strict (bool): Strict mode for the ``from_*``/``to_*`` conversions.
        expand (bool): Fill absent optional values from defaults during ``enforce``.
        log_level (str): Level name the CLI configures root logging with.

    Examples:
        >>> from shapeshift.io import EngineSettings
        >>> EngineSettings(default_key="query").default_key
        'query'
    """

    default_key: str = DEFAULT_KEY
    strict: bool = True
    expand: bool = False
    log_level: str = "WARNING"

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: EngineSettings, cfg: dict[str, Any] | None) -> EngineSettings:
        """Apply a loose config mapping onto EngineSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if isinstance(cfg.get("default_key"), str) and cfg["default_key"].strip():
            s = replace(s, default_key=cfg["default_key"].strip())

        if "strict" in cfg:
            s = replace(s, strict=_bool(cfg["strict"]))

        if "expand" in cfg:
            s = replace(s, expand=_bool(cfg["expand"]))

        if isinstance(cfg.get("log_level"), str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)
            else:
                logger.debug("ignoring unknown log level %r", cfg["log_level"])

        return s

    @classmethod
    def from_env(cls, base: EngineSettings | None = None, prefix: str = "SHAPESHIFT_") -> EngineSettings:
        """
        Build EngineSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - SHAPESHIFT_DEFAULT_KEY
            - SHAPESHIFT_STRICT (1/0/true/false/yes/no/on/off)
            - SHAPESHIFT_EXPAND (same spellings)
            - SHAPESHIFT_LOG_LEVEL (DEBUG | INFO | WARNING | ERROR | CRITICAL)
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for name in ("default_key", "strict", "expand", "log_level"):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> EngineSettings:
        """
        Build EngineSettings from a TOML file.

        Search order when `path` is None:
            1) ./shapeshift.toml (with either an [engine] table or top-level keys)
            2) ./pyproject.toml under [tool.shapeshift]

        Returns defaults if no file is present or none of them parses.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "shapeshift.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if data is None:
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool")
                cfg = tool.get("shapeshift") if isinstance(tool, dict) else None
            elif isinstance(data.get("engine"), dict):
                cfg = data["engine"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> EngineSettings:
        """
        Load EngineSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (shapeshift.toml, pyproject.toml).

        Returns:
            EngineSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s


def _load_toml(p: Path) -> dict[str, Any] | None:
    try:
        with p.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable settings file %s: %s", p, exc)
        return None
