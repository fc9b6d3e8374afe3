"""
Settings for ExpressionWhizz.

Read from the ``[exprwhizz]`` table of a TOML file (``whizz.toml`` in the
working directory by default), then overridden by ``EXPRWHIZZ_*``
environment variables.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from exprwhizz.core.errors import ConfigError

DEFAULT_CONFIG_FILE = "whizz.toml"
ENV_PREFIX = "EXPRWHIZZ_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class WhizzSettings:
    """Calculator settings."""

    stringify_capacity: int = 1024  # buffer size for rendered expressions
    increment_shorthand: bool = True  # fold 5++* into 6*
    prompt: str = "Expr? "
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.stringify_capacity < 2:
            raise ConfigError(
                f"stringify_capacity must be at least 2, got {self.stringify_capacity}"
            )
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}"
            )

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _coerce(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate raw key/value pairs into WhizzSettings fields."""
    values: dict[str, Any] = {}
    for key, raw in data.items():
        if key == "stringify_capacity":
            values[key] = _parse_int(key, raw)
        elif key == "increment_shorthand":
            values[key] = _parse_bool(key, raw)
        elif key == "prompt":
            values[key] = str(raw)
        elif key == "log_level":
            values[key] = str(raw).upper()
        else:
            raise ConfigError(f"Unknown setting: {key}")
    return values


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    # LOG_LEVEL is honoured as a fallback, as in the server entry points
    if "LOG_LEVEL" in environ:
        overrides["log_level"] = environ["LOG_LEVEL"]
    for key in ("stringify_capacity", "increment_shorthand", "prompt", "log_level"):
        env_name = ENV_PREFIX + key.upper()
        if env_name in environ:
            overrides[key] = environ[env_name]
    return overrides


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> WhizzSettings:
    """Load settings from a TOML file and the environment.

    Args:
        path: Config file. When None, ``whizz.toml`` in the working
            directory is used if it exists.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: If an explicit file is missing, the TOML is malformed,
            or a value is invalid.
    """
    environ = os.environ if environ is None else environ

    file_values: dict[str, Any] = {}
    if path is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        path = default if default.exists() else None
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        file_values = _coerce(data.get("exprwhizz", {}))

    settings = WhizzSettings(**file_values)
    overrides = _coerce(_env_overrides(environ))
    if overrides:
        settings = replace(settings, **overrides)
    return settings
