"""Configuration loading: TOML file, ``ZIPSPAN_*`` environment variables, pydantic validation."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from zipspan import runtime_config
from zipspan.errors import ConfigError

CONFIG_FILE_NAME = "zipspan.toml"
ENV_PREFIX = "ZIPSPAN_"

# TOML section -> keys it may hold
_SECTIONS = {
    "model": ("strict_trace_id",),
    "logging": ("debug", "log_level"),
}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class ZipspanConfig(BaseModel):
    """Validated settings. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    debug: bool = False
    log_level: str = "WARNING"
    strict_trace_id: bool = True

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: if the file is not valid TOML
    """
    file_path = Path(path)
    if not file_path.is_file():
        return {}
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("invalid TOML config file", {"path": str(path), "error": e}) from e


def find_config_file() -> Optional[str]:
    """Look for ``zipspan.toml`` in the working directory, then the home directory."""
    for directory in (Path.cwd(), Path.home()):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return str(candidate)
    return None


def _flatten(loaded: Dict[str, Any]) -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for section, values in loaded.items():
        if section not in _SECTIONS or not isinstance(values, dict):
            raise ConfigError("unknown config section", {"section": section})
        for key, value in values.items():
            if key not in _SECTIONS[section]:
                raise ConfigError("unknown config key", {"section": section, "key": key})
            flat[key] = value
    return flat


def load_config_from_env() -> Dict[str, Any]:
    """Read ``ZIPSPAN_<FIELD>`` variables; unset variables are left out."""
    values = {}
    for name in ZipspanConfig.model_fields:
        env_value = os.environ.get(ENV_PREFIX + name.upper())
        if env_value is not None:
            values[name] = env_value
    return values


def load_config(
    path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None
) -> ZipspanConfig:
    """
    Build the effective configuration.

    Priority: overrides > environment variables > config file > defaults. When ``path``
    is None the file is located with :func:`find_config_file`.
    """
    if path is None:
        path = find_config_file()
    values = _flatten(load_toml_config(path)) if path else {}
    values.update(load_config_from_env())
    if overrides:
        values.update(overrides)
    return validate_config(values)


def validate_config(values: Dict[str, Any]) -> ZipspanConfig:
    try:
        return ZipspanConfig(**values)
    except PydanticValidationError as e:
        raise ConfigError("invalid configuration", {"errors": e.error_count()}) from e


def apply_config(config: ZipspanConfig) -> None:
    """Push settings into ``runtime_config`` and the ``zipspan`` logger."""
    runtime_config.set_debug(config.debug)
    runtime_config.set_strict_trace_id(config.strict_trace_id)
    logging.getLogger("zipspan").setLevel(config.log_level)
