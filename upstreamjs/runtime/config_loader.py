"""Helpers for loading install configuration from TOML/JSON sources.

This module provides a single entry point `load_install_config`
that accepts various configuration sources:

* None -> default InstallConfig
* dict -> validated mapping
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings

A top-level ``install`` table, when present, holds the settings.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from upstreamjs.config.schema import InstallConfig
from upstreamjs.errors import ConfigurationError

logger = logging.getLogger("upstreamjs.runtime.config_loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _parse(text: str, fmt: str) -> Dict[str, Any]:
    try:
        if fmt == "json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Invalid {fmt.upper()} configuration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Top-level configuration must be a mapping/dict")
    return data


def _is_file(source: Union[str, Path]) -> bool:
    if isinstance(source, str) and ("\n" in source or source.lstrip().startswith("{")):
        return False
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        return False


def _guess_format(text: str) -> str:
    stripped = text.lstrip()
    # Configuration must be a mapping, so JSON text always opens with a brace.
    return "json" if stripped.startswith("{") else "toml"


def build_install_config(
    data: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None
) -> InstallConfig:
    """Validate a configuration mapping, applying non-None overrides.

    Raises:
        ConfigurationError: If validation fails.
    """
    section = data.get("install", data)
    if not isinstance(section, dict):
        raise ConfigurationError("The 'install' configuration section must be a table")

    merged = dict(section)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return InstallConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid install configuration: {exc}") from exc


def load_install_config(
    source: ConfigSource, overrides: Optional[Dict[str, Any]] = None
) -> InstallConfig:
    """Load InstallConfig from various configuration sources.

    Args:
        source: One of:
            * None: defaults
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)
        overrides: Values taking precedence over the source (None values ignored).

    Returns:
        InstallConfig instance.

    Raises:
        ConfigurationError: If the source cannot be parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default InstallConfig")
        return build_install_config({}, overrides)

    if isinstance(source, dict):
        logger.debug("Loading InstallConfig from provided dict")
        return build_install_config(source, overrides)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if _is_file(source):
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigurationError(f"Unable to read configuration {path}: {exc}") from exc
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _guess_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _guess_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        return build_install_config(_parse(text, fmt), overrides)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "build_install_config", "load_install_config"]
