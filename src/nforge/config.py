"""Launcher configuration.

Settings are layered: built-in defaults, then the optional user-owned
``config.yaml`` in the cache root, then ``NFORGE_*`` environment
variables. The sync engine never writes ``config.yaml``.

Example ``config.yaml``::

    interpreter: /opt/lune/bin/lune
    source_mode: embedded
    log_level: debug
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from nforge.errors import ConfigError
from nforge.runtime.delegate import DEFAULT_INTERPRETER
from nforge.runtime.resolver import SourceMode

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"

ENV_INTERPRETER = "NFORGE_INTERPRETER"
ENV_SOURCE_MODE = "NFORGE_SOURCE_MODE"
ENV_LOG_LEVEL = "NFORGE_LOG_LEVEL"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True)
class LauncherConfig:
    interpreter: str = DEFAULT_INTERPRETER
    source_mode: SourceMode = SourceMode.EMBEDDED
    log_level: str | None = None


def _parse_source_mode(value: Any, origin: str) -> SourceMode:
    try:
        return SourceMode(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(mode.value for mode in SourceMode)
        raise ConfigError(
            f"invalid source_mode {value!r} in {origin} (expected one of: {choices})"
        ) from None


def _parse_log_level(value: Any, origin: str) -> str:
    level = str(value).strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"invalid log_level {value!r} in {origin} (expected one of: {', '.join(LOG_LEVELS)})"
        )
    return level


def _apply(config: LauncherConfig, values: Mapping[str, Any], origin: str) -> LauncherConfig:
    changes: dict[str, Any] = {}
    if values.get("interpreter"):
        changes["interpreter"] = str(values["interpreter"]).strip()
    if values.get("source_mode"):
        changes["source_mode"] = _parse_source_mode(values["source_mode"], origin)
    if values.get("log_level"):
        changes["log_level"] = _parse_log_level(values["log_level"], origin)
    return replace(config, **changes)


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the mapping stored in *path*, or an empty dict if absent.

    Raises:
        ConfigError: The file is unreadable, not valid YAML, or not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, NotADirectoryError):
        return {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    unknown = set(data) - {"interpreter", "source_mode", "log_level"}
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(sorted(unknown)))
    return data


def load_config(
    cache_root: Path, environ: Mapping[str, str] | None = None
) -> LauncherConfig:
    """Build the effective configuration for one invocation."""
    env = os.environ if environ is None else environ
    config_path = cache_root / CONFIG_FILE

    config = _apply(LauncherConfig(), read_config_file(config_path), str(config_path))
    config = _apply(
        config,
        {
            "interpreter": env.get(ENV_INTERPRETER),
            "source_mode": env.get(ENV_SOURCE_MODE),
            "log_level": env.get(ENV_LOG_LEVEL),
        },
        "environment",
    )
    return config
