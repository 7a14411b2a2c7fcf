"""Cache root resolution.

Provides the canonical function for locating the user-writable directory
where the bundled Luau scripts are materialized:
- ``NFORGE_HOME`` override (all platforms)
- ``%LOCALAPPDATA%\\nforge`` / ``%APPDATA%\\nforge`` on Windows
- ``~/.nforge`` on macOS/Linux
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping


def _is_windows() -> bool:
    """Return True when running on Windows."""
    return os.name == "nt"


def resolve_cache_root(environ: Mapping[str, str] | None = None) -> Path:
    """Return the directory owned by nforge for persisted assets.

    Resolution order:
    1. NFORGE_HOME environment variable (all platforms)
    2. Windows: LOCALAPPDATA, then APPDATA, then the current directory,
       each joined with ``nforge``
    3. Unix: HOME joined with ``.nforge``, or ``./.nforge`` if HOME is unset

    Never fails; a missing environment degrades to a path relative to
    the current directory. Nothing is created on disk.

    Args:
        environ: Environment to read (defaults to ``os.environ``).

    Returns:
        Path: The cache root.
    """
    env = os.environ if environ is None else environ

    if env_home := env.get("NFORGE_HOME"):
        return Path(env_home)

    if _is_windows():
        base = env.get("LOCALAPPDATA") or env.get("APPDATA") or "."
        return Path(base) / "nforge"

    home = env.get("HOME") or "."
    return Path(home) / ".nforge"
