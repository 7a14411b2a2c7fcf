"""Runtime resolution: decide which copy of the Luau bundle to run.

Two sourcing modes share one strategy:

- ``SourceMode.EMBEDDED`` (default): a ``luau/`` directory beside the
  executable is a development checkout and wins outright; otherwise the
  bundled assets are synced into the cache root and run from there.
- ``SourceMode.INSTALLED``: the bundle is expected to be installed beside
  the executable already; nothing is ever synced.

The development directory is only ever read.
"""

from __future__ import annotations

import logging
import sys
import sysconfig
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from nforge.errors import ResolutionError
from nforge.runtime.bootstrap import SyncResult, asset_dir_for, ensure_synced
from nforge.runtime.home import resolve_cache_root
from nforge.runtime.registry import BUNDLE_DIR, ENTRY_POINT, AssetRegistry, load_registry

logger = logging.getLogger(__name__)


class SourceMode(Enum):
    """Where the bundle is sourced from when no override applies."""

    EMBEDDED = "embedded"
    INSTALLED = "installed"


class Origin(Enum):
    """Which directory a resolution picked."""

    DEVELOPMENT = "development"
    CACHE = "cache"
    INSTALLED = "installed"


@dataclass(frozen=True)
class Resolution:
    """The entry point to run and how it was found."""

    entry_point: Path
    bundle_dir: Path
    origin: Origin
    sync: SyncResult | None = None


def _package_dir() -> Path:
    return Path(__file__).resolve().parent.parent


def get_install_dir() -> Path:
    """Return the directory holding the running executable.

    Frozen builds report ``sys.executable``; otherwise the launcher
    script named by ``sys.argv[0]`` is used. Under ``python -m nforge``
    that script is the package's own ``__main__.py``, whose sibling
    ``luau/`` is package data rather than a checkout, so the interpreter's
    scripts directory (where the ``nforge`` console script lives) is
    used instead.

    Raises:
        ResolutionError: If the executable path is unknown.
    """
    if getattr(sys, "frozen", False):
        executable = sys.executable
    else:
        executable = sys.argv[0] if sys.argv else ""

    if not executable:
        raise ResolutionError("cannot determine the nforge install directory")
    try:
        install_dir = Path(executable).resolve().parent
        if install_dir == _package_dir():
            install_dir = Path(sysconfig.get_path("scripts")).resolve()
    except (OSError, RuntimeError) as exc:
        raise ResolutionError(
            f"cannot determine the nforge install directory from {executable}: {exc}"
        ) from exc
    return install_dir


def select_bundle(mode: SourceMode, install_dir: Path, cache_root: Path) -> tuple[Origin, Path]:
    """Pick the bundle directory and its origin without syncing anything.

    Raises:
        ResolutionError: The bundle is missing in ``INSTALLED`` mode.
    """
    local_bundle = install_dir / BUNDLE_DIR
    if local_bundle.is_dir():
        origin = Origin.DEVELOPMENT if mode is SourceMode.EMBEDDED else Origin.INSTALLED
        return origin, local_bundle

    if mode is SourceMode.INSTALLED:
        raise ResolutionError(f"bundle not found beside the executable: {local_bundle}")
    return Origin.CACHE, asset_dir_for(cache_root)


def resolve_entry_point(
    mode: SourceMode = SourceMode.EMBEDDED,
    *,
    install_dir: Path | None = None,
    cache_root: Path | None = None,
    registry: AssetRegistry | None = None,
    sync: Callable[[Path, AssetRegistry], SyncResult] = ensure_synced,
) -> Resolution:
    """Choose the bundle directory and return its entry point.

    Args:
        mode: Sourcing mode used when no development checkout exists.
        install_dir: Executable directory (detected when omitted).
        cache_root: Cache root (resolved from the environment when omitted).
        registry: Bundled assets (the packaged registry when omitted).
        sync: Sync engine, called only on the cache path.

    Raises:
        ResolutionError: The install directory is unknown, or the bundle
            is missing in ``INSTALLED`` mode.
        SyncError: Syncing the cache failed.
    """
    if install_dir is None:
        install_dir = get_install_dir()
    if cache_root is None:
        cache_root = resolve_cache_root()

    origin, bundle_dir = select_bundle(mode, install_dir, cache_root)
    if origin is not Origin.CACHE:
        logger.debug("Using %s bundle at %s", origin.value, bundle_dir)
        return Resolution(bundle_dir / ENTRY_POINT, bundle_dir, origin)

    if registry is None:
        registry = load_registry()

    result = sync(cache_root, registry)
    logger.debug("Using cached bundle at %s", result.asset_dir)
    return Resolution(result.asset_dir / ENTRY_POINT, result.asset_dir, Origin.CACHE, result)
