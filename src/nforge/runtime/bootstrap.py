"""Runtime bootstrap: ensure_synced() and the filesystem seam it writes through.

On every launch that has no development checkout, ``ensure_synced()``
guarantees that the cache root holds the bundled Luau scripts for the
current version. A ``.version`` marker is the fast-path check: when it
matches the registry version nothing is written at all.

The marker is written **last**, so an interrupted or failed sync is
always detected and redone in full by the next invocation. There is no
lock: two first-time syncs racing on an empty cache both write the same
deterministic bytes, and whichever finishes last writes the marker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from nforge.errors import (
    DirectoryCreationError,
    FileWriteError,
    VersionMarkerWriteError,
)
from nforge.runtime.registry import BUNDLE_DIR, AssetRegistry

logger = logging.getLogger(__name__)

VERSION_MARKER = ".version"


class FileSystem(Protocol):
    """The filesystem operations the sync engine needs."""

    def read_text(self, path: Path) -> str | None:
        """Return the file's text, or None if it cannot be read."""
        ...

    def make_dirs(self, path: Path) -> None: ...

    def write_bytes(self, path: Path, data: bytes) -> None: ...

    def write_text(self, path: Path, text: str) -> None: ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def read_text(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_bytes(self, path: Path, data: bytes) -> None:
        path.write_bytes(data)

    def write_text(self, path: Path, text: str) -> None:
        path.write_text(text, encoding="utf-8")


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a sync: where the bundle lives and what was done."""

    asset_dir: Path
    marker: Path
    version: str
    previous_version: str | None
    files_written: int

    @property
    def synced(self) -> bool:
        """True when this call rewrote the bundle."""
        return self.files_written > 0 or self.previous_version != self.version


def asset_dir_for(cache_root: Path) -> Path:
    return cache_root / BUNDLE_DIR


def marker_for(cache_root: Path) -> Path:
    return cache_root / VERSION_MARKER


def read_marker(cache_root: Path, fs: FileSystem | None = None) -> str | None:
    """Return the stored bundle version, stripped, or None if absent."""
    fs = fs or LocalFileSystem()
    stored = fs.read_text(marker_for(cache_root))
    return stored.strip() if stored is not None else None


def ensure_synced(
    cache_root: Path,
    registry: AssetRegistry,
    fs: FileSystem | None = None,
    *,
    force: bool = False,
) -> SyncResult:
    """Ensure the bundle under *cache_root* matches *registry*.

    **Fast path**: the marker matches ``registry.version``; return
    without writing anything.

    **Slow path**: write every asset (parents first, full overwrite),
    then write the marker. Any failure aborts immediately and leaves the
    marker at its previous value.

    Args:
        cache_root: Directory owned by nforge.
        registry: Bundled assets and their version.
        fs: Filesystem to operate on (defaults to the local disk).
        force: Rewrite the bundle even if the marker matches.

    Returns:
        SyncResult describing the asset directory and the work done.

    Raises:
        DirectoryCreationError: A parent directory could not be created.
        FileWriteError: An asset could not be written.
        VersionMarkerWriteError: The marker could not be written.
    """
    fs = fs or LocalFileSystem()
    asset_dir = asset_dir_for(cache_root)
    marker = marker_for(cache_root)

    previous = read_marker(cache_root, fs)
    if previous == registry.version and not force:
        logger.debug("Bundle %s already synced at %s", previous, asset_dir)
        return SyncResult(asset_dir, marker, registry.version, previous, 0)

    logger.debug(
        "Syncing bundle %s to %s (marker: %s)", registry.version, asset_dir, previous
    )

    written = 0
    for entry in registry:
        path = asset_dir.joinpath(*entry.relative_path.split("/"))
        try:
            fs.make_dirs(path.parent)
        except OSError as exc:
            raise DirectoryCreationError(path.parent, exc) from exc
        try:
            fs.write_bytes(path, entry.content)
        except OSError as exc:
            raise FileWriteError(path, exc) from exc
        written += 1

    # Write the marker LAST -- incomplete syncs won't have it
    try:
        fs.make_dirs(cache_root)
        fs.write_text(marker, registry.version)
    except OSError as exc:
        raise VersionMarkerWriteError(marker, exc) from exc

    logger.debug("Wrote %d assets and marker %s", written, registry.version)
    return SyncResult(asset_dir, marker, registry.version, previous, written)
