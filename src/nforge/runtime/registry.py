"""Bundled Luau assets and their version tag.

``ASSET_PATHS`` is the build-time table of every script shipped inside the
package (``nforge/luau/``). The registry pairs each path with its bytes and
with the package version, which tags the bundle as a whole.
"""

from __future__ import annotations

import importlib.resources
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

# Name of the bundle directory, both inside the cache root and beside the
# executable (development checkout).
BUNDLE_DIR = "luau"

# Script the runtime starts; ``lune`` resolves the ``.luau`` suffix.
ENTRY_POINT = "nforge"

# Order matters only in that each entry's parents are created before the
# entry itself is written.
ASSET_PATHS: tuple[str, ...] = (
    # Entry point
    "nforge.luau",
    # Commands
    "commands/help.luau",
    "commands/version.luau",
    # Utilities
    "util/args.luau",
    "util/reporter.luau",
)


@dataclass(frozen=True)
class AssetEntry:
    """One bundled file: a bundle-relative path and its content."""

    relative_path: str
    content: bytes


@dataclass(frozen=True)
class AssetRegistry:
    """Ordered, immutable set of assets tagged with a single version."""

    version: str
    entries: tuple[AssetEntry, ...]

    def __iter__(self) -> Iterator[AssetEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def paths(self) -> list[str]:
        return [entry.relative_path for entry in self.entries]


def _bundle_version() -> str:
    from nforge import __version__

    return __version__


@lru_cache(maxsize=1)
def load_registry() -> AssetRegistry:
    """Return the process-wide registry of bundled assets."""
    root = importlib.resources.files("nforge").joinpath(BUNDLE_DIR)
    entries = []
    for relative_path in ASSET_PATHS:
        resource = root
        for part in relative_path.split("/"):
            resource = resource.joinpath(part)
        entries.append(AssetEntry(relative_path, resource.read_bytes()))
    return AssetRegistry(version=_bundle_version(), entries=tuple(entries))
