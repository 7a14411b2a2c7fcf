"""Bundle management for nforge.

This subpackage owns the bundled Luau scripts, the cache they are synced
into, the choice between cache and development checkout, and the hand-off
to the external runtime.
"""

from nforge.runtime.bootstrap import (
    FileSystem,
    LocalFileSystem,
    SyncResult,
    ensure_synced,
    read_marker,
)
from nforge.runtime.delegate import build_command, delegate
from nforge.runtime.home import resolve_cache_root
from nforge.runtime.registry import AssetEntry, AssetRegistry, load_registry
from nforge.runtime.resolver import (
    Origin,
    Resolution,
    SourceMode,
    resolve_entry_point,
)

__all__ = [
    "AssetEntry",
    "AssetRegistry",
    "FileSystem",
    "LocalFileSystem",
    "Origin",
    "Resolution",
    "SourceMode",
    "SyncResult",
    "build_command",
    "delegate",
    "ensure_synced",
    "load_registry",
    "read_marker",
    "resolve_cache_root",
    "resolve_entry_point",
]
