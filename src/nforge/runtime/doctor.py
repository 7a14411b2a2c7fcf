"""Cache health checks for ``nforge-runtime doctor``.

Provides reusable check functions that detect:
- Missing cache root
- .version marker mismatch with the bundle version
- Missing bundled scripts in the cache
- lune not installed
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from nforge.runtime.bootstrap import asset_dir_for, read_marker
from nforge.runtime.delegate import DEFAULT_INTERPRETER
from nforge.runtime.registry import AssetRegistry


@dataclass
class DoctorCheck:
    """Result of a single doctor health check."""

    name: str
    passed: bool
    message: str
    severity: str  # "error", "warning", "info"


def check_cache_root_exists(cache_root: Path) -> DoctorCheck:
    """Check if the cache root exists."""
    if cache_root.is_dir():
        return DoctorCheck("cache_root_exists", True, f"{cache_root} exists", "info")
    return DoctorCheck(
        "cache_root_exists",
        False,
        f"Missing cache root: {cache_root} (created on first run)",
        "warning",
    )


def check_version_marker(cache_root: Path, registry: AssetRegistry) -> DoctorCheck:
    """Check if the .version marker matches the bundle version."""
    stored = read_marker(cache_root)
    if stored is None:
        return DoctorCheck(
            "version_marker",
            False,
            ".version missing (never synced or incomplete sync)",
            "warning",
        )
    if stored == registry.version:
        return DoctorCheck(
            "version_marker",
            True,
            f"Version marker: {stored} (matches bundle)",
            "info",
        )
    return DoctorCheck(
        "version_marker",
        False,
        f"Version mismatch: marker={stored}, bundle={registry.version}",
        "warning",
    )


def check_bundle_integrity(cache_root: Path, registry: AssetRegistry) -> DoctorCheck:
    """Check that every bundled script is present in the cache.

    A marker that matches while files are missing means the cache was
    edited by hand; ``nforge-runtime sync --force`` repairs it.
    """
    asset_dir = asset_dir_for(cache_root)
    missing = [
        path for path in registry.paths() if not asset_dir.joinpath(*path.split("/")).is_file()
    ]
    if not missing:
        return DoctorCheck(
            "bundle_integrity", True, f"{len(registry)} scripts present", "info"
        )

    severity = "error" if read_marker(cache_root) == registry.version else "warning"
    return DoctorCheck(
        "bundle_integrity",
        False,
        f"Missing: {', '.join(missing)}",
        severity,
    )


def check_interpreter(interpreter: str = DEFAULT_INTERPRETER) -> DoctorCheck:
    """Check that the Luau runtime is on PATH."""
    located = shutil.which(interpreter)
    if located:
        return DoctorCheck("interpreter", True, f"{interpreter}: {located}", "info")
    return DoctorCheck(
        "interpreter",
        False,
        f"{interpreter} not found on PATH (https://lune-org.github.io/docs)",
        "error",
    )


def run_checks(
    cache_root: Path,
    registry: AssetRegistry,
    interpreter: str = DEFAULT_INTERPRETER,
) -> list[DoctorCheck]:
    """Run all cache health checks.

    Returns:
        List of DoctorCheck results.
    """
    return [
        check_cache_root_exists(cache_root),
        check_version_marker(cache_root, registry),
        check_bundle_integrity(cache_root, registry),
        check_interpreter(interpreter),
    ]
