from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from nforge.runtime.registry import AssetEntry, AssetRegistry

FAKE_VERSION = "99.0.0-test"


@pytest.fixture()
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point NFORGE_HOME at a temp dir and return the path."""
    home = tmp_path / "nforge-home"
    monkeypatch.setenv("NFORGE_HOME", str(home))
    for name in ("NFORGE_INTERPRETER", "NFORGE_SOURCE_MODE", "NFORGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture()
def registry() -> AssetRegistry:
    """A small registry with a nested path, independent of package data."""
    return AssetRegistry(
        version=FAKE_VERSION,
        entries=(
            AssetEntry("nforge.luau", b"-- entry\n"),
            AssetEntry("commands/init.luau", b"return {}\n"),
            AssetEntry("util/deep/args.luau", b"return { parse = nil }\n"),
        ),
    )


@pytest.fixture()
def install_dir(tmp_path: Path) -> Path:
    """An executable directory with no development checkout beside it."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture()
def fake_lune(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Put a ``lune`` stand-in on PATH.

    It records its argv (one per line) to ``$FAKE_LUNE_LOG`` and exits with
    ``$FAKE_LUNE_EXIT`` (default 0).
    """
    if sys.platform == "win32":
        pytest.skip("fake lune is a POSIX shell script")

    bin_dir = tmp_path / "fake-bin"
    bin_dir.mkdir()
    log = tmp_path / "lune-argv.txt"
    script = bin_dir / "lune"
    script.write_text(
        "#!/bin/sh\n"
        'for arg in "$@"; do printf \'%s\\n\' "$arg"; done > "$FAKE_LUNE_LOG"\n'
        'exit "${FAKE_LUNE_EXIT:-0}"\n'
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    monkeypatch.setenv("FAKE_LUNE_LOG", str(log))
    return log
