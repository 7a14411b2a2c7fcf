"""Tests for nforge.runtime.resolver -- development checkout vs. cache."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from nforge.errors import ResolutionError, SyncError
from nforge.runtime.bootstrap import ensure_synced
from nforge.runtime.registry import AssetRegistry
from nforge.runtime.resolver import (
    Origin,
    SourceMode,
    get_install_dir,
    resolve_entry_point,
    select_bundle,
)


class TestDevelopmentOverride:
    """A luau/ directory beside the executable wins outright."""

    def test_uses_local_checkout(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        (install_dir / "luau").mkdir()
        sync = MagicMock(side_effect=ensure_synced)

        result = resolve_entry_point(
            install_dir=install_dir,
            cache_root=tmp_path / "cache",
            registry=registry,
            sync=sync,
        )

        assert result.origin is Origin.DEVELOPMENT
        assert result.entry_point == install_dir / "luau" / "nforge"
        assert result.sync is None
        sync.assert_not_called()

    def test_no_cache_writes_even_with_stale_marker(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        (install_dir / "luau").mkdir()
        cache_root = tmp_path / "cache"
        cache_root.mkdir()
        (cache_root / ".version").write_text("0.0.1-stale")

        resolve_entry_point(install_dir=install_dir, cache_root=cache_root, registry=registry)

        assert (cache_root / ".version").read_text() == "0.0.1-stale"
        assert not (cache_root / "luau").exists()

    def test_checkout_is_not_written(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        checkout = install_dir / "luau"
        checkout.mkdir()
        (checkout / "nforge.luau").write_text("-- local edits")

        resolve_entry_point(install_dir=install_dir, cache_root=tmp_path / "cache", registry=registry)

        assert sorted(p.name for p in checkout.iterdir()) == ["nforge.luau"]
        assert (checkout / "nforge.luau").read_text() == "-- local edits"

    def test_plain_file_named_luau_is_not_a_checkout(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        (install_dir / "luau").write_text("not a directory")
        result = resolve_entry_point(
            install_dir=install_dir, cache_root=tmp_path / "cache", registry=registry
        )
        assert result.origin is Origin.CACHE


class TestCachePath:
    def test_syncs_and_uses_cache(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        cache_root = tmp_path / "cache"
        result = resolve_entry_point(
            install_dir=install_dir, cache_root=cache_root, registry=registry
        )

        assert result.origin is Origin.CACHE
        assert result.bundle_dir == cache_root / "luau"
        assert result.entry_point == cache_root / "luau" / "nforge"
        assert result.sync is not None and result.sync.synced
        assert (cache_root / "luau" / "nforge.luau").exists()

    def test_cache_root_from_environment(
        self, install_dir: Path, fake_home: Path, registry: AssetRegistry
    ) -> None:
        result = resolve_entry_point(install_dir=install_dir, registry=registry)
        assert result.bundle_dir == fake_home / "luau"

    def test_sync_error_propagates(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        def failing_sync(cache_root: Path, reg: AssetRegistry):
            raise SyncError(cache_root / "luau", OSError(30, "Read-only file system"))

        with pytest.raises(SyncError):
            resolve_entry_point(
                install_dir=install_dir,
                cache_root=tmp_path / "cache",
                registry=registry,
                sync=failing_sync,
            )


class TestInstalledMode:
    """The bundle is expected beside the executable; nothing is synced."""

    def test_uses_installed_bundle(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        (install_dir / "luau").mkdir()
        sync = MagicMock()
        result = resolve_entry_point(
            SourceMode.INSTALLED, install_dir=install_dir, registry=registry, sync=sync
        )
        assert result.origin is Origin.INSTALLED
        assert result.entry_point == install_dir / "luau" / "nforge"
        sync.assert_not_called()

    def test_missing_bundle_is_an_error(
        self, install_dir: Path, tmp_path: Path, registry: AssetRegistry
    ) -> None:
        sync = MagicMock()
        with pytest.raises(ResolutionError, match="bundle not found"):
            resolve_entry_point(
                SourceMode.INSTALLED,
                install_dir=install_dir,
                cache_root=tmp_path / "cache",
                registry=registry,
                sync=sync,
            )
        sync.assert_not_called()
        assert not (tmp_path / "cache").exists()


class TestGetInstallDir:
    def test_script_parent(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        script = tmp_path / "bin" / "nforge"
        monkeypatch.setattr(sys, "argv", [str(script)])
        monkeypatch.delattr(sys, "frozen", raising=False)
        assert get_install_dir() == (tmp_path / "bin").resolve()

    def test_frozen_executable(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        exe = tmp_path / "dist" / "nforge.exe"
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(sys, "executable", str(exe))
        assert get_install_dir() == (tmp_path / "dist").resolve()

    def test_unknown_executable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delattr(sys, "frozen", raising=False)
        monkeypatch.setattr(sys, "argv", [""])
        with pytest.raises(ResolutionError):
            get_install_dir()

    def test_run_as_module_uses_scripts_dir(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """``python -m nforge`` must not treat the packaged luau/ as a checkout."""
        import nforge

        main_py = Path(nforge.__file__).parent / "__main__.py"
        monkeypatch.delattr(sys, "frozen", raising=False)
        monkeypatch.setattr(sys, "argv", [str(main_py)])
        monkeypatch.setattr(
            "nforge.runtime.resolver.sysconfig.get_path", lambda name: str(tmp_path / "scripts")
        )

        install_dir = get_install_dir()

        assert install_dir == (tmp_path / "scripts").resolve()
        result = resolve_entry_point(
            install_dir=install_dir, cache_root=tmp_path / "cache", registry=MagicMock(), sync=MagicMock()
        )
        assert result.origin is Origin.CACHE


class TestSelectBundle:
    """Directory choice shared by resolve_entry_point and ``nforge-runtime where``."""

    def test_checkout_wins(self, install_dir: Path, tmp_path: Path) -> None:
        (install_dir / "luau").mkdir()
        origin, bundle = select_bundle(SourceMode.EMBEDDED, install_dir, tmp_path / "cache")
        assert origin is Origin.DEVELOPMENT
        assert bundle == install_dir / "luau"

    def test_cache_without_syncing(self, install_dir: Path, tmp_path: Path) -> None:
        origin, bundle = select_bundle(SourceMode.EMBEDDED, install_dir, tmp_path / "cache")
        assert origin is Origin.CACHE
        assert bundle == tmp_path / "cache" / "luau"
        assert not (tmp_path / "cache").exists()

    def test_installed(self, install_dir: Path, tmp_path: Path) -> None:
        (install_dir / "luau").mkdir()
        origin, _ = select_bundle(SourceMode.INSTALLED, install_dir, tmp_path / "cache")
        assert origin is Origin.INSTALLED

    def test_installed_missing(self, install_dir: Path, tmp_path: Path) -> None:
        with pytest.raises(ResolutionError):
            select_bundle(SourceMode.INSTALLED, install_dir, tmp_path / "cache")
