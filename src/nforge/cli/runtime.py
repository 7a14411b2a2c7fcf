"""The ``nforge-runtime`` maintenance command.

Usage:
    nforge-runtime where            # Show cache paths and the bundle in use
    nforge-runtime sync             # Sync the cache (no-op if current)
    nforge-runtime sync --force     # Rewrite every script
    nforge-runtime doctor           # Health checks

``nforge`` itself forwards everything to the Luau entry point, so the
launcher's own maintenance lives here.
"""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from nforge import __version__
from nforge.config import load_config
from nforge.errors import LauncherError, ResolutionError
from nforge.launcher import configure_logging
from nforge.runtime.bootstrap import ensure_synced, marker_for, read_marker
from nforge.runtime.doctor import run_checks
from nforge.runtime.home import resolve_cache_root
from nforge.runtime.registry import BUNDLE_DIR, load_registry
from nforge.runtime.resolver import get_install_dir, select_bundle

console = Console()

app = typer.Typer(
    name="nforge-runtime",
    help="Inspect and maintain the nforge script cache",
    add_completion=False,
    no_args_is_help=True,
)


def _fail(exc: LauncherError) -> NoReturn:
    console.print(f"[red]Error:[/red] {exc}")
    if exc.hint:
        console.print(f"[dim]{exc.hint}[/dim]")
    raise typer.Exit(exc.exit_code)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log sync and resolution detail"),
) -> None:
    """Inspect and maintain the nforge script cache."""
    if verbose:
        configure_logging("debug")


@app.command()
def where() -> None:
    """Show where the Luau bundle is cached and which copy nforge runs."""
    cache_root = resolve_cache_root()
    registry = load_registry()
    try:
        config = load_config(cache_root)
        install_dir = get_install_dir()
    except LauncherError as exc:
        _fail(exc)

    try:
        origin, active = select_bundle(config.source_mode, install_dir, cache_root)
    except ResolutionError:
        origin, active = None, install_dir / BUNDLE_DIR

    table = Table(title="nforge runtime", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Bundle version", registry.version)
    table.add_row("Cache root", str(cache_root))
    table.add_row("Version marker", read_marker(cache_root) or "[dim]missing[/dim]")
    table.add_row("Source mode", config.source_mode.value)
    table.add_row("Interpreter", config.interpreter)
    table.add_row("Origin", origin.value if origin else "[red]not found[/red]")
    table.add_row("Bundle directory", str(active))
    console.print(table)


@app.command()
def sync(
    force: bool = typer.Option(False, "--force", help="Rewrite every script even if the cache is current"),
) -> None:
    """Sync the bundled Luau scripts into the cache."""
    cache_root = resolve_cache_root()
    registry = load_registry()
    try:
        result = ensure_synced(cache_root, registry, force=force)
    except LauncherError as exc:
        _fail(exc)

    if result.synced:
        console.print(
            f"[green]Synced[/green] {result.files_written} scripts "
            f"({result.previous_version or 'none'} -> {result.version}) to {result.asset_dir}"
        )
    else:
        console.print(f"Cache is current ({result.version}): {result.asset_dir}")
    console.print(f"[dim]Marker: {marker_for(cache_root)}[/dim]")


@app.command()
def doctor() -> None:
    """Check the cache and the Luau runtime."""
    cache_root = resolve_cache_root()
    try:
        config = load_config(cache_root)
    except LauncherError as exc:
        _fail(exc)

    checks = run_checks(cache_root, load_registry(), config.interpreter)

    table = Table(title=f"nforge {__version__} doctor")
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Detail")
    colors = {"error": "red", "warning": "yellow", "info": "green"}
    for check in checks:
        if check.passed:
            status = "[green]ok[/green]"
        else:
            color = colors.get(check.severity, "white")
            status = f"[{color}]{check.severity}[/{color}]"
        table.add_row(check.name, status, check.message)
    console.print(table)

    if any(not check.passed and check.severity == "error" for check in checks):
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
