"""The ``nforge`` command.

Takes no options of its own: every argument after the program name is
forwarded verbatim to the Luau entry point. Launcher failures are
reported on stderr as ``nforge: <message>`` and exit with
``GENERIC_FAILURE``; otherwise the child's exit code is returned.
"""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from rich.console import Console

from nforge.config import load_config
from nforge.errors import LauncherError
from nforge.runtime.delegate import delegate
from nforge.runtime.home import resolve_cache_root
from nforge.runtime.resolver import resolve_entry_point

logger = logging.getLogger(__name__)

err_console = Console(stderr=True, highlight=False)


def configure_logging(level: str | None) -> None:
    """Send launcher logs to stderr, only when a level is requested."""
    if not level:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="nforge %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def report_error(exc: LauncherError) -> None:
    err_console.print(f"nforge: {exc}", markup=False, soft_wrap=True)
    if exc.hint:
        err_console.print(f"        {exc.hint}", markup=False, soft_wrap=True)


def run(argv: Sequence[str]) -> int:
    """Resolve the bundle and delegate *argv* to it; return the exit code."""
    cache_root = resolve_cache_root()
    try:
        config = load_config(cache_root)
        configure_logging(config.log_level)
        resolution = resolve_entry_point(config.source_mode, cache_root=cache_root)
        logger.debug(
            "Resolved %s bundle: %s", resolution.origin.value, resolution.entry_point
        )
        return delegate(resolution.entry_point, argv, config.interpreter)
    except LauncherError as exc:
        report_error(exc)
        return exc.exit_code


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
