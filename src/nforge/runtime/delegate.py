"""Hand the invocation over to the external Luau runtime.

The child inherits stdin/stdout/stderr directly; the launcher never reads
or buffers its output. Arguments pass through untouched and without a
shell, and the child's exit code becomes the launcher's.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from nforge.errors import GENERIC_FAILURE, InterpreterSpawnError

logger = logging.getLogger(__name__)

DEFAULT_INTERPRETER = "lune"

INTERPRETER_HINTS: dict[str, str] = {
    "lune": "Is lune installed? (https://lune-org.github.io/docs)",
}


def build_command(
    interpreter: str, entry_point: Path, args: Sequence[str]
) -> list[str]:
    """Return ``<interpreter> run <entry_point> -- <args...>``."""
    return [interpreter, "run", str(entry_point), "--", *args]


def exit_code_from_returncode(returncode: int | None) -> int:
    """Map a child return code onto the launcher's exit status.

    A negative code means the child was killed by a signal; that status
    has no numeric equivalent, so the generic failure code is used.
    """
    if returncode is None or returncode < 0:
        return GENERIC_FAILURE
    return returncode


def _wait(proc: subprocess.Popen) -> int:
    # Ctrl-C reaches the child through the terminal's process group; keep
    # waiting so its own exit status is the one reported.
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            logger.debug("Interrupted; waiting for child %s to exit", proc.pid)


def delegate(
    entry_point: Path,
    args: Sequence[str],
    interpreter: str = DEFAULT_INTERPRETER,
) -> int:
    """Run *entry_point* under *interpreter* and return its exit code.

    Raises:
        InterpreterSpawnError: The interpreter is not on PATH or could
            not be started.
    """
    hint = INTERPRETER_HINTS.get(Path(interpreter).stem)
    executable = shutil.which(interpreter)
    if executable is None:
        raise InterpreterSpawnError(interpreter, hint=hint)

    cmd = build_command(executable, entry_point, args)
    logger.debug("Running %s", cmd)
    try:
        proc = subprocess.Popen(cmd)
    except OSError as exc:
        raise InterpreterSpawnError(interpreter, exc, hint=hint) from exc

    return exit_code_from_returncode(_wait(proc))
