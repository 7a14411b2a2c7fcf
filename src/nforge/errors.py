"""Exception hierarchy for the nforge launcher.

Every error carries enough context (path, interpreter, underlying cause)
to be reported on stderr by the top-level entry point. None of them are
retried within an invocation: re-running the tool is the retry.
"""

from __future__ import annotations

from pathlib import Path

GENERIC_FAILURE = 1


class LauncherError(Exception):
    """Base class for all launcher failures."""

    exit_code: int = GENERIC_FAILURE
    hint: str | None = None


class SyncError(LauncherError):
    """Materializing the bundle under the cache root failed."""

    action = "sync"

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed to {self.action} {path}: {cause}")


class DirectoryCreationError(SyncError):
    action = "create directory"


class FileWriteError(SyncError):
    action = "write"


class VersionMarkerWriteError(SyncError):
    action = "write version file"


class InterpreterSpawnError(LauncherError):
    """The external script runtime could not be started."""

    def __init__(
        self,
        interpreter: str,
        cause: OSError | None = None,
        hint: str | None = None,
    ) -> None:
        self.interpreter = interpreter
        self.cause = cause
        self.hint = hint
        reason = str(cause) if cause is not None else "not found on PATH"
        super().__init__(f"failed to run {interpreter}: {reason}")


class ResolutionError(LauncherError):
    """The install directory or bundle location could not be determined."""


class ConfigError(LauncherError):
    """Invalid launcher configuration."""
