"""Exception types raised by fswatcher."""
from __future__ import annotations


class FswatcherError(Exception):
    """Base class for all fswatcher errors."""


class ExecutableNotFound(FswatcherError):
    """Raised when the fswatch binary is missing or cannot be executed."""

    def __init__(self, name: str, reason: str = "not found") -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Command '{name}' {reason}.")


class MalformedEventLine(FswatcherError, ValueError):
    """Raised when an output line is not ``<path> <flags>``."""

    def __init__(self, line: str, line_number: int | None = None) -> None:
        self.line = line
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"Malformed event line{location}: {line!r}")


class WatchProcessError(FswatcherError):
    """Raised when the fswatch process exits with a failure status."""

    def __init__(self, returncode: int, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"fswatch exited with status {returncode}{detail}")


__all__ = ["ExecutableNotFound", "FswatcherError", "MalformedEventLine", "WatchProcessError"]
