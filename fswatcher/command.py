"""Resolve the fswatch executable and assemble its argument vector."""
from __future__ import annotations

import logging
import os
import shlex
import shutil
from typing import Callable, NamedTuple

from .config import WatchOptions
from .errors import ExecutableNotFound
from .logger import log_event

LOGGER_NAME = "fswatcher.command"
DEFAULT_EXECUTABLE = "fswatch"


class WatchCommand(NamedTuple):
    """Executable path plus the arguments to pass to it."""

    executable: str
    arguments: list[str]

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]

    def shell_line(self) -> str:
        return shlex.join(self.argv)


def default_is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


class WatchCommandBuilder:
    """Render :class:`WatchOptions` into a runnable fswatch command."""

    def __init__(
        self,
        options: WatchOptions,
        binary: str | None = None,
        *,
        finder: Callable[[str], str | None] = shutil.which,
        is_executable: Callable[[str], bool] = default_is_executable,
        logger: logging.Logger | None = None,
    ) -> None:
        self.options = options
        self.binary = binary
        self._finder = finder
        self._is_executable = is_executable
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def resolve_executable(self) -> str:
        """Return the configured binary, or look ``fswatch`` up on ``PATH``."""

        if self.binary:
            candidate: str | None = self.binary
        else:
            candidate = self._finder(DEFAULT_EXECUTABLE)

        if not candidate:
            raise ExecutableNotFound(DEFAULT_EXECUTABLE)
        if not self._is_executable(candidate):
            raise ExecutableNotFound(candidate, reason="not executable")
        return candidate

    def build_options(self) -> list[str]:
        return self.options.render_arguments()

    def build_command(self) -> WatchCommand:
        executable = self.resolve_executable()
        command = WatchCommand(executable, self.build_options() + list(self.options.paths))
        log_event(
            self.logger,
            level=logging.DEBUG,
            action="command.built",
            message="Built fswatch command",
            extra={"executable": executable, "arguments": command.arguments},
        )
        return command


__all__ = [
    "DEFAULT_EXECUTABLE",
    "WatchCommand",
    "WatchCommandBuilder",
    "default_is_executable",
]
