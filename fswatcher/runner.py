"""Default process runner: spawn fswatch and stream its decoded output."""
from __future__ import annotations

import logging
import subprocess
import tempfile
from typing import Any, Callable, Iterator

from .command import WatchCommand, WatchCommandBuilder
from .config import WatchOptions
from .decoder import DecodedEvent, EventStreamDecoder
from .errors import WatchProcessError
from .logger import log_event

LOGGER_NAME = "fswatcher.runner"
_TERMINATE_TIMEOUT = 5.0

LineRunner = Callable[[WatchCommand], Iterator[str]]


def iter_output_lines(
    command: WatchCommand,
    *,
    popen: Callable[..., Any] = subprocess.Popen,
    logger: logging.Logger | None = None,
) -> Iterator[str]:
    """Yield stdout lines of *command* as they arrive.

    stderr is spooled to a temporary file so a chatty process never blocks on
    a full pipe. Closing the generator terminates the process. A failing exit
    status seen after stdout reaches EOF raises :class:`WatchProcessError`.
    """

    logger = logger or logging.getLogger(LOGGER_NAME)
    with tempfile.TemporaryFile() as stderr_file:
        process = popen(
            command.argv,
            stdout=subprocess.PIPE,
            stderr=stderr_file,
            text=True,
            bufsize=1,
        )
        log_event(
            logger,
            level=logging.INFO,
            action="process.started",
            message="Started fswatch",
            extra={"pid": getattr(process, "pid", None), "command": command.shell_line()},
        )

        returncode: int | None = None
        try:
            for line in process.stdout:
                yield line
            returncode = process.wait()
        finally:
            if process.poll() is None:
                _terminate(process, logger)
            if process.stdout is not None:
                process.stdout.close()

        stderr_file.seek(0)
        stderr = stderr_file.read().decode("utf-8", errors="replace")

    log_event(
        logger,
        level=logging.INFO if returncode == 0 else logging.ERROR,
        action="process.exited",
        message="fswatch exited",
        extra={"returncode": returncode},
    )
    if returncode:
        raise WatchProcessError(returncode, stderr)


def _terminate(process: Any, logger: logging.Logger) -> None:
    process.terminate()
    try:
        process.wait(timeout=_TERMINATE_TIMEOUT)
    except subprocess.TimeoutExpired:
        log_event(
            logger,
            level=logging.WARNING,
            action="process.kill",
            message="fswatch did not stop after SIGTERM; killing it",
        )
        process.kill()
        process.wait()


def watch(
    options: WatchOptions,
    binary: str | None = None,
    *,
    runner: LineRunner = iter_output_lines,
    builder_factory: Callable[..., WatchCommandBuilder] = WatchCommandBuilder,
) -> Iterator[DecodedEvent]:
    """Run fswatch for *options* and yield events until the stream ends."""

    command = builder_factory(options, binary).build_command()
    decoder = EventStreamDecoder()
    lines = runner(command)
    try:
        for line in lines:
            yield from decoder.feed_line(line)
    finally:
        close = getattr(lines, "close", None)
        if close is not None:
            close()


__all__ = ["LineRunner", "iter_output_lines", "watch"]
