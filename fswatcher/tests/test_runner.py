"""Tests for :mod:`fswatcher.runner` using a fake process."""
from __future__ import annotations

import io
import subprocess

import pytest

from fswatcher.command import WatchCommand, WatchCommandBuilder
from fswatcher.config import WatchOptions
from fswatcher.decoder import DecodedEvent
from fswatcher.errors import WatchProcessError
from fswatcher.runner import iter_output_lines, watch


class FakeProcess:
    def __init__(self, stdout: str, *, returncode: int = 0, stderr: str = "", running: bool = False) -> None:
        self.pid = 4242
        self.stdout = io.StringIO(stdout)
        self.stderr_text = stderr
        self._returncode = returncode
        self.returncode: int | None = None if running else returncode
        self.terminated = False

    def poll(self) -> int | None:
        return self.returncode

    def wait(self, timeout: float | None = None) -> int:
        self.returncode = self._returncode
        return self._returncode

    def terminate(self) -> None:
        self.terminated = True
        self._returncode = -15

    def kill(self) -> None:  # pragma: no cover - not reached with the fake
        self._returncode = -9


@pytest.fixture()
def popen_factory():
    calls: list[dict] = []

    def factory(process: FakeProcess):
        def popen(argv, **kwargs):
            calls.append({"argv": argv, **kwargs})
            assert kwargs["text"] is True
            # the child writes straight into whatever sink it was handed
            kwargs["stderr"].write(process.stderr_text.encode("utf-8"))
            return process

        popen.calls = calls  # type: ignore[attr-defined]
        return popen

    return factory


COMMAND = WatchCommand("/usr/local/bin/fswatch", ["--numeric", "/tmp/a"])


def test_iter_output_lines_yields_stdout(popen_factory) -> None:
    process = FakeProcess("/tmp/a/x 2\n/tmp/a/y 4\n")
    popen = popen_factory(process)

    lines = list(iter_output_lines(COMMAND, popen=popen))

    assert lines == ["/tmp/a/x 2\n", "/tmp/a/y 4\n"]
    assert popen.calls[0]["argv"] == ["/usr/local/bin/fswatch", "--numeric", "/tmp/a"]
    assert process.stdout.closed


def test_stderr_is_not_a_pipe(popen_factory) -> None:
    popen = popen_factory(FakeProcess("", stderr="warning\n" * 20000))

    list(iter_output_lines(COMMAND, popen=popen))

    assert popen.calls[0]["stderr"] is not subprocess.PIPE
    assert popen.calls[0]["stdout"] is subprocess.PIPE


def test_iter_output_lines_raises_on_failure(popen_factory) -> None:
    popen = popen_factory(FakeProcess("", returncode=1, stderr="fswatch: no such path\n"))

    with pytest.raises(WatchProcessError) as excinfo:
        list(iter_output_lines(COMMAND, popen=popen))

    assert excinfo.value.returncode == 1
    assert "no such path" in excinfo.value.stderr


def test_closing_the_generator_terminates_process(popen_factory) -> None:
    process = FakeProcess("/tmp/a/x 2\n/tmp/a/y 4\n", running=True)
    lines = iter_output_lines(COMMAND, popen=popen_factory(process))

    assert next(lines) == "/tmp/a/x 2\n"
    lines.close()

    assert process.terminated is True
    assert process.stdout.closed


def _trusting_builder(options, binary):
    return WatchCommandBuilder(options, binary, is_executable=lambda path: True)


def test_watch_decodes_streamed_lines() -> None:
    def runner(command: WatchCommand):
        assert command.arguments[-1] == "/tmp/a"
        yield "/tmp/a/x 2\n"
        yield "/tmp/a/y 516\r\n"

    events = list(
        watch(WatchOptions(["/tmp/a"]), "fswatch", runner=runner, builder_factory=_trusting_builder)
    )

    assert events == [DecodedEvent("/tmp/a/x", 2), DecodedEvent("/tmp/a/y", 516)]


def test_watch_treats_each_runner_item_as_a_line() -> None:
    def runner(command: WatchCommand):
        yield "a/b.txt 2"
        yield "c/d.txt 24"

    events = list(
        watch(WatchOptions(["/tmp/a"]), "fswatch", runner=runner, builder_factory=_trusting_builder)
    )

    assert events == [DecodedEvent("a/b.txt", 2), DecodedEvent("c/d.txt", 24)]
