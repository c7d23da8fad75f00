from __future__ import annotations

import json
import logging
from pathlib import Path

from fswatcher.command import WatchCommandBuilder
from fswatcher.config import WatchOptions
from fswatcher.logger import configure_logging, log_event


def read_payloads(logger: logging.Logger, log_file: Path) -> list[dict]:
    for handler in logger.handlers:
        handler.flush()
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line]


def test_log_event_sanitizes_home_directory(tmp_path: Path) -> None:
    log_file = tmp_path / "fswatcher.log"
    logger = configure_logging(log_file, level=logging.INFO)
    watched = Path.home() / "Documents" / "project"
    log_event(
        logger,
        level=logging.INFO,
        action="test",
        message="Watching",
        extra={"path": str(watched), "paths": [str(watched)]},
    )

    payload = read_payloads(logger, log_file)[-1]
    assert payload["path"].startswith("~/")
    assert payload["paths"][0].startswith("~/")
    assert payload["level"] == "INFO"
    assert payload["ts"].endswith("Z")


def test_command_build_is_logged_at_debug(tmp_path: Path) -> None:
    log_file = tmp_path / "debug.log"
    logger = configure_logging(log_file, level=logging.DEBUG)
    builder = WatchCommandBuilder(
        WatchOptions(["/tmp/a"]),
        "fswatch",
        is_executable=lambda path: True,
        logger=logging.getLogger("fswatcher.command"),
    )

    builder.build_command()

    payload = read_payloads(logger, log_file)[-1]
    assert payload["action"] == "command.built"
    assert payload["arguments"][-1] == "/tmp/a"


def test_reconfiguring_replaces_the_handler(tmp_path: Path) -> None:
    configure_logging(tmp_path / "first.log")
    logger = configure_logging(tmp_path / "second.log", level=logging.INFO)

    assert len(logger.handlers) == 1
    log_event(logger, level=logging.INFO, action="test", message="once")

    assert [p["message"] for p in read_payloads(logger, tmp_path / "second.log")] == ["once"]
    assert (tmp_path / "first.log").read_text(encoding="utf-8") == ""


def test_nested_path_values_are_sanitized(tmp_path: Path) -> None:
    log_file = tmp_path / "nested.log"
    logger = configure_logging(log_file, level=logging.INFO)
    watched = Path.home() / "src"

    log_event(
        logger,
        level=logging.INFO,
        action="test",
        message="Nested",
        extra={"filter": watched, "command": {"paths": [watched, ("x", watched)]}},
    )

    payload = read_payloads(logger, log_file)[-1]
    assert payload["filter"] == "~/src"
    assert payload["command"]["paths"] == ["~/src", ["x", "~/src"]]
