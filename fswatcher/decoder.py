"""Decode fswatch's ``<path> <flags>`` output into structured events."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .errors import MalformedEventLine
from .flags import EventFlag, flag_names


@dataclass(frozen=True, slots=True)
class DecodedEvent:
    """A single reported change: the path and its raw event mask."""

    path: str
    flags: int

    @property
    def event_flags(self) -> EventFlag:
        """Known bits of :attr:`flags`; unknown bits are dropped here only."""

        known = 0
        for member in EventFlag:
            known |= int(member)
        return EventFlag(self.flags & known)

    @property
    def names(self) -> list[str]:
        return flag_names(self.flags)

    @property
    def is_dir(self) -> bool:
        return self.has(EventFlag.IS_DIR)

    @property
    def is_file(self) -> bool:
        return self.has(EventFlag.IS_FILE)

    @property
    def is_symlink(self) -> bool:
        return self.has(EventFlag.IS_SYMLINK)

    def has(self, flag: EventFlag | int) -> bool:
        value = int(flag)
        return bool(value) and self.flags & value == value

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "flags": self.flags}


def parse_line(line: str, line_number: int | None = None) -> DecodedEvent:
    """Parse one output line.

    The flags field is the last whitespace-separated token, so paths that
    contain spaces survive intact and only the final token must be numeric.
    """

    pieces = line.strip().rsplit(None, 1)
    if len(pieces) != 2:
        raise MalformedEventLine(line, line_number)
    path, events_field = pieces
    try:
        flags = int(events_field)
    except ValueError as exc:
        raise MalformedEventLine(line, line_number) from exc
    return DecodedEvent(path=path, flags=flags)


class EventStreamDecoder:
    """Turn fswatch stdout into :class:`DecodedEvent` records.

    ``decode`` handles a complete block (or an iterable of lines). ``feed``
    accepts arbitrary chunks of a live stream and keeps the trailing partial
    line until the rest of it arrives.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._line_number = 0

    @property
    def pending(self) -> str:
        return self._buffer

    def decode(self, output: str | Iterable[str]) -> list[DecodedEvent]:
        if isinstance(output, str):
            lines: Iterable[str] = output.strip().splitlines()
        else:
            lines = _split_items(output)

        events: list[DecodedEvent] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            events.append(parse_line(line, number))
        return events

    def feed(self, chunk: str) -> list[DecodedEvent]:
        """Decode every complete line available after appending *chunk*."""

        self._buffer += chunk
        *complete, self._buffer = self._buffer.split("\n")
        return self._decode_counted(complete)

    def feed_line(self, line: str) -> list[DecodedEvent]:
        """Decode one complete line, with or without its line terminator."""

        return self._decode_counted(line.splitlines())

    def flush(self) -> list[DecodedEvent]:
        """Decode the buffered partial line, if any."""

        remainder, self._buffer = self._buffer, ""
        if not remainder:
            return []
        return self._decode_counted([remainder])

    def _decode_counted(self, lines: list[str]) -> list[DecodedEvent]:
        events: list[DecodedEvent] = []
        for line in lines:
            self._line_number += 1
            if not line.strip():
                continue
            events.append(parse_line(line, self._line_number))
        return events


def _split_items(items: Iterable[str]) -> Iterator[str]:
    for item in items:
        yield from item.splitlines()


def decode_events(output: str | Iterable[str]) -> list[DecodedEvent]:
    return EventStreamDecoder().decode(output)


__all__ = ["DecodedEvent", "EventStreamDecoder", "decode_events", "parse_line"]
