"""fswatcher package exports."""

from .cli import main as cli_main
from .command import WatchCommand, WatchCommandBuilder
from .config import OptionKind, OptionValue, WatchOptions
from .decoder import DecodedEvent, EventStreamDecoder, decode_events
from .errors import ExecutableNotFound, FswatcherError, MalformedEventLine, WatchProcessError
from .flags import EventFlag, combine, flag_names, parse_flag_names
from .runner import iter_output_lines, watch

__all__ = [
    "cli_main",
    "combine",
    "decode_events",
    "DecodedEvent",
    "EventFlag",
    "EventStreamDecoder",
    "ExecutableNotFound",
    "flag_names",
    "FswatcherError",
    "iter_output_lines",
    "MalformedEventLine",
    "OptionKind",
    "OptionValue",
    "parse_flag_names",
    "watch",
    "WatchCommand",
    "WatchCommandBuilder",
    "WatchOptions",
    "WatchProcessError",
]
