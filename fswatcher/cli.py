"""Command line interface for fswatcher."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .command import WatchCommandBuilder
from .config import DEFAULT_LATENCY, WatchOptions
from .decoder import DecodedEvent, EventStreamDecoder
from .errors import FswatcherError
from .flags import EventFlag, flag_names, parse_flag_names
from .logger import configure_logging, log_event
from .runner import watch


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "handler"):
        parser.print_help()
        return 1
    configure_logging(
        args.log_file,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )
    try:
        return args.handler(args)
    except (FswatcherError, ValueError) as exc:
        log_event(
            logging.getLogger("fswatcher.cli"),
            level=logging.ERROR,
            action=f"cli.{args.command}_failed",
            message=str(exc),
            extra={"error": type(exc).__name__},
        )
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fswatcher", description="fswatch command builder and event decoder")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug events")
    parser.add_argument("--log-file", type=Path, help="Write JSON logs to this file instead of stderr")
    subparsers = parser.add_subparsers(dest="command")

    command_parser = subparsers.add_parser("command", help="Print the fswatch command for the given options")
    _add_watch_arguments(command_parser)
    command_parser.add_argument("--json", action="store_true", help="Print the command as JSON")
    command_parser.set_defaults(handler=_handle_command)

    decode_parser = subparsers.add_parser("decode", help="Decode fswatch output into JSON lines")
    decode_parser.add_argument("input", nargs="?", type=Path, help="File with fswatch output (default stdin)")
    decode_parser.set_defaults(handler=_handle_decode)

    watch_parser = subparsers.add_parser("watch", help="Run fswatch and print decoded events")
    _add_watch_arguments(watch_parser)
    watch_parser.set_defaults(handler=_handle_watch)

    flags_parser = subparsers.add_parser("flags", help="List event flags or explain a mask")
    flags_parser.add_argument("mask", nargs="?", type=int)
    flags_parser.set_defaults(handler=_handle_flags)

    return parser


def _add_watch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="+", help="Paths to watch")
    parser.add_argument("--event", help="Event names or mask, e.g. Created,Updated")
    parser.add_argument("--latency", type=float, default=DEFAULT_LATENCY)
    parser.add_argument("--filter-from", type=Path)
    parser.add_argument("--no-recursive", dest="recursive", action="store_false")
    parser.add_argument("--case-sensitive", dest="insensitive", action="store_false")
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY[=VALUE]",
        help="Extra fswatch option; repeatable",
    )
    parser.add_argument("--binary", default=os.environ.get("FSWATCH_BINARY"), help="Path to fswatch")


def _options_from_args(args: argparse.Namespace) -> WatchOptions:
    options = WatchOptions(
        args.paths,
        latency=args.latency,
        recursive=args.recursive,
        insensitive=args.insensitive,
    )
    if args.event:
        options.set_event(parse_flag_names(args.event))
    if args.filter_from:
        options.set_filter_from(args.filter_from)
    if args.option:
        options.set_user_options(_parse_user_options(args.option))
    return options


def _parse_user_options(raw_options: list[str]) -> dict[str, object]:
    parsed: dict[str, object] = {}
    for raw in raw_options:
        key, sep, value = raw.partition("=")
        if not key.strip("-"):
            raise ValueError(f"Invalid option: {raw!r}")
        parsed[key] = value if sep else True
    return parsed


def _event_payload(event: DecodedEvent) -> str:
    payload = event.to_dict()
    payload["names"] = event.names
    return json.dumps(payload, ensure_ascii=False)


def _handle_command(args: argparse.Namespace) -> int:
    command = WatchCommandBuilder(_options_from_args(args), args.binary).build_command()
    if args.json:
        print(json.dumps({"executable": command.executable, "arguments": command.arguments}, ensure_ascii=False))
    else:
        print(command.shell_line())
    return 0


def _handle_decode(args: argparse.Namespace) -> int:
    decoder = EventStreamDecoder()
    if args.input:
        events = decoder.decode(args.input.read_text(encoding="utf-8"))
    else:
        events = []
        for line in sys.stdin:
            events.extend(decoder.feed(line))
        events.extend(decoder.flush())
    for event in events:
        print(_event_payload(event))
    return 0


def _handle_watch(args: argparse.Namespace) -> int:
    try:
        for event in watch(_options_from_args(args), args.binary):
            print(_event_payload(event), flush=True)
    except KeyboardInterrupt:
        return 130
    return 0


def _handle_flags(args: argparse.Namespace) -> int:
    if args.mask is None:
        for member in EventFlag.__members__.values():
            print(f"{member.fswatch_name:<20}{int(member)}")
        return 0
    print(", ".join(flag_names(args.mask)) or EventFlag.NO_OP.fswatch_name)
    return 0


__all__ = ["main"]
