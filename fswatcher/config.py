"""Watch configuration and its rendering into fswatch option tokens."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import ClassVar, Dict, Iterable, List, Mapping, Optional, Union

DEFAULT_LATENCY = 0.0001

PathLike = Union[str, Path]


class OptionKind(str, Enum):
    """How a single option is emitted on the command line."""

    ABSENT = "absent"
    FLAG = "flag"
    VALUED = "valued"


@dataclass(frozen=True)
class OptionValue:
    """Tagged value of one fswatch option."""

    kind: OptionKind
    value: Optional[str] = None

    @classmethod
    def coerce(cls, raw: object) -> "OptionValue":
        if isinstance(raw, OptionValue):
            return raw
        if raw is True:
            return FLAG
        if raw is None or raw is False or raw == "" or raw == "0":
            return ABSENT
        if isinstance(raw, (int, float)) and raw == 0:
            return ABSENT
        return cls(OptionKind.VALUED, _format_value(raw))

    def render(self, name: str) -> List[str]:
        option = _option_token(name)
        if self.kind is OptionKind.FLAG:
            return [option]
        if self.kind is OptionKind.VALUED:
            return [f"{option}={self.value}"]
        return []


ABSENT = OptionValue(OptionKind.ABSENT)
FLAG = OptionValue(OptionKind.FLAG)


def _format_value(raw: object) -> str:
    if isinstance(raw, float):
        text = repr(raw)
        if "e" in text or "E" in text:
            # fswatch parses plain decimals only
            text = format(Decimal(text), "f")
        return text
    if isinstance(raw, int):
        # IntFlag members stringify as their name on older interpreters
        return str(int(raw))
    return str(raw)


def _option_key(name: str) -> str:
    return name.strip().lstrip("-")


def _option_token(name: str) -> str:
    return f"--{_option_key(name)}"


@dataclass
class WatchOptions:
    """Options that control what fswatch watches and how it reports it."""

    FIXED_OPTIONS: ClassVar[Mapping[str, bool]] = MappingProxyType(
        {"numeric": True, "extended": True, "event-flags": True}
    )

    paths: List[str] = field(default_factory=list)
    event_mask: Optional[int] = None
    latency: float = DEFAULT_LATENCY
    filter_from: Optional[str] = None
    recursive: bool = True
    insensitive: bool = True
    user_options: Dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        initial = self.paths
        self.paths = []
        if isinstance(initial, (str, Path)):
            self.add_path(initial)
        else:
            self.add_paths(initial)
        if not self.paths:
            raise ValueError("At least one path must be provided to watch")
        self.set_latency(self.latency)
        if self.event_mask is not None:
            self.set_event(self.event_mask)

    def add_path(self, path: Union[PathLike, Iterable[PathLike]]) -> "WatchOptions":
        if not isinstance(path, (str, Path)):
            return self.add_paths(path)

        value = str(path).strip()
        if not value:
            raise ValueError("Watched path must not be empty")
        if value not in self.paths:
            self.paths.append(value)
        return self

    def add_paths(self, paths: Iterable[PathLike]) -> "WatchOptions":
        for path in paths:
            self.add_path(path)
        return self

    def set_event(self, event_mask: int) -> "WatchOptions":
        mask = int(event_mask)
        if mask < 0:
            raise ValueError(f"Event mask must be non-negative, got {event_mask!r}")
        self.event_mask = mask
        return self

    def set_latency(self, latency: float) -> "WatchOptions":
        value = float(latency)
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"Latency must be greater than zero, got {latency!r}")
        self.latency = value
        return self

    def set_filter_from(self, filter_from: Optional[PathLike]) -> "WatchOptions":
        self.filter_from = str(filter_from) if filter_from is not None else None
        return self

    def set_recursive(self, recursive: bool) -> "WatchOptions":
        self.recursive = bool(recursive)
        return self

    def set_insensitive(self, insensitive: bool) -> "WatchOptions":
        self.insensitive = bool(insensitive)
        return self

    def set_user_options(self, options: Mapping[str, object]) -> "WatchOptions":
        self.user_options = dict(options)
        return self

    def default_options(self) -> Dict[str, OptionValue]:
        """Built-in options derived from the dataclass fields."""

        return {
            "event": OptionValue.coerce(self.event_mask),
            "latency": OptionValue.coerce(self.latency),
            "filter-from": OptionValue.coerce(self.filter_from),
            "recursive": OptionValue.coerce(self.recursive),
            "insensitive": OptionValue.coerce(self.insensitive),
        }

    def normalized_user_options(self) -> Dict[str, OptionValue]:
        return {_option_key(key): OptionValue.coerce(value) for key, value in self.user_options.items()}

    def fixed_options(self) -> Dict[str, OptionValue]:
        return {key: OptionValue.coerce(value) for key, value in self.FIXED_OPTIONS.items()}

    def merged_options(self) -> Dict[str, OptionValue]:
        """Combine defaults, user options and fixed options.

        Later tiers win on key collisions while the key keeps the position of
        its first appearance, so fixed options can never be overridden.
        """

        merged: Dict[str, OptionValue] = {}
        for tier in (self.default_options(), self.normalized_user_options(), self.fixed_options()):
            merged.update(tier)
        return merged

    def render_arguments(self) -> List[str]:
        tokens: List[str] = []
        for name, value in self.merged_options().items():
            tokens.extend(value.render(name))
        return tokens


__all__ = [
    "ABSENT",
    "DEFAULT_LATENCY",
    "FLAG",
    "OptionKind",
    "OptionValue",
    "WatchOptions",
]
