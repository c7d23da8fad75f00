"""Event flag vocabulary shared by the ``--event`` filter and decoded events."""
from __future__ import annotations

import re
from enum import IntFlag
from typing import Iterable


class EventFlag(IntFlag):
    """Bit codes reported by ``fswatch --numeric --event-flags``."""

    NO_OP = 0
    PLATFORM_SPECIFIC = 1
    CREATED = 2
    UPDATED = 4
    REMOVED = 8
    RENAMED = 16
    OWNER_MODIFIED = 32
    ATTRIBUTE_MODIFIED = 64
    MOVED_FROM = 128
    MOVED_TO = 256
    IS_FILE = 512
    IS_DIR = 1024
    IS_SYMLINK = 2048
    LINK = 4096
    OVERFLOW = 8192

    @property
    def fswatch_name(self) -> str:
        """Return the CamelCase spelling used by fswatch (``MovedFrom``)."""

        return "".join(part.capitalize() for part in (self.name or "").split("_"))


_SEPARATORS = re.compile(r"[,|\s]+")

# Lookup accepting MOVED_FROM, MovedFrom and movedfrom alike.
_BY_NAME: dict[str, EventFlag] = {}
for _member in EventFlag.__members__.values():
    _BY_NAME[_member.name.replace("_", "").lower()] = _member
del _member


def combine(*flags: EventFlag | int) -> int:
    """OR together any mix of :class:`EventFlag` members and raw integers."""

    mask = 0
    for flag in flags:
        mask |= int(flag)
    return mask


def parse_flag_names(text: str | Iterable[str]) -> int:
    """Turn ``"Created,IsFile"`` (or a list of names/ints) into a mask."""

    if isinstance(text, str):
        tokens = [token for token in _SEPARATORS.split(text.strip()) if token]
    else:
        tokens = [str(token).strip() for token in text if str(token).strip()]

    mask = 0
    for token in tokens:
        if token.isdigit():
            mask |= int(token)
            continue
        member = _BY_NAME.get(token.replace("_", "").replace("-", "").lower())
        if member is None:
            raise ValueError(f"Unknown event flag: {token!r}")
        mask |= int(member)
    return mask


def flag_names(mask: int) -> list[str]:
    """List fswatch names of the known bits in *mask*, lowest bit first."""

    names: list[str] = []
    for member in EventFlag.__members__.values():
        value = int(member)
        if value and mask & value == value:
            names.append(member.fswatch_name)
    return names


__all__ = ["EventFlag", "combine", "flag_names", "parse_flag_names"]
