"""Log severity levels and their text forms."""

from __future__ import annotations

import enum
import json


class Level(enum.IntEnum):
    """Severity of a log entry; a larger value means a more verbose level."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    def __str__(self) -> str:
        return _NAMES[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def from_text(cls, text: str | bytes) -> "Level":
        """Parse a level from its text form (bytes or str), case-insensitively."""
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8")
        return parse_level(text)


_NAMES = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERROR: "error",
    Level.FATAL: "fatal",
    Level.PANIC: "panic",
}

_PARSE_TABLE = {
    "panic": Level.PANIC,
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
    "trace": Level.TRACE,
}

ALL_LEVELS = (
    Level.PANIC,
    Level.FATAL,
    Level.ERROR,
    Level.WARN,
    Level.INFO,
    Level.DEBUG,
    Level.TRACE,
)


def parse_level(lvl: str) -> Level:
    """Return the level named by ``lvl``; raise ValueError for unknown names."""
    try:
        return _PARSE_TABLE[lvl.lower()]
    except KeyError:
        quoted = json.dumps(lvl, ensure_ascii=False)
        raise ValueError(f"not a valid fieldlog Level: {quoted}") from None


def level_name(value: int) -> str:
    """Return the text form of any level value, or "unknown" if it is not a level."""
    try:
        return str(Level(value))
    except ValueError:
        return "unknown"