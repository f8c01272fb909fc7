"""Formatter that renders entries as key=value text, optionally coloured."""

from __future__ import annotations

import os
import string
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from .entry import Frame
from .formatter import (
    FIELD_KEY_ERROR,
    FIELD_KEY_FILE,
    FIELD_KEY_FUNC,
    FIELD_KEY_LEVEL,
    FIELD_KEY_MSG,
    FIELD_KEY_TIME,
    FieldMap,
    Formatter,
    format_time,
    prefix_field_clashes,
)
from .levels import ALL_LEVELS, Level, level_name
from .terminal import is_terminal

_RED = 31
_YELLOW = 33
_BLUE = 36
_GRAY = 37

_BASE_TIMESTAMP = datetime.now().astimezone()
_MAX_DURATION_SECONDS = (2**63 - 1) // 10**9
_QUOTE_FREE = frozenset(string.ascii_letters + string.digits + "-._/@^+")
_LEVEL_TEXT_MAX_LENGTH = max(len(str(level)) for level in ALL_LEVELS)

_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def _quote(text: str) -> str:
    """Double-quote ``text``, escaping quotes, backslashes and unprintable characters."""
    out = ['"']
    for ch in text:
        escaped = _SIMPLE_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) <= 0xFFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)


def _aware(t: datetime) -> datetime:
    if t.tzinfo is not None:
        return t
    try:
        return t.astimezone()
    except (OverflowError, ValueError, OSError):
        return t.replace(tzinfo=timezone.utc)


def _seconds_since_start(t: datetime) -> int:
    seconds = (_aware(t) - _BASE_TIMESTAMP).total_seconds()
    seconds = max(-_MAX_DURATION_SECONDS, min(_MAX_DURATION_SECONDS, seconds))
    return int(seconds)


def _level_color(level: int) -> int:
    if level in (Level.DEBUG, Level.TRACE):
        return _GRAY
    if level == Level.WARN:
        return _YELLOW
    if level in (Level.ERROR, Level.FATAL, Level.PANIC):
        return _RED
    return _BLUE


@dataclass
class TextFormatter(Formatter):
    """Renders entries as ``key=value`` pairs, coloured when writing to a terminal."""

    force_colors: bool = False
    disable_colors: bool = False
    force_quote: bool = False
    disable_quote: bool = False
    environment_override_colors: bool = False
    disable_timestamp: bool = False
    full_timestamp: bool = False
    timestamp_format: str = ""
    disable_sorting: bool = False
    sorting_func: Callable[[list[str]], Any] | None = None
    disable_level_truncation: bool = False
    pad_level_text: bool = False
    quote_empty_fields: bool = False
    field_map: FieldMap = field(default_factory=FieldMap)
    caller_prettyfier: Callable[[Frame], tuple[str, str]] | None = None

    _is_terminal: bool = field(default=False, init=False, repr=False, compare=False)
    _initialised: bool = field(default=False, init=False, repr=False, compare=False)
    _init_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.field_map, FieldMap):
            self.field_map = FieldMap(self.field_map or {})

    def _init_once(self, entry: Any) -> None:
        with self._init_lock:
            if self._initialised:
                return
            self._initialised = True
            if entry.logger is not None:
                self._is_terminal = is_terminal(getattr(entry.logger, "out", None))

    def is_colored(self) -> bool:
        """Whether output is coloured, honouring CLICOLOR and CLICOLOR_FORCE if asked."""
        colored = self.force_colors or (self._is_terminal and os.name != "nt")

        if self.environment_override_colors:
            force = os.environ.get("CLICOLOR_FORCE")
            if force is not None and force != "0":
                colored = True
            elif force == "0" or os.environ.get("CLICOLOR") == "0":
                colored = False

        return colored and not self.disable_colors

    def _apply_sort(self, keys: list[str]) -> list[str]:
        result = self.sorting_func(keys)
        return keys if result is None else list(result)

    def format(self, entry: Any) -> bytes:
        """Render ``entry`` as one line of text."""
        fm = self.field_map
        has_caller = entry.has_caller()
        data = dict(entry.data)
        prefix_field_clashes(data, fm, has_caller)
        keys = list(data)

        time_key = fm.resolve(FIELD_KEY_TIME)
        level_key = fm.resolve(FIELD_KEY_LEVEL)
        msg_key = fm.resolve(FIELD_KEY_MSG)
        error_key = fm.resolve(FIELD_KEY_ERROR)
        func_key = fm.resolve(FIELD_KEY_FUNC)
        file_key = fm.resolve(FIELD_KEY_FILE)

        func_val = file_val = ""
        fixed: list[str] = []
        if not self.disable_timestamp:
            fixed.append(time_key)
        fixed.append(level_key)
        if entry.message:
            fixed.append(msg_key)
        if entry.field_error:
            fixed.append(error_key)
        if has_caller:
            caller = entry.caller
            if self.caller_prettyfier is not None:
                func_val, file_val = self.caller_prettyfier(caller)
            else:
                func_val = caller.function
                file_val = f"{caller.file}:{caller.line}"
            if func_val:
                fixed.append(func_key)
            if file_val:
                fixed.append(file_key)

        if not self.disable_sorting:
            if self.sorting_func is None:
                keys.sort()
                fixed.extend(keys)
            elif not self.is_colored():
                fixed.extend(keys)
                fixed = self._apply_sort(fixed)
            else:
                keys = self._apply_sort(keys)
        else:
            fixed.extend(keys)

        self._init_once(entry)

        if self.is_colored():
            text = self._colored(entry, keys, data)
        else:
            pairs = []
            for key in fixed:
                if key == time_key:
                    value: Any = format_time(entry.time, self.timestamp_format)
                elif key == level_key:
                    value = level_name(entry.level)
                elif key == msg_key:
                    value = entry.message
                elif key == error_key:
                    value = entry.field_error
                elif key == func_key and has_caller:
                    value = func_val
                elif key == file_key and has_caller:
                    value = file_val
                else:
                    value = data.get(key)
                pairs.append(f"{key}={self._render_value(value)}")
            text = " ".join(pairs)

        encoded = (text + "\n").encode("utf-8")
        if entry.buffer is not None:
            entry.buffer.write(encoded)
            return entry.buffer.getvalue()
        return encoded

    def _colored(self, entry: Any, keys: list[str], data: dict[str, Any]) -> str:
        color = _level_color(entry.level)

        level_text = level_name(entry.level).upper()
        if not self.disable_level_truncation and not self.pad_level_text:
            level_text = level_text[:4]
        if self.pad_level_text:
            level_text = level_text.ljust(_LEVEL_TEXT_MAX_LENGTH)

        # A single trailing newline is dropped, as a plain line logger would.
        if entry.message.endswith("\n"):
            entry.message = entry.message[:-1]
        message = entry.message

        caller_text = ""
        if entry.has_caller():
            caller = entry.caller
            func_val = f"{caller.function}()"
            file_val = f"{caller.file}:{caller.line}"
            if self.caller_prettyfier is not None:
                func_val, file_val = self.caller_prettyfier(caller)
            if not file_val:
                caller_text = func_val
            elif not func_val:
                caller_text = file_val
            else:
                caller_text = f"{file_val} {func_val}"

        head = f"\x1b[{color}m{level_text}\x1b[0m"
        if self.disable_timestamp:
            stamp = ""
        elif not self.full_timestamp:
            stamp = f"[{_seconds_since_start(entry.time):04d}]"
        else:
            stamp = f"[{format_time(entry.time, self.timestamp_format)}]"
        parts = [f"{head}{stamp}{caller_text} {message:<44} "]

        for key in keys:
            parts.append(f" \x1b[{color}m{key}\x1b[0m=")
            parts.append(self._render_value(data.get(key)))
        return "".join(parts)

    def _needs_quoting(self, text: str) -> bool:
        if self.force_quote:
            return True
        if self.quote_empty_fields and not text:
            return True
        if self.disable_quote:
            return False
        return any(ch not in _QUOTE_FREE for ch in text)

    def _render_value(self, value: Any) -> str:
        text = _to_text(value)
        return _quote(text) if self._needs_quoting(text) else text