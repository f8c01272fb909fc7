"""Log entries: fields gathered for one message and the methods that log them."""

from __future__ import annotations

import functools
import inspect
import io
import json
import os
import re
import sys
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from .bufferpool import get_buffer_pool
from .hook import HookError, LevelHooks
from .levels import Level
from .writer import LogWriter

#: Key under which ``with_error`` stores the error.
ERROR_KEY = "error"

#: Time of an entry whose time has not been set yet.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_PACKAGE_DIR = os.path.dirname(os.path.realpath(__file__)) + os.sep
_MAX_CALLER_DEPTH = 25

_VERB = re.compile(r"%([-+# 0]*\d*(?:\.\d+)?)([a-zA-Z%])")


@dataclass
class Frame:
    """Location of the code that made a log call."""

    function: str = ""
    file: str = ""
    line: int = 0


class EntryPanic(Exception):
    """Raised after an entry has been logged at panic level."""

    def __init__(self, entry: "Entry") -> None:
        super().__init__(entry.message)
        self.entry = entry


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def _sprint(args: Iterable[Any]) -> str:
    """Join operands, adding a space only between two non-string operands."""
    parts: list[str] = []
    previous: Any = None
    for position, arg in enumerate(args):
        if position and not isinstance(arg, str) and not isinstance(previous, str):
            parts.append(" ")
        parts.append(_stringify(arg))
        previous = arg
    return "".join(parts)


def _sprintln(args: Iterable[Any]) -> str:
    """Join operands with a space between every pair."""
    return " ".join(_stringify(arg) for arg in args)


def _format_verb(flags: str, verb: str, arg: Any) -> str:
    if verb in "vs":
        return ("%" + flags + "s") % _stringify(arg)
    if verb == "q":
        text = arg if isinstance(arg, str) else _stringify(arg)
        return ("%" + flags + "s") % json.dumps(text, ensure_ascii=False)
    if verb == "t":
        return ("%" + flags + "s") % _stringify(arg)
    if verb == "T":
        return type(arg).__name__
    try:
        return ("%" + flags + verb) % (arg,)
    except (TypeError, ValueError):
        return f"%!{verb}({type(arg).__name__}={_stringify(arg)})"


def _sprintf(fmt: str, args: Iterable[Any]) -> str:
    """Printf-style formatting; %v renders any value, %q quotes it."""
    queue = deque(args)

    def substitute(match: re.Match) -> str:
        flags, verb = match.groups()
        if verb == "%":
            return "%"
        if not queue:
            return f"%!{verb}(MISSING)"
        return _format_verb(flags, verb, queue.popleft())

    text = _VERB.sub(substitute, fmt)
    if queue:
        extra = ", ".join(f"{type(a).__name__}={_stringify(a)}" for a in queue)
        text += f"%!(EXTRA {extra})"
    return text


def _is_function(value: Any) -> bool:
    return callable(value) and not isinstance(value, type)


@functools.lru_cache(maxsize=256)
def _inside_package(filename: str) -> bool:
    return os.path.realpath(filename).startswith(_PACKAGE_DIR)


def _get_caller() -> Frame | None:
    """Return the first frame on the stack outside this package."""
    frame = inspect.currentframe()
    depth = 0
    while frame is not None and depth < _MAX_CALLER_DEPTH:
        code = frame.f_code
        if not _inside_package(code.co_filename):
            module = os.path.splitext(os.path.basename(code.co_filename))[0]
            name = getattr(code, "co_qualname", code.co_name)
            return Frame(f"{module}.{name}", code.co_filename, frame.f_lineno)
        frame = frame.f_back
        depth += 1
    return None


def _write_out(out: Any, data: bytes) -> None:
    if isinstance(out, io.TextIOBase):
        out.write(data.decode("utf-8", errors="replace"))
    else:
        out.write(data)


class Entry:
    """Fields, time and context for a message, logged by one of the level methods.

    Entries are immutable in practice: the ``with_*`` methods return new
    entries, so one entry can be shared and extended freely.
    """

    def __init__(
        self,
        logger: Any = None,
        *,
        data: dict[str, Any] | None = None,
        time: datetime = ZERO_TIME,
        level: Level = Level.PANIC,
        message: str = "",
        caller: Frame | None = None,
        context: Any = None,
        field_error: str = "",
    ) -> None:
        self.logger = logger
        self.data: dict[str, Any] = {} if data is None else data
        self.time = time
        self.level = level
        self.caller = caller
        self.message = message
        self.buffer: io.BytesIO | None = None
        self.context = context
        self.field_error = field_error

    def __repr__(self) -> str:
        return (
            f"Entry(level={self.level!s}, message={self.message!r}, "
            f"data={self.data!r})"
        )

    def _derive(self, **changes: Any) -> "Entry":
        values = {
            "data": dict(self.data),
            "time": self.time,
            "context": self.context,
            "field_error": self.field_error,
        }
        values.update(changes)
        return Entry(self.logger, **values)

    def dup(self) -> "Entry":
        """Return a copy with its own data, keeping time, context and field errors."""
        return self._derive()

    def to_bytes(self) -> bytes:
        """Render the entry with its logger's formatter."""
        return self.logger.formatter.format(self)

    def to_string(self) -> str:
        """Render the entry with its logger's formatter, as text."""
        return self.to_bytes().decode("utf-8", errors="replace")

    def with_error(self, err: BaseException) -> "Entry":
        """Add an error under the key named by ``ERROR_KEY``."""
        return self.with_field(ERROR_KEY, err)

    def with_context(self, ctx: Any) -> "Entry":
        """Return a copy carrying ``ctx``."""
        return self._derive(context=ctx)

    def with_field(self, key: str, value: Any) -> "Entry":
        """Return a copy with one more field."""
        return self.with_fields({key: value})

    def with_fields(self, fields: Mapping[str, Any]) -> "Entry":
        """Return a copy with more fields; functions are refused and recorded as an error."""
        data = dict(self.data)
        field_error = self.field_error
        for key, value in fields.items():
            if _is_function(value):
                problem = f"can not add field {json.dumps(key, ensure_ascii=False)}"
                field_error = f"{field_error}, {problem}" if field_error else problem
            else:
                data[key] = value
        return self._derive(data=data, field_error=field_error)

    def with_time(self, t: datetime) -> "Entry":
        """Return a copy logged at time ``t``."""
        return self._derive(time=t)

    def has_caller(self) -> bool:
        """Whether caller information is to be reported for this entry."""
        return (
            self.logger is not None
            and bool(self.logger.report_caller)
            and self.caller is not None
        )

    def _emit(self, level: Level, msg: str) -> None:
        entry = self.dup()
        if entry.time == ZERO_TIME:
            entry.time = datetime.now().astimezone()
        entry.level = level
        entry.message = msg

        logger = entry.logger
        with logger.lock:
            report_caller = logger.report_caller
            pool = (
                logger.buffer_pool
                if logger.buffer_pool is not None
                else get_buffer_pool()
            )

        if report_caller:
            entry.caller = _get_caller()

        entry._fire_hooks()

        buffer = pool.get()
        buffer.seek(0)
        buffer.truncate()
        entry.buffer = buffer
        try:
            entry._write()
        finally:
            entry.buffer = None
            buffer.seek(0)
            buffer.truncate()
            pool.put(buffer)

        if level <= Level.PANIC:
            raise EntryPanic(entry)

    def _fire_hooks(self) -> None:
        logger = self.logger
        with logger.lock:
            hooks = LevelHooks({lvl: list(h) for lvl, h in logger.hooks.items()})
        try:
            hooks.fire(self.level, self)
        except HookError as err:
            print(f"Failed to fire hook: {err}", file=sys.stderr)

    def _write(self) -> None:
        logger = self.logger
        with logger.lock:
            try:
                serialized = logger.formatter.format(self)
            except (TypeError, ValueError) as err:
                print(f"Failed to obtain reader, {err}", file=sys.stderr)
                return
            try:
                _write_out(logger.out, serialized)
            except OSError as err:
                print(f"Failed to write to log, {err}", file=sys.stderr)

    def log(self, level: Level, *args: Any) -> None:
        """Log at ``level``; panic and fatal levels neither raise nor exit here."""
        if self.logger.is_level_enabled(level):
            self._emit(level, _sprint(args))

    def trace(self, *args: Any) -> None:
        self.log(Level.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def print(self, *args: Any) -> None:
        self.info(*args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def warn(self, *args: Any) -> None:
        self.log(Level.WARN, *args)

    def warning(self, *args: Any) -> None:
        self.warn(*args)

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def fatal(self, *args: Any) -> None:
        self.log(Level.FATAL, *args)
        self.logger.exit(1)

    def panic(self, *args: Any) -> None:
        self.log(Level.PANIC, *args)

    def logf(self, level: Level, format: str, *args: Any) -> None:
        if self.logger.is_level_enabled(level):
            self.log(level, _sprintf(format, args))

    def tracef(self, format: str, *args: Any) -> None:
        self.logf(Level.TRACE, format, *args)

    def debugf(self, format: str, *args: Any) -> None:
        self.logf(Level.DEBUG, format, *args)

    def infof(self, format: str, *args: Any) -> None:
        self.logf(Level.INFO, format, *args)

    def printf(self, format: str, *args: Any) -> None:
        self.infof(format, *args)

    def warnf(self, format: str, *args: Any) -> None:
        self.logf(Level.WARN, format, *args)

    def warningf(self, format: str, *args: Any) -> None:
        self.warnf(format, *args)

    def errorf(self, format: str, *args: Any) -> None:
        self.logf(Level.ERROR, format, *args)

    def fatalf(self, format: str, *args: Any) -> None:
        self.logf(Level.FATAL, format, *args)
        self.logger.exit(1)

    def panicf(self, format: str, *args: Any) -> None:
        self.logf(Level.PANIC, format, *args)

    def logln(self, level: Level, *args: Any) -> None:
        if self.logger.is_level_enabled(level):
            self.log(level, _sprintln(args))

    def traceln(self, *args: Any) -> None:
        self.logln(Level.TRACE, *args)

    def debugln(self, *args: Any) -> None:
        self.logln(Level.DEBUG, *args)

    def infoln(self, *args: Any) -> None:
        self.logln(Level.INFO, *args)

    def println(self, *args: Any) -> None:
        self.infoln(*args)

    def warnln(self, *args: Any) -> None:
        self.logln(Level.WARN, *args)

    def warningln(self, *args: Any) -> None:
        self.warnln(*args)

    def errorln(self, *args: Any) -> None:
        self.logln(Level.ERROR, *args)

    def fatalln(self, *args: Any) -> None:
        self.logln(Level.FATAL, *args)
        self.logger.exit(1)

    def panicln(self, *args: Any) -> None:
        self.logln(Level.PANIC, *args)

    def writer(self) -> LogWriter:
        """Return a stream that logs each written line at info level."""
        return self.writer_level(Level.INFO)

    def writer_level(self, level: Level) -> LogWriter:
        """Return a stream that logs each written line at ``level``."""
        return LogWriter(self, level)