"""Process-wide standard logger and functions that log through it."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from .entry import Entry
from .formatter import Formatter
from .hook import Hook
from .levels import Level
from .logger import LogFunction, Logger

_std = Logger()


def standard_logger() -> Logger:
    """Return the process-wide standard logger."""
    return _std


def set_output(out: Any) -> None:
    """Set the output stream of the standard logger."""
    _std.out = out


def set_formatter(formatter: Formatter) -> None:
    """Set the formatter of the standard logger."""
    _std.formatter = formatter


def set_report_caller(include: bool) -> None:
    """Set whether the standard logger reports the calling function."""
    _std.report_caller = include


def set_level(level: Level) -> None:
    """Set the level of the standard logger."""
    _std.level = level


def get_level() -> Level:
    """Return the level of the standard logger."""
    return _std.level


def is_level_enabled(level: Level) -> bool:
    """Whether the standard logger logs entries at ``level``."""
    return _std.is_level_enabled(level)


def add_hook(hook: Hook) -> None:
    """Add a hook to the standard logger."""
    _std.add_hook(hook)


def with_error(err: BaseException) -> Entry:
    """Return an entry of the standard logger holding ``err`` under the error key."""
    return _std.with_error(err)


def with_context(ctx: Any) -> Entry:
    """Return an entry of the standard logger carrying ``ctx``."""
    return _std.with_context(ctx)


def with_field(key: str, value: Any) -> Entry:
    """Return an entry of the standard logger holding one field."""
    return _std.with_field(key, value)


def with_fields(fields: Mapping[str, Any]) -> Entry:
    """Return an entry of the standard logger holding ``fields``."""
    return _std.with_fields(fields)


def with_time(t: datetime) -> Entry:
    """Return an entry of the standard logger logged at time ``t``."""
    return _std.with_time(t)


def trace(*args: Any) -> None:
    _std.trace(*args)


def debug(*args: Any) -> None:
    _std.debug(*args)


def print(*args: Any) -> None:
    _std.print(*args)


def info(*args: Any) -> None:
    _std.info(*args)


def warn(*args: Any) -> None:
    _std.warn(*args)


def warning(*args: Any) -> None:
    _std.warning(*args)


def error(*args: Any) -> None:
    _std.error(*args)


def panic(*args: Any) -> None:
    """Log at panic level, then raise EntryPanic."""
    _std.panic(*args)


def fatal(*args: Any) -> None:
    """Log at fatal level, then exit with status 1."""
    _std.fatal(*args)


def trace_fn(fn: LogFunction) -> None:
    _std.trace_fn(fn)


def debug_fn(fn: LogFunction) -> None:
    _std.debug_fn(fn)


def print_fn(fn: LogFunction) -> None:
    _std.print_fn(fn)


def info_fn(fn: LogFunction) -> None:
    _std.info_fn(fn)


def warn_fn(fn: LogFunction) -> None:
    _std.warn_fn(fn)


def warning_fn(fn: LogFunction) -> None:
    _std.warning_fn(fn)


def error_fn(fn: LogFunction) -> None:
    _std.error_fn(fn)


def panic_fn(fn: LogFunction) -> None:
    _std.panic_fn(fn)


def fatal_fn(fn: LogFunction) -> None:
    _std.fatal_fn(fn)


def tracef(format: str, *args: Any) -> None:
    _std.tracef(format, *args)


def debugf(format: str, *args: Any) -> None:
    _std.debugf(format, *args)


def printf(format: str, *args: Any) -> None:
    _std.printf(format, *args)


def infof(format: str, *args: Any) -> None:
    _std.infof(format, *args)


def warnf(format: str, *args: Any) -> None:
    _std.warnf(format, *args)


def warningf(format: str, *args: Any) -> None:
    _std.warningf(format, *args)


def errorf(format: str, *args: Any) -> None:
    _std.errorf(format, *args)


def panicf(format: str, *args: Any) -> None:
    _std.panicf(format, *args)


def fatalf(format: str, *args: Any) -> None:
    _std.fatalf(format, *args)


def traceln(*args: Any) -> None:
    _std.traceln(*args)


def debugln(*args: Any) -> None:
    _std.debugln(*args)


def println(*args: Any) -> None:
    _std.println(*args)


def infoln(*args: Any) -> None:
    _std.infoln(*args)


def warnln(*args: Any) -> None:
    _std.warnln(*args)


def warningln(*args: Any) -> None:
    _std.warningln(*args)


def errorln(*args: Any) -> None:
    _std.errorln(*args)


def panicln(*args: Any) -> None:
    _std.panicln(*args)


def fatalln(*args: Any) -> None:
    _std.fatalln(*args)