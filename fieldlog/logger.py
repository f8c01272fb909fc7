"""Loggers: configuration shared by entries and the level methods that use it."""

from __future__ import annotations

import sys
import threading
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Callable, ContextManager, Mapping

from .bufferpool import BufferPool
from .entry import Entry
from .exit import run_handlers
from .formatter import Formatter
from .hook import Hook, LevelHooks
from .levels import Level
from .text_formatter import TextFormatter
from .writer import LogWriter

LogFunction = Callable[[], "list[Any] | tuple[Any, ...]"]


class Logger:
    """Output, formatter, hooks and level used by every entry it creates.

    Writing to ``out`` is serialised by an internal lock unless
    ``set_no_lock`` has been called. ``out`` may be a binary or a text stream.
    """

    def __init__(
        self,
        out: Any = None,
        formatter: Formatter | None = None,
        hooks: Mapping[Level, list[Hook]] | None = None,
        level: Level = Level.INFO,
        report_caller: bool = False,
        exit_func: Callable[[int], Any] | None = None,
        buffer_pool: BufferPool | None = None,
    ) -> None:
        self._mutex = threading.Lock()
        self._no_lock = False
        self._out = sys.stderr if out is None else out
        self._formatter = TextFormatter() if formatter is None else formatter
        self.hooks = LevelHooks(hooks or {})
        self._level = Level(level)
        self._report_caller = bool(report_caller)
        self.exit_func = sys.exit if exit_func is None else exit_func
        self._buffer_pool = buffer_pool

    @property
    def lock(self) -> ContextManager[Any]:
        """Context manager guarding writes; a no-op once locking is disabled."""
        return nullcontext() if self._no_lock else self._mutex

    @property
    def out(self) -> Any:
        return self._out

    @out.setter
    def out(self, value: Any) -> None:
        with self.lock:
            self._out = value

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    @formatter.setter
    def formatter(self, value: Formatter) -> None:
        with self.lock:
            self._formatter = value

    @property
    def report_caller(self) -> bool:
        return self._report_caller

    @report_caller.setter
    def report_caller(self, value: bool) -> None:
        with self.lock:
            self._report_caller = bool(value)

    @property
    def buffer_pool(self) -> BufferPool | None:
        return self._buffer_pool

    @buffer_pool.setter
    def buffer_pool(self, value: BufferPool | None) -> None:
        with self.lock:
            self._buffer_pool = value

    @property
    def level(self) -> Level:
        return self._level

    @level.setter
    def level(self, value: Level) -> None:
        self._level = Level(value)

    def _entry(self) -> Entry:
        return Entry(self)

    def with_field(self, key: str, value: Any) -> Entry:
        """Return a new entry holding one field."""
        return self._entry().with_field(key, value)

    def with_fields(self, fields: Mapping[str, Any]) -> Entry:
        """Return a new entry holding ``fields``."""
        return self._entry().with_fields(fields)

    def with_error(self, err: BaseException) -> Entry:
        """Return a new entry holding ``err`` under the error key."""
        return self._entry().with_error(err)

    def with_context(self, ctx: Any) -> Entry:
        """Return a new entry carrying ``ctx``."""
        return self._entry().with_context(ctx)

    def with_time(self, t: datetime) -> Entry:
        """Return a new entry logged at time ``t``."""
        return self._entry().with_time(t)

    def log(self, level: Level, *args: Any) -> None:
        """Log at ``level``; panic and fatal levels neither raise nor exit here."""
        if self.is_level_enabled(level):
            self._entry().log(level, *args)

    def logf(self, level: Level, format: str, *args: Any) -> None:
        if self.is_level_enabled(level):
            self._entry().logf(level, format, *args)

    def logln(self, level: Level, *args: Any) -> None:
        if self.is_level_enabled(level):
            self._entry().logln(level, *args)

    def log_fn(self, level: Level, fn: LogFunction) -> None:
        """Call ``fn`` for the message operands only if ``level`` is enabled."""
        if self.is_level_enabled(level):
            self._entry().log(level, *fn())

    def trace(self, *args: Any) -> None:
        self.log(Level.TRACE, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def print(self, *args: Any) -> None:
        self._entry().print(*args)

    def warn(self, *args: Any) -> None:
        self.log(Level.WARN, *args)

    def warning(self, *args: Any) -> None:
        self.warn(*args)

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def fatal(self, *args: Any) -> None:
        self.log(Level.FATAL, *args)
        self.exit(1)

    def panic(self, *args: Any) -> None:
        self.log(Level.PANIC, *args)

    def tracef(self, format: str, *args: Any) -> None:
        self.logf(Level.TRACE, format, *args)

    def debugf(self, format: str, *args: Any) -> None:
        self.logf(Level.DEBUG, format, *args)

    def infof(self, format: str, *args: Any) -> None:
        self.logf(Level.INFO, format, *args)

    def printf(self, format: str, *args: Any) -> None:
        self._entry().printf(format, *args)

    def warnf(self, format: str, *args: Any) -> None:
        self.logf(Level.WARN, format, *args)

    def warningf(self, format: str, *args: Any) -> None:
        self.warnf(format, *args)

    def errorf(self, format: str, *args: Any) -> None:
        self.logf(Level.ERROR, format, *args)

    def fatalf(self, format: str, *args: Any) -> None:
        self.logf(Level.FATAL, format, *args)
        self.exit(1)

    def panicf(self, format: str, *args: Any) -> None:
        self.logf(Level.PANIC, format, *args)

    def traceln(self, *args: Any) -> None:
        self.logln(Level.TRACE, *args)

    def debugln(self, *args: Any) -> None:
        self.logln(Level.DEBUG, *args)

    def infoln(self, *args: Any) -> None:
        self.logln(Level.INFO, *args)

    def println(self, *args: Any) -> None:
        self._entry().println(*args)

    def warnln(self, *args: Any) -> None:
        self.logln(Level.WARN, *args)

    def warningln(self, *args: Any) -> None:
        self.warnln(*args)

    def errorln(self, *args: Any) -> None:
        self.logln(Level.ERROR, *args)

    def fatalln(self, *args: Any) -> None:
        self.logln(Level.FATAL, *args)
        self.exit(1)

    def panicln(self, *args: Any) -> None:
        self.logln(Level.PANIC, *args)

    def trace_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.TRACE, fn)

    def debug_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.DEBUG, fn)

    def info_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.INFO, fn)

    def print_fn(self, fn: LogFunction) -> None:
        self._entry().print(*fn())

    def warn_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.WARN, fn)

    def warning_fn(self, fn: LogFunction) -> None:
        self.warn_fn(fn)

    def error_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.ERROR, fn)

    def fatal_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.FATAL, fn)
        self.exit(1)

    def panic_fn(self, fn: LogFunction) -> None:
        self.log_fn(Level.PANIC, fn)

    def exit(self, code: int) -> None:
        """Run the registered exit handlers, then call ``exit_func`` with ``code``."""
        run_handlers()
        if self.exit_func is None:
            self.exit_func = sys.exit
        self.exit_func(code)

    def set_no_lock(self) -> None:
        """Stop serialising writes, for outputs that are safe to share."""
        self._no_lock = True

    def add_hook(self, hook: Hook) -> None:
        """Register ``hook`` for the levels it reports."""
        with self.lock:
            self.hooks.add(hook)

    def is_level_enabled(self, level: Level) -> bool:
        """Whether entries at ``level`` are logged."""
        return self._level >= level

    def replace_hooks(self, hooks: Mapping[Level, list[Hook]]) -> LevelHooks:
        """Install ``hooks`` and return the hooks they replace."""
        with self.lock:
            old = self.hooks
            self.hooks = hooks if isinstance(hooks, LevelHooks) else LevelHooks(hooks)
        return old

    def writer(self) -> LogWriter:
        """Return a stream that logs each written line at info level."""
        return self.writer_level(Level.INFO)

    def writer_level(self, level: Level) -> LogWriter:
        """Return a stream that logs each written line at ``level``."""
        return self._entry().writer_level(level)