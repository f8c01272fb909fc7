# fieldlog

Structured, levelled logging for Python. Every log line carries a level, a
message, a timestamp and any number of extra fields. Lines go through a
formatter (plain text or JSON), and hooks can inspect or change each entry
before it is written. The package uses only the standard library.

## Installation

```
pip install fieldlog
```

## Quick start

The functions in `fieldlog.exported` log through a shared standard logger,
which writes text to standard error at info level and above:

```python
from fieldlog import exported as log

log.with_fields({"animal": "walrus", "number": 1, "size": 10}).info("A walrus appears")
```

```
time="2015-09-07T08:48:33Z" level=info msg="A walrus appears" animal=walrus number=1 size=10
```

`set_output`, `set_formatter`, `set_level`, `set_report_caller` and
`add_hook` configure the standard logger; `standard_logger()` returns it.

## Your own logger

```python
import sys
from fieldlog.logger import Logger
from fieldlog.levels import Level
from fieldlog.json_formatter import JSONFormatter

logger = Logger(out=sys.stdout, formatter=JSONFormatter(), level=Level.DEBUG)
request_log = logger.with_field("request_id", "abc123")
request_log.debug("parsing body")
request_log.with_field("status", 200).info("done")
```

`Logger` takes `out` (a binary or text stream, standard error by default),
`formatter` (a `TextFormatter` by default), `hooks`, `level` (`Level.INFO` by
default), `report_caller`, `exit_func` (`sys.exit` by default) and
`buffer_pool`. Writes are serialised by a lock; `set_no_lock()` turns that off.

`with_field`, `with_fields`, `with_error`, `with_time` and `with_context`
each return a new `Entry`, so a shared entry can be reused and extended
freely. A field whose value is a function is not added; instead the entry
records the problem and formatters output it under the `fieldlog_error` key.

### Levels

`fieldlog.levels.Level`, from most to least severe: `PANIC`, `FATAL`, `ERROR`,
`WARN`, `INFO`, `DEBUG`, `TRACE`. A logger emits entries at its own level and
above (`is_level_enabled`). `str(Level.WARN)` is `"warning"`. `parse_level`
(and `Level.from_text`, which also accepts bytes) turns text such as
`"warn"`, `"warning"` or `"INFO"` into a `Level` and raises `ValueError` for
unknown names.

- `panic` logs, then raises `fieldlog.entry.EntryPanic`, whose `entry`
  attribute is the logged entry.
- `fatal` logs, runs the registered exit handlers, then calls the logger's
  `exit_func` with 1.
- `log(level, ...)` at panic or fatal level only logs; it neither raises nor
  exits.

Each level has several forms:

- `info(*args)` joins its arguments, adding a space only between two
  operands that are not strings (`info("test", 10)` gives `test10`);
- `infof(format, *args)` uses printf-style verbs such as `%s`, `%d`, `%v`
  and `%q`;
- `infoln(*args)` always separates arguments with spaces;
- `info_fn(fn)` calls `fn` for the operands only if the level is enabled.

`print`, `printf`, `println` and `print_fn` log at info level; `warning*`
are aliases of `warn*`.

### Formatters

- `fieldlog.text_formatter.TextFormatter` writes `key=value` pairs: time,
  level, message, then the fields sorted by key. Values containing anything
  other than letters, digits and `-._/@^+` are quoted. Output is coloured when
  writing to a terminal (not on Windows). Options: `force_colors`,
  `disable_colors`, `environment_override_colors` (honours `CLICOLOR` and
  `CLICOLOR_FORCE`), `force_quote`, `disable_quote`, `quote_empty_fields`,
  `disable_timestamp`, `full_timestamp`, `timestamp_format` (a strftime
  pattern; RFC 3339 by default), `disable_sorting`, `sorting_func`,
  `disable_level_truncation`, `pad_level_text`, `field_map` and
  `caller_prettyfier`.
- `fieldlog.json_formatter.JSONFormatter` writes one JSON object per line with
  sorted keys. Exceptions in fields are written as their message. Options:
  `timestamp_format`, `disable_timestamp`, `disable_html_escape`, `data_key`
  (nest user fields under one key), `field_map`, `caller_prettyfier` and
  `pretty_print`.

`FieldMap` renames the default keys, for example
`FieldMap({"time": "@timestamp", "msg": "@message"})`. User fields that
collide with the `time`, `msg`, `level` or `fieldlog_error` keys are kept
under a `fields.` prefix instead of being dropped.

With `report_caller` on, entries carry the first calling frame outside the
package, and formatters add `func` and `file` keys;
`caller_prettyfier(frame)` may return other values for them, and an empty
string drops the key.

A custom formatter subclasses `fieldlog.formatter.Formatter` and implements
`format(entry)` returning bytes.

### Hooks

A hook subclasses `fieldlog.hook.Hook` with `levels()` and `fire(entry)`; it
runs synchronously for every entry at one of its levels and may add or change
fields. Raising `HookError` reports a failure on standard error without
stopping the log call.

```python
from fieldlog.hooks.writer_hook import WriterHook

logger.add_hook(WriterHook(writer=open("warnings.log", "a"), log_levels=[Level.WARN]))
```

`WriterHook` formats each entry with the logger's formatter and writes it to
its own stream. `replace_hooks` swaps in a new `LevelHooks` and returns the old
one.

### Exit handlers

```python
from fieldlog.exit import register_exit_handler

register_exit_handler(lambda: db.close())
```

Handlers run in order before a fatal entry ends the process;
`defer_exit_handler` puts a handler first instead. A handler that raises is
reported on standard error and the rest still run. `exit_program(code)` runs
the handlers and then exits.

### Writing lines into the log

`logger.writer()` (or `entry.writer()`) returns a file-like `LogWriter`; each
line written to it is logged at info level, or at another level with
`writer_level(level)`. Lines longer than 64 KiB are split. Text left without a
trailing newline is logged on `close()`; the writer is also a context manager.

### Buffers

Formatting borrows byte buffers from a pool. `fieldlog.bufferpool` provides
`DefaultBufferPool`, `set_buffer_pool` to replace the process-wide pool, and a
`buffer_pool` option on each logger.

## What it does not do

fieldlog has no command-line tool, and it does not send entries to a syslog
daemon or any other remote service; the only ready-made hook is
`WriterHook`. Forwarding elsewhere means writing your own `Hook`.