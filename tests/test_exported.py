import io
import json
from datetime import datetime, timezone

import pytest

from fieldlog import exported
from fieldlog.entry import EntryPanic
from fieldlog.hook import Hook
from fieldlog.json_formatter import JSONFormatter
from fieldlog.levels import ALL_LEVELS, Level
from fieldlog.text_formatter import TextFormatter


class RecordingHook(Hook):
    def __init__(self):
        self.entries = []

    def levels(self):
        return list(ALL_LEVELS)

    def fire(self, entry):
        self.entries.append(entry)


@pytest.fixture
def buf():
    logger = exported.standard_logger()
    saved = (
        logger.out,
        logger.formatter,
        logger.level,
        logger.report_caller,
        logger.exit_func,
    )
    saved_hooks = logger.replace_hooks({})
    out = io.BytesIO()
    exported.set_output(out)
    exported.set_formatter(JSONFormatter())
    exported.set_level(Level.INFO)
    exported.set_report_caller(False)
    yield out
    logger.out, logger.formatter, logger.level, logger.report_caller, logger.exit_func = saved
    logger.replace_hooks(saved_hooks)


def records(out):
    return [json.loads(line) for line in out.getvalue().decode().splitlines() if line]


def test_standard_logger_receives_settings(buf):
    assert exported.standard_logger().out is buf
    exported.set_level(Level.DEBUG)
    assert exported.standard_logger().level == Level.DEBUG
    exported.standard_logger().info("via logger")
    assert records(buf)[0]["msg"] == "via logger"


def test_info_fn_not_called_below_level(buf):
    exported.set_level(Level.WARN)
    calls = []

    def make():
        calls.append(1)
        return ["Hello"]

    exported.info_fn(make)
    assert calls == []
    assert buf.getvalue() == b""


def test_error_fn_called_once(buf):
    exported.set_level(Level.WARN)
    calls = []

    def make():
        calls.append(1)
        return ["Oopsi"]

    exported.error_fn(make)
    assert len(calls) == 1
    assert records(buf)[0]["msg"] == "Oopsi"
    assert records(buf)[0]["level"] == "error"


def test_print_fn_calls_function_even_when_disabled(buf):
    exported.set_level(Level.WARN)
    calls = []

    def make():
        calls.append(1)
        return ["x"]

    exported.print_fn(make)
    assert len(calls) == 1
    assert buf.getvalue() == b""


def test_set_and_get_level(buf):
    exported.set_level(Level.DEBUG)
    assert exported.get_level() == Level.DEBUG
    assert exported.is_level_enabled(Level.DEBUG) is True
    assert exported.is_level_enabled(Level.TRACE) is False


def test_info_with_field(buf):
    exported.with_field("foo", "bar").info("hello")
    rec = records(buf)[0]
    assert rec["foo"] == "bar"
    assert rec["msg"] == "hello"
    assert rec["level"] == "info"


def test_with_fields(buf):
    exported.with_fields({"a": 1, "b": "two"}).warn("w")
    rec = records(buf)[0]
    assert (rec["a"], rec["b"], rec["level"]) == (1, "two", "warning")


def test_debug_only_when_enabled(buf):
    exported.debug("hidden")
    assert buf.getvalue() == b""
    exported.set_level(Level.DEBUG)
    exported.debug("shown")
    assert records(buf)[0]["msg"] == "shown"


def test_warning_level_name(buf):
    exported.warning("careful")
    assert records(buf)[0]["level"] == "warning"


def test_infof_formats(buf):
    exported.infof("round %d of %d", 1, 3)
    assert records(buf)[0]["msg"] == "round 1 of 3"


def test_infoln_adds_spaces(buf):
    exported.infoln("test", 10)
    assert records(buf)[0]["msg"] == "test 10"


def test_info_joins_strings_without_spaces(buf):
    exported.info("test", "test")
    assert records(buf)[0]["msg"] == "testtest"


def test_with_time(buf):
    t = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    exported.with_time(t).info("x")
    assert records(buf)[0]["time"] == "2020-01-02T03:04:05Z"


def test_with_error_and_context():
    err = ValueError("boom")
    assert exported.with_error(err).data["error"] is err
    ctx = {"request": "abc"}
    assert exported.with_context(ctx).context is ctx


def test_text_formatter_output(buf):
    exported.set_formatter(TextFormatter(disable_timestamp=True, disable_colors=True))
    exported.info("hello")
    assert buf.getvalue() == b"level=info msg=hello\n"


def test_add_hook_fires(buf):
    hook = RecordingHook()
    exported.add_hook(hook)
    exported.error("bad")
    assert [e.message for e in hook.entries] == ["bad"]
    assert hook.entries[0].level == Level.ERROR


def test_panic_raises(buf):
    with pytest.raises(EntryPanic) as info:
        exported.with_field("k", "v").panic("kaboom")
    assert info.value.entry.message == "kaboom"
    assert records(buf)[0]["level"] == "panic"


def test_panicf_raises(buf):
    with pytest.raises(EntryPanic) as info:
        exported.panicf("kaboom %v", True)
    assert info.value.entry.message == "kaboom true"


def test_fatal_calls_exit(buf):
    codes = []
    exported.standard_logger().exit_func = codes.append
    exported.fatal("bye")
    assert codes == [1]
    assert records(buf)[0]["level"] == "fatal"


def test_set_output_redirects(buf):
    other = io.BytesIO()
    exported.set_output(other)
    exported.info("elsewhere")
    assert buf.getvalue() == b""
    assert json.loads(other.getvalue())["msg"] == "elsewhere"