import io
import re
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from fieldlog.entry import Entry, Frame
from fieldlog.formatter import FIELD_KEY_LEVEL, FIELD_KEY_MSG, FIELD_KEY_TIME, FieldMap
from fieldlog.levels import Level
from fieldlog.text_formatter import TextFormatter


def _entry(**kwargs):
    return Entry(None, **kwargs)


def _quoted(tf, value):
    out = tf.format(_entry(data={"test": value}))
    idx = out.index(b"test=")
    return b'"' in out[idx + 5:]


def test_formatting():
    tf = TextFormatter(disable_colors=True)
    out = tf.format(_entry(data={"test": "foo"}))
    assert out == b'time="0001-01-01T00:00:00Z" level=panic test=foo\n'


@pytest.mark.parametrize(
    "expected, value",
    [
        (False, ""),
        (False, "abcd"),
        (False, "v1.0"),
        (False, "1234567890"),
        (False, "/foobar"),
        (False, "foo_bar"),
        (False, "foo@bar"),
        (False, "foobar^"),
        (False, "+/-_^@f.oobar"),
        (True, "foo\n\rbar"),
        (True, "foobar$"),
        (True, "&foobar"),
        (True, "x y"),
        (True, "x,y"),
        (False, ValueError("invalid")),
        (True, ValueError("invalid argument")),
    ],
)
def test_quoting_defaults(expected, value):
    assert _quoted(TextFormatter(disable_colors=True), value) is expected


def test_quoting_options():
    tf = TextFormatter(disable_colors=True, quote_empty_fields=True)
    assert _quoted(tf, "") is True
    assert _quoted(tf, "abcd") is False
    assert _quoted(tf, "foo\n\rbar") is True
    assert _quoted(tf, ValueError("invalid argument")) is True

    tf.force_quote = True
    for value in ("", "abcd", "foo\n\rbar", ValueError("invalid argument")):
        assert _quoted(tf, value) is True

    tf.disable_quote = True
    for value in ("", "abcd", "foo\n\rbar", ValueError("invalid argument")):
        assert _quoted(tf, value) is True

    tf.force_quote = False
    tf.quote_empty_fields = False
    for value in ("", "abcd", "foo\n\rbar", ValueError("invalid argument")):
        assert _quoted(tf, value) is False


@pytest.mark.parametrize("value, expected", [('ba"r', b'ba\\"r'), ("ba'r", b"ba'r")])
def test_escaping(value, expected):
    out = TextFormatter(disable_colors=True).format(_entry(data={"test": value}))
    assert expected in out


def test_escaping_interface():
    tf = TextFormatter(disable_colors=True)
    ts = datetime.now()
    cases = [
        (ts, f'"{ts}"'),
        (RuntimeError("error: something went wrong"), '"error: something went wrong"'),
    ]
    for value, expected in cases:
        out = tf.format(_entry(data={"test": value}))
        assert expected.encode() in out


@pytest.mark.parametrize("fmt", ["%Y-%m-%dT%H:%M:%S.%f%z", "%a %b %d %H:%M:%S %Y", ""])
def test_timestamp_format(fmt):
    tf = TextFormatter(disable_colors=True, timestamp_format=fmt)
    moment = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    out = tf.format(_entry(time=moment, data={"test": "test"})).decode()
    stamp = re.search(r'time="([^"]*)"', out).group(1)
    if fmt:
        parsed = datetime.strptime(stamp, fmt)
    else:
        parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    assert parsed.replace(tzinfo=None) == moment.replace(tzinfo=None)


@pytest.mark.parametrize(
    "disabled, level",
    [(True, Level.DEBUG), (True, Level.INFO), (False, Level.ERROR), (False, Level.INFO)],
)
def test_disable_level_truncation(disabled, level):
    tf = TextFormatter(force_colors=True, disable_level_truncation=disabled)
    entry = _entry(time=datetime.now().astimezone(), message="testing", level=level)
    line = tf.format(entry).decode()
    expected = str(level).upper()
    if disabled or len(expected) <= 4:
        assert expected in line
    else:
        assert expected not in line
        assert expected[:4] in line


@pytest.mark.parametrize(
    "level, padded",
    [
        (Level.PANIC, "PANIC  "),
        (Level.FATAL, "FATAL  "),
        (Level.ERROR, "ERROR  "),
        (Level.WARN, ""),
        (Level.DEBUG, "DEBUG  "),
        (Level.TRACE, "TRACE  "),
        (Level.INFO, "INFO   "),
    ],
)
def test_pad_level_text(level, padded):
    default_line = TextFormatter(force_colors=True).format(_entry(level=level)).decode()
    padded_line = (
        TextFormatter(force_colors=True, pad_level_text=True)
        .format(_entry(level=level))
        .decode()
    )
    assert str(level) in padded_line.lower()
    if padded:
        assert padded not in default_line
        assert padded in padded_line


def test_disable_timestamp_with_colored_output():
    tf = TextFormatter(disable_timestamp=True, force_colors=True)
    out = tf.format(_entry(data={"test": "test"}))
    assert b"[0000]" not in out
    assert b"test" in out


def test_newline_behavior():
    tf = TextFormatter(force_colors=True)
    out = tf.format(_entry(message="test message\n"))
    assert b"test message\n" not in out

    out = tf.format(_entry(message="test message\n\n"))
    assert b"test message\n\n" not in out
    assert b"test message\n" in out


def test_field_map():
    formatter = TextFormatter(
        disable_colors=True,
        field_map=FieldMap(
            {
                FIELD_KEY_MSG: "message",
                FIELD_KEY_LEVEL: "somelevel",
                FIELD_KEY_TIME: "timeywimey",
            }
        ),
    )
    entry = _entry(
        message="oh hi",
        level=Level.WARN,
        time=datetime(1981, 2, 24, 4, 28, 3, tzinfo=timezone.utc),
        data={
            "field1": "f1",
            "message": "messagefield",
            "somelevel": "levelfield",
            "timeywimey": "timeywimeyfield",
        },
    )
    assert formatter.format(entry) == (
        b'timeywimey="1981-02-24T04:28:03Z" '
        b"somelevel=warning "
        b'message="oh hi" '
        b"field1=f1 "
        b"fields.message=messagefield "
        b"fields.somelevel=levelfield "
        b"fields.timeywimey=timeywimeyfield\n"
    )


# expected, terminal, disable, force, env override, CLICOLOR, CLICOLOR_FORCE
_COLOR_CASES = [
    (False, False, False, False, False, None, None),
    (True, True, False, False, False, None, None),
    (False, True, True, False, False, None, None),
    (False, False, True, False, False, None, None),
    (True, False, False, True, False, None, None),
    (False, True, False, False, True, "0", None),
    (True, True, False, False, True, "1", None),
    (False, False, False, False, True, "0", None),
    (False, False, False, False, True, "1", None),
    (True, False, False, True, True, "1", None),
    (False, False, False, True, True, "0", None),
    (True, False, False, False, True, None, "1"),
    (False, False, False, False, True, None, "0"),
    (False, True, False, False, True, None, "0"),
]


@pytest.mark.parametrize(
    "expected, terminal, disable, force, env, clicolor, clicolor_force", _COLOR_CASES
)
def test_is_colored(monkeypatch, expected, terminal, disable, force, env, clicolor, clicolor_force):
    monkeypatch.delenv("CLICOLOR", raising=False)
    monkeypatch.delenv("CLICOLOR_FORCE", raising=False)
    if clicolor is not None:
        monkeypatch.setenv("CLICOLOR", clicolor)
    if clicolor_force is not None:
        monkeypatch.setenv("CLICOLOR_FORCE", clicolor_force)
    tf = TextFormatter(
        disable_colors=disable, force_colors=force, environment_override_colors=env
    )
    tf._is_terminal = terminal
    import os

    if os.name == "nt" and not force and clicolor_force is None:
        expected = False
    assert tf.is_colored() is expected


def test_custom_sorting():
    formatter = TextFormatter(
        disable_colors=True,
        sorting_func=lambda keys: keys.sort(key=lambda k: (k != "prefix", k)),
    )
    entry = _entry(
        message="Testing custom sort function",
        time=datetime.now().astimezone(),
        level=Level.INFO,
        data={
            "test": "testvalue",
            "prefix": "the application prefix",
            "blablabla": "blablabla",
        },
    )
    assert formatter.format(entry).startswith(b"prefix=")


def test_disable_sorting_keeps_insertion_order():
    tf = TextFormatter(disable_colors=True, disable_timestamp=True, disable_sorting=True)
    out = tf.format(_entry(level=Level.INFO, data={"b": 1, "a": 2}))
    assert out == b"level=info b=1 a=2\n"


def test_field_error_is_reported():
    tf = TextFormatter(disable_colors=True, disable_timestamp=True)
    out = tf.format(_entry(level=Level.INFO, field_error='can not add field "f"'))
    assert out == b'level=info fieldlog_error="can not add field \\"f\\""\n'


def test_caller_prettyfier():
    logger = SimpleNamespace(report_caller=True, out=io.BytesIO())
    tf = TextFormatter(
        disable_colors=True,
        caller_prettyfier=lambda frame: ("somekindoffunc", "thisisafilename"),
    )
    entry = Entry(
        logger,
        level=Level.INFO,
        message="testWithCallerPrettyfier",
        caller=Frame("pkg.fn", "x.py", 3),
    )
    out = tf.format(entry).decode()
    assert "func=somekindoffunc" in out
    assert "file=thisisafilename" in out


def test_writes_into_entry_buffer():
    tf = TextFormatter(disable_colors=True, disable_timestamp=True)
    entry = _entry(level=Level.INFO, message="hi")
    entry.buffer = io.BytesIO()
    out = tf.format(entry)
    assert out == b"level=info msg=hi\n"
    assert entry.buffer.getvalue() == out