"""Formatter that renders entries as one JSON object per line."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
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
from .levels import Level, level_name

_HTML_ESCAPES = (("&", "\\u0026"), ("<", "\\u003c"), (">", "\\u003e"))
_LINE_ESCAPES = (("\u2028", "\\u2028"), ("\u2029", "\\u2029"))


def _encode_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"unsupported type: {type(value).__name__}")


def _plain(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, Level):
        return str(value)
    return value


@dataclass
class JSONFormatter(Formatter):
    """Renders entries as JSON objects with sorted keys, one per line."""

    timestamp_format: str = ""
    disable_timestamp: bool = False
    disable_html_escape: bool = False
    data_key: str = ""
    field_map: FieldMap = field(default_factory=FieldMap)
    caller_prettyfier: Callable[[Frame], tuple[str, str]] | None = None
    pretty_print: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.field_map, FieldMap):
            self.field_map = FieldMap(self.field_map or {})

    def format(self, entry: Any) -> bytes:
        """Render ``entry``; raise ValueError if its fields cannot be encoded."""
        fm = self.field_map
        data: dict[str, Any] = {k: _plain(v) for k, v in entry.data.items()}
        if self.data_key:
            data = {self.data_key: data}

        has_caller = entry.has_caller()
        prefix_field_clashes(data, fm, has_caller)

        if entry.field_error:
            data[fm.resolve(FIELD_KEY_ERROR)] = entry.field_error
        if not self.disable_timestamp:
            data[fm.resolve(FIELD_KEY_TIME)] = format_time(
                entry.time, self.timestamp_format
            )
        data[fm.resolve(FIELD_KEY_MSG)] = entry.message
        data[fm.resolve(FIELD_KEY_LEVEL)] = level_name(entry.level)

        if has_caller:
            caller = entry.caller
            func_val = caller.function
            file_val = f"{caller.file}:{caller.line}"
            if self.caller_prettyfier is not None:
                func_val, file_val = self.caller_prettyfier(caller)
            if func_val:
                data[fm.resolve(FIELD_KEY_FUNC)] = func_val
            if file_val:
                data[fm.resolve(FIELD_KEY_FILE)] = file_val

        try:
            text = json.dumps(
                data,
                sort_keys=True,
                ensure_ascii=False,
                allow_nan=False,
                default=_encode_default,
                indent=2 if self.pretty_print else None,
                separators=(",", ": ") if self.pretty_print else (",", ":"),
            )
        except (TypeError, ValueError) as err:
            raise ValueError(f"failed to marshal fields to JSON, {err}") from err

        escapes = _LINE_ESCAPES if self.disable_html_escape else _HTML_ESCAPES + _LINE_ESCAPES
        for raw, escaped in escapes:
            text = text.replace(raw, escaped)

        encoded = (text + "\n").encode("utf-8")
        if entry.buffer is not None:
            entry.buffer.write(encoded)
            return entry.buffer.getvalue()
        return encoded