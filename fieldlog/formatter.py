"""Formatter interface, default field names and shared formatting helpers."""

from __future__ import annotations

import abc
from datetime import datetime, timezone
from typing import Any, MutableMapping

FIELD_KEY_MSG = "msg"
FIELD_KEY_LEVEL = "level"
FIELD_KEY_TIME = "time"
FIELD_KEY_ERROR = "fieldlog_error"
FIELD_KEY_FUNC = "func"
FIELD_KEY_FILE = "file"


class Formatter(abc.ABC):
    """Turns an entry into the bytes written to a logger's output."""

    @abc.abstractmethod
    def format(self, entry: Any) -> bytes:
        """Render one entry."""


class FieldMap(dict):
    """Renames of the default field keys."""

    def resolve(self, key: str) -> str:
        """Return the name used for ``key``."""
        return self.get(key, key)


def format_time(t: datetime, fmt: str | None = None) -> str:
    """Format ``t`` with a strftime pattern, or as RFC 3339 when ``fmt`` is empty."""
    if t.tzinfo is None:
        try:
            t = t.astimezone()
        except (OverflowError, ValueError, OSError):
            t = t.replace(tzinfo=timezone.utc)
    if fmt:
        return t.strftime(fmt)
    stamp = (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d}"
        f"T{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    )
    offset = t.utcoffset()
    seconds = int(offset.total_seconds()) if offset is not None else 0
    if seconds == 0:
        return stamp + "Z"
    sign = "+" if seconds > 0 else "-"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{stamp}{sign}{hours:02d}:{minutes:02d}"


def prefix_field_clashes(
    data: MutableMapping[str, Any],
    field_map: FieldMap | None,
    report_caller: bool,
) -> None:
    """Move user fields that clash with default keys to ``fields.<key>``, in place."""
    fm = field_map if field_map is not None else FieldMap()
    for key in (FIELD_KEY_TIME, FIELD_KEY_MSG, FIELD_KEY_LEVEL, FIELD_KEY_ERROR):
        resolved = fm.resolve(key)
        if resolved in data:
            data["fields." + resolved] = data.pop(resolved)

    # Without caller reporting, 'func' and 'file' cannot clash.
    if report_caller:
        for key in (FIELD_KEY_FUNC, FIELD_KEY_FILE):
            resolved = fm.resolve(key)
            if resolved in data:
                data["fields." + resolved] = data[resolved]