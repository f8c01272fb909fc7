"""A writable stream that logs each line written to it."""

from __future__ import annotations

import threading
from typing import Any, Callable

from .levels import Level

_CHUNK_SIZE = 64 * 1024

_METHOD_FOR_LEVEL = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warn",
    Level.ERROR: "error",
    Level.FATAL: "fatal",
    Level.PANIC: "panic",
}


def _decode(token: bytes) -> str:
    return token.decode("utf-8", errors="replace").rstrip("\r\n")


class LogWriter:
    """Stream whose lines are logged through an entry at a fixed level.

    Lines longer than 64 KiB are split into chunks of that size. Text left
    without a trailing newline is logged when the writer is closed.
    """

    def __init__(self, entry: Any, level: Level) -> None:
        method = _METHOD_FOR_LEVEL.get(level, "print")
        self._emit: Callable[..., None] = getattr(entry, method)
        self._pending = bytearray()
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return True

    def write(self, data: bytes | str) -> int:
        """Buffer ``data`` and log every complete line; return its length."""
        if self._closed:
            raise ValueError("write to closed LogWriter")
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with self._lock:
            self._pending += raw
            for line in self._drain():
                self._emit(line)
        return len(data)

    def flush(self) -> None:
        """Check the writer is open; complete lines are already logged."""
        if self._closed:
            raise ValueError("flush of closed LogWriter")

    def _drain(self):
        while True:
            newline = self._pending.find(b"\n", 0, _CHUNK_SIZE)
            if newline >= 0:
                token = bytes(self._pending[:newline])
                del self._pending[: newline + 1]
            elif len(self._pending) >= _CHUNK_SIZE:
                token = bytes(self._pending[:_CHUNK_SIZE])
                del self._pending[:_CHUNK_SIZE]
            else:
                return
            yield _decode(token)

    def close(self) -> None:
        """Log any unterminated text and refuse further writes."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._pending:
                token = bytes(self._pending)
                self._pending.clear()
                self._emit(_decode(token))

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()