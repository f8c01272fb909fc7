"""Reusable byte buffers for formatting log entries."""

from __future__ import annotations

import abc
import io
import threading


class BufferPool(abc.ABC):
    """Source of byte buffers that formatting borrows and gives back."""

    @abc.abstractmethod
    def get(self) -> io.BytesIO:
        """Borrow a buffer."""

    @abc.abstractmethod
    def put(self, buf: io.BytesIO) -> None:
        """Give a buffer back for reuse."""


class DefaultBufferPool(BufferPool):
    """Thread-safe free list of BytesIO buffers."""

    def __init__(self) -> None:
        self._free: list[io.BytesIO] = []
        self._lock = threading.Lock()

    def get(self) -> io.BytesIO:
        with self._lock:
            buf = self._free.pop() if self._free else None
        if buf is None:
            return io.BytesIO()
        buf.seek(0)
        buf.truncate()
        return buf

    def put(self, buf: io.BytesIO) -> None:
        with self._lock:
            self._free.append(buf)


_state: dict[str, BufferPool] = {"pool": DefaultBufferPool()}
_state_lock = threading.Lock()


def set_buffer_pool(pool: BufferPool) -> None:
    """Replace the process-wide buffer pool.

    Raises TypeError if ``pool`` does not offer callable ``get`` and ``put``.
    """
    if not (
        callable(getattr(pool, "get", None)) and callable(getattr(pool, "put", None))
    ):
        raise TypeError(f"not a buffer pool: {pool!r}")
    with _state_lock:
        _state["pool"] = pool


def get_buffer_pool() -> BufferPool:
    """Return the process-wide buffer pool."""
    with _state_lock:
        return _state["pool"]