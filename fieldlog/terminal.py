"""Detection of whether an output stream is attached to a terminal."""

from __future__ import annotations

import os
from typing import Any


def is_terminal(stream: Any) -> bool:
    """Return True if ``stream`` is backed by a file descriptor of a terminal.

    Streams without a usable file descriptor, such as in-memory buffers,
    are never terminals.
    """
    fileno = getattr(stream, "fileno", None)
    if fileno is None:
        return False
    try:
        fd = fileno()
    except (OSError, ValueError):
        return False
    try:
        return os.isatty(fd)
    except OSError:
        return False