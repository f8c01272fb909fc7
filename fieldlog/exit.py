"""Handlers run before the program exits on a fatal log entry."""

from __future__ import annotations

import sys
from typing import Callable

_handlers: list[Callable[[], None]] = []


def _run_handler(handler: Callable[[], None]) -> None:
    try:
        handler()
    except Exception as err:  # a failing handler must not stop the others
        print("Error: exit handler error:", err, file=sys.stderr)


def run_handlers() -> None:
    """Run every registered exit handler in order, reporting failures to stderr."""
    for handler in list(_handlers):
        _run_handler(handler)


def exit_program(code: int) -> None:
    """Run all exit handlers, then terminate with ``code``."""
    run_handlers()
    sys.exit(code)


def register_exit_handler(handler: Callable[[], None]) -> None:
    """Append a handler to run on exit or on a fatal log entry."""
    _handlers.append(handler)


def defer_exit_handler(handler: Callable[[], None]) -> None:
    """Prepend a handler to run on exit or on a fatal log entry."""
    _handlers.insert(0, handler)