"""Hooks fired for log entries at chosen levels."""

from __future__ import annotations

import abc
from typing import Any, Iterable

from .levels import Level


class HookError(Exception):
    """Raised by a hook to report that firing it failed."""


class Hook(abc.ABC):
    """Something to run for every entry logged at one of ``levels()``.

    Hooks run synchronously; a hook reports failure by raising HookError.
    """

    @abc.abstractmethod
    def levels(self) -> Iterable[Level]:
        """Return the levels this hook fires on."""

    @abc.abstractmethod
    def fire(self, entry: Any) -> None:
        """Handle one entry."""


class LevelHooks(dict):
    """Hooks of a logger, keyed by level, in the order they were added."""

    def add(self, hook: Hook) -> None:
        """Register ``hook`` under every level it reports."""
        for level in hook.levels():
            self.setdefault(level, []).append(hook)

    def fire(self, level: Level, entry: Any) -> None:
        """Fire the hooks for ``level`` in order; the first failure propagates."""
        for hook in self.get(level, ()):
            hook.fire(entry)