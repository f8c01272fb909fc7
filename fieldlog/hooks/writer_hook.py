"""Hook that writes formatted entries of chosen levels to a stream."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any

from ..hook import Hook, HookError
from ..levels import Level


@dataclass
class WriterHook(Hook):
    """Writes each entry logged at one of ``log_levels`` to ``writer``."""

    writer: Any
    log_levels: list[Level] = field(default_factory=list)

    def fire(self, entry: Any) -> None:
        """Format ``entry`` with its logger's formatter and write it out."""
        try:
            line = entry.to_bytes()
            if isinstance(self.writer, io.TextIOBase):
                self.writer.write(line.decode("utf-8", errors="replace"))
            else:
                self.writer.write(line)
        except (OSError, ValueError, TypeError) as err:
            raise HookError(str(err)) from err

    def levels(self) -> list[Level]:
        """Return the levels this hook fires on."""
        return list(self.log_levels)