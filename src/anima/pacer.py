"""Artificial delay before each result line, to keep streamed output watchable."""

from __future__ import annotations

import time

DEFAULT_PACE_MS = 0


class Pacer:
    def __init__(self, pace_ms: int = DEFAULT_PACE_MS):
        self.pace_ms = pace_ms

    @property
    def pace_ms(self) -> int:
        return self._pace_ms

    @pace_ms.setter
    def pace_ms(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"pace_ms must be >= 0, got {value}")
        self._pace_ms = value

    def wait(self) -> None:
        """Sleep for the full configured delay. Not cancellable."""
        if self._pace_ms > 0:
            time.sleep(self._pace_ms / 1000)
