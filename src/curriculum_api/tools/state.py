from __future__ import annotations

import time
from typing import Callable, Optional


class ServerState:
    """Readiness flag and start time, handed to whatever serves requests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._ready = False
        self._started_at: Optional[float] = None

    @property
    def started_at(self) -> Optional[float]:
        return self._started_at

    def mark_ready(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()
        self._ready = True

    def mark_not_ready(self) -> None:
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    def uptime_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return int(self._clock() - self._started_at)
