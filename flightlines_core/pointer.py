from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable


@dataclass
class PointerThrottle:
    """Drops pointer updates that arrive sooner than `min_interval_s` after the last accepted one."""

    min_interval_s: float = 0.016
    clock: Callable[[], float] = time.monotonic
    _last_accepted_at: float | None = None

    def __post_init__(self) -> None:
        if self.min_interval_s < 0:
            raise ValueError("min_interval_s must be >= 0")

    def accept(self, now: float | None = None) -> bool:
        if now is None:
            now = self.clock()
        if self._last_accepted_at is not None and now - self._last_accepted_at < self.min_interval_s:
            return False
        self._last_accepted_at = now
        return True

    def reset(self) -> None:
        self._last_accepted_at = None
