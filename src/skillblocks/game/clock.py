from __future__ import annotations

import time
from typing import Callable, Optional


Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GravityClock:
    """Periodic down-step trigger polled from the game thread.

    The length of a period is fixed when it starts. An interval passed in while
    a period is running is picked up when the next period starts, so a speed
    change never shortens or stretches the current one. While inactive the
    clock holds no phase: when it becomes active again a full period starts
    from that moment and nothing elapsed during the pause is made up. At most
    one tick is reported per poll.
    """

    def __init__(self) -> None:
        self._last_fire: Optional[float] = None
        self._period: Optional[float] = None

    def reset(self) -> None:
        self._last_fire = None
        self._period = None

    def poll(self, now: float, interval_ms: float, active: bool) -> bool:
        if not active:
            self.reset()
            return False
        if self._last_fire is None or self._period is None:
            self._last_fire = now
            self._period = interval_ms
            return False
        if now - self._last_fire >= self._period:
            self._last_fire = now
            self._period = interval_ms
            return True
        return False

    def time_until_tick(self, now: float) -> Optional[float]:
        if self._last_fire is None or self._period is None:
            return None
        return max(0.0, self._last_fire + self._period - now)
