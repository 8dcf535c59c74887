"""
Sliding-window rate limiting for outgoing calls.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque

logger = logging.getLogger(__name__)

UNLIMITED = 0


class Throttle:
    """
    At most ``limit`` calls per ``period`` seconds.

    Shared by every worker of a run; ``run_or_pause()`` is awaited before
    each call and sleeps until the oldest call in the window expires when
    the window is full.

    Example:
        throttle = Throttle(limit=300, period=60.0)
        await throttle.run_or_pause()
    """

    def __init__(self, limit: int = UNLIMITED, period: float = 1.0):
        self.limit = limit
        self.period = period
        self._calls: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def is_unlimited(self) -> bool:
        return self.limit == UNLIMITED

    @property
    def calls_in_window(self) -> int:
        return len(self._calls)

    def _clean_old(self, now: float) -> None:
        while self._calls and now - self._calls[0] > self.period:
            self._calls.popleft()

    async def run_or_pause(self) -> None:
        if self.is_unlimited:
            return

        async with self._lock:
            now = time.monotonic()
            self._clean_old(now)

            if len(self._calls) >= self.limit:
                remaining = self.period - (now - self._calls[0])
                if remaining > 0:
                    logger.debug(f"Throttle limit of {self.limit} reached, pausing {remaining:.3f}s")
                    await asyncio.sleep(remaining)
                self._calls.popleft()

            self._calls.append(time.monotonic())
