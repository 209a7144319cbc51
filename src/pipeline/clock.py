"""
Display-refresh clock for the detection loop.
"""

from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable


class RefreshClock:
    """
    Waits for the next display refresh boundary.

    Boundaries sit on a fixed grid of 1/refresh_hz seconds. A caller that
    took longer than one interval simply waits for the next boundary after
    "now", so boundaries that passed during a slow tick are skipped rather
    than queued.
    """

    def __init__(
        self,
        refresh_hz: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if refresh_hz <= 0:
            raise ValueError("refresh_hz must be positive")
        self.interval = 1.0 / refresh_hz
        self._clock = clock
        self._sleep = sleep

    async def next_refresh(self) -> float:
        """Sleep until the next boundary and return its timestamp."""
        now = self._clock()
        boundary = (math.floor(now / self.interval) + 1) * self.interval
        await self._sleep(boundary - now)
        return boundary
