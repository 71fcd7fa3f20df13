"""
Rate limiting for outbound LLM calls.

A RateLimiter is created once and handed to a provider at construction so
that throttling state lives in an explicit object rather than in module
globals.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Enforce a minimum interval between successive calls.

    Callers await ``acquire()`` before each request; concurrent callers are
    serialized by an asyncio lock so the interval holds across tasks.
    """

    def __init__(
        self,
        min_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            if self._last_call is not None:
                wait = self._last_call + self.min_interval_seconds - self._clock()
                if wait > 0:
                    logger.debug(f"Rate limiter sleeping {wait:.2f}s")
                    await self._sleep(wait)
            self._last_call = self._clock()

    def __repr__(self) -> str:
        return f"<RateLimiter min_interval={self.min_interval_seconds}s>"
