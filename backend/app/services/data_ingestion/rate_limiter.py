"""
Outbound Request Rate Limiter

One instance is shared by every in-flight request to a provider so that
requests leave the process at least `min_interval_ms` apart.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Minimum-spacing limiter.

    `reserve()` reads the last request time, sleeps the remaining gap and
    records the new time while holding a lock, so two callers can never
    observe the same stale timestamp.
    """

    def __init__(
        self,
        min_interval_ms: int = 2000,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._min_interval = min_interval_ms / 1000
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def min_interval(self) -> float:
        """Minimum spacing in seconds."""
        return self._min_interval

    @property
    def last_request(self) -> Optional[float]:
        return self._last_request

    async def reserve(self) -> float:
        """
        Wait for the next free slot and claim it.

        Returns:
            Seconds spent waiting (0.0 when the slot was already free)
        """
        # Lazily bound to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            waited = 0.0
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self._min_interval:
                    waited = self._min_interval - elapsed
                    logger.debug(f"Rate limit: waiting {waited:.2f}s before next request")
                    await self._sleep(waited)
            self._last_request = self._clock()
            return waited
