"""Pacing primitive spacing consecutive transport sends."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

# Minimum gap between two sends within one dispatch
DEFAULT_MIN_INTERVAL_SECONDS = 0.1


class RateLimiter:
    """Enforces a minimum interval between consecutive sends.

    The limiter never rejects a caller, it only delays it. The first
    acquisition proceeds immediately; each later one waits until the
    configured interval has elapsed since the previous release.

    Example:
        ```python
        limiter = RateLimiter(min_interval_seconds=0.1)
        for recipient in recipients:
            async with limiter.throttle():
                await transport.send(recipient.address, body)
        ```
    """

    def __init__(
        self,
        min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            min_interval_seconds: Minimum gap between the end of one send
                and the start of the next. Zero disables pacing.
            clock: Monotonic time source in seconds. Defaults to the running
                event loop's clock.
            sleep: Coroutine used to wait.
        """
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        self.min_interval_seconds = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_release: float | None = None
        self._lock = asyncio.Lock()

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    def _remaining_wait(self) -> float:
        if self._last_release is None:
            return 0.0
        elapsed = self._now() - self._last_release
        return max(0.0, self.min_interval_seconds - elapsed)

    @asynccontextmanager
    async def throttle(self) -> AsyncIterator[None]:
        """Hold the send slot, waiting out the interval first if needed."""
        async with self._lock:
            wait_time = self._remaining_wait()
            if wait_time > 0:
                logger.debug(f"Pacing transport, waiting {wait_time:.3f}s")
                await self._sleep(wait_time)
            try:
                yield
            finally:
                self._last_release = self._now()
