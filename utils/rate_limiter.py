"""
Fixed Interval Pacer

Throttles a strictly sequential stream of requests by suspending for a
fixed delay before each one, the first included.

Usage:
    pacer = Pacer(delay_seconds=20.0)
    for item in items:
        await pacer.wait()
        await fetch(item)
"""

import asyncio
from typing import Awaitable, Callable

from utils.exceptions import ConfigError
from utils.logging_config import get_logger

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class Pacer:
    """
    Sequential request pacer.

    There is no token bucket and no concurrency: callers await wait()
    before every request, so the delay is the minimum gap between the
    end of one request and the start of the next.
    """

    def __init__(self, delay_seconds: float, sleep: SleepFunc = asyncio.sleep):
        """
        Args:
            delay_seconds: Pause before each request. Zero disables pacing.
            sleep: Coroutine used to suspend; tests pass a recorder.
        """
        if delay_seconds < 0:
            raise ConfigError(f"Pacing delay must be >= 0, got {delay_seconds}")
        self.delay_seconds = float(delay_seconds)
        self._sleep = sleep
        self.calls = 0
        self.total_waited = 0.0

    async def wait(self) -> None:
        """Suspend for the configured delay."""
        self.calls += 1
        if self.delay_seconds:
            logger.debug(f"Pacing request #{self.calls}: sleeping {self.delay_seconds:.1f}s")
        await self._sleep(self.delay_seconds)
        self.total_waited += self.delay_seconds
