"""Spacing of outgoing GW2 API requests.

A map change triggers several lookups at once (map, world names, points of
interest), so requests to one API are spread out by a minimum delay.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Spaces requests to one API by ``min_delay_seconds``."""

    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(
        self,
        api_name: str,
        min_delay_seconds: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._clock = clock
        self._next_slot: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def get_instance(cls, api_name: str, min_delay_seconds: float = 0.1) -> ApiRateLimiter:
        """Limiter shared by every client of ``api_name``; the first delay wins."""
        limiter = cls._instances.get(api_name)
        if limiter is None:
            limiter = cls._instances[api_name] = cls(api_name, min_delay_seconds)
            logger.debug(f"Spacing {api_name} requests by {min_delay_seconds}s")
        return limiter

    async def acquire(self) -> None:
        """Wait for the next free request slot."""
        async with self._lock:
            if self._next_slot is not None:
                delay = self._next_slot - self._clock()
                if delay > 0:
                    logger.debug(f"{self.api_name}: delaying request by {delay:.2f}s")
                    await asyncio.sleep(delay)
            self._next_slot = self._clock() + self.min_delay_seconds

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None
