"""Per-request deadline shared by every I/O step.

One ``Deadline`` is created when a request arrives; cache reads, upstream
fetches and cache writes all draw from the same budget instead of each
getting a fresh timeout.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from .errors import DeadlineExceededError

T = TypeVar("T")

# Event-loop timers may fire marginally before the monotonic budget runs out.
_CLOCK_SLACK_SECONDS = 0.05


class Deadline:
    """Monotonic wall-clock budget for one request."""

    def __init__(
        self,
        budget_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if budget_seconds <= 0:
            raise ValueError(f"budget_seconds must be > 0, got {budget_seconds}")
        self._clock = clock
        self._budget = budget_seconds
        self._started_at = clock()

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self._budget - (self._clock() - self._started_at))

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable*, abandoning it when the deadline elapses.

        Raises:
            DeadlineExceededError: The budget ran out before or during the call.
        """
        remaining = self.remaining()
        if remaining <= 0:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise DeadlineExceededError(
                f"Deadline of {self._budget:.1f}s exceeded"
            )
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError:
            # A timeout raised by the inner call itself is not ours to rename.
            if self.remaining() > _CLOCK_SLACK_SECONDS:
                raise
            raise DeadlineExceededError(
                f"Deadline of {self._budget:.1f}s exceeded"
            ) from None
