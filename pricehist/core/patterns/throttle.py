"""Sliding window admission gate for provider calls."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Callable
from types import TracebackType

from pricehist.core.exceptions import ConfigurationError
from pricehist.core.logging import get_logger

logger = get_logger(__name__)


class Throttle:
    """Admits at most ``max_events_per_window`` events per ``window`` seconds.

    ``add`` never expires events itself; a :class:`ThrottleCleaner` (or an
    explicit ``clean`` call) is what makes room for waiting callers.
    """

    def __init__(
        self,
        max_events_per_window: int,
        window: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_events_per_window < 1:
            raise ConfigurationError(
                "Throttle must admit at least one event per window",
                validation_errors={"max_events_per_window": max_events_per_window},
            )
        if window <= 0:
            raise ConfigurationError("Throttle window must be positive", validation_errors={"window": window})

        self.max_events_per_window = max_events_per_window
        self.window = window
        self._clock = clock
        self._events: deque[float] = deque()
        self._condition = asyncio.Condition()

    @property
    def admitted(self) -> int:
        """Number of events still inside the window."""
        return len(self._events)

    async def add(self) -> None:
        """Record one admission, waiting while the window is full."""
        async with self._condition:
            await self._condition.wait_for(lambda: len(self._events) < self.max_events_per_window)
            self._events.append(self._clock())

    async def clean(self) -> int:
        """Discard events older than the window and wake waiting callers."""
        async with self._condition:
            expired_before = self._clock() - self.window
            removed = 0
            while self._events and self._events[0] <= expired_before:
                self._events.popleft()
                removed += 1
            if removed:
                self._condition.notify_all()
            return removed


class ThrottleCleaner:
    """Runs :meth:`Throttle.clean` every ``interval`` seconds on a background task."""

    def __init__(self, throttle: Throttle, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ConfigurationError(
                "Throttle clean interval must be positive", validation_errors={"interval": interval}
            )
        self.throttle = throttle
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="throttle-cleaner")

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.wait([task])

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            removed = await self.throttle.clean()
            if removed:
                logger.debug("Throttle window cleaned", removed=removed)

    async def __aenter__(self) -> ThrottleCleaner:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()


__all__ = ["Throttle", "ThrottleCleaner"]
