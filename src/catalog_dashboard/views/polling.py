"""Cancellable periodic task bound to a view's lifetime."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]
Clock = Callable[[], float]


class PeriodicTask:
    """Run ``callback`` now and then every ``interval`` seconds until stopped.

    Runs are scheduled against fixed deadlines, so a slow callback does not
    push later runs back. A callback that overruns a whole interval starts the
    next run immediately instead of bursting through the missed ones.
    ``sleep`` and ``clock`` are injectable so tests can advance time by hand.
    Exceptions from the callback are logged and do not end the loop.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        sleep: Sleep = asyncio.sleep,
        clock: Optional[Clock] = None,
        name: str = "periodic-task",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.name = name
        self._sleep = sleep
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.debug("Started %s every %.1fs", self.name, self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Stopped %s", self.name)

    async def _run(self) -> None:
        clock = self._clock or asyncio.get_running_loop().time
        next_due = clock()
        while True:
            try:
                await self.callback()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s callback failed", self.name)
            next_due += self.interval
            now = clock()
            if next_due <= now:
                next_due = now
                await asyncio.sleep(0)
            else:
                await self._sleep(next_due - now)
