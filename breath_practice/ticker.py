"""
Breath Practice - Periodic tick scheduler
"""

import asyncio
import logging
from typing import Callable, Optional

from .constants import TICK_INTERVAL

logger = logging.getLogger(__name__)


class Ticker:
    """
    Cancellable fixed-rate callback on the running asyncio loop

    The callback receives the nominal interval as its delta. A late wake-up
    is not compensated for: a slow loop simply advances the session less.

    start() is idempotent. stop() is synchronous; once it returns the
    callback will not run again, even if a wake-up was already due.

    Usage:
        ticker = Ticker(session.advance)
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(self, callback: Callable[[float], object], interval: float = TICK_INTERVAL):
        """
        Initialize ticker

        Args:
            callback: Called with the interval (seconds) on every tick
            interval: Seconds between ticks
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._callback = callback
        self._interval = interval
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """
        Begin ticking on the running event loop

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(self._generation))

    def stop(self) -> None:
        """Stop ticking; safe to call from inside the callback"""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None:
            task.cancel()

    async def _run(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if generation != self._generation:
                return
            try:
                self._callback(self._interval)
            except Exception:
                logger.exception("Tick callback failed; stopping ticker")
                if generation == self._generation:
                    self.stop()
                return
