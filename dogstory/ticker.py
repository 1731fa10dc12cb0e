"""Periodic timer that reports the time elapsed between ticks."""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from typing import Callable, Optional, Union

Handler = Callable[[timedelta], None]


class Ticker:
    """Calls ``handler(delta)`` on the running event loop every ``period``.

    ``period`` is a timedelta or a number of milliseconds; ``delta`` is the
    real time since the previous tick, truncated to whole milliseconds.
    """

    def __init__(self, period: Union[timedelta, float], handler: Handler) -> None:
        if isinstance(period, timedelta):
            self._period = period.total_seconds()
        else:
            self._period = float(period) / 1000.0
        if self._period < 0:
            raise ValueError("Ticker period must not be negative")
        self._handler = handler
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._last_tick = 0.0

    def start(self) -> None:
        """Begin ticking on the running event loop."""
        if self._task is not None and not self._task.done():
            raise RuntimeError("Ticker is already running")
        self._running = True
        self._last_tick = time.monotonic()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Stop ticking; the handler is not called again."""
        self._running = False
        if self._task is not None:
            self._task.cancel()

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self._period)
            now = time.monotonic()
            delta = timedelta(milliseconds=int((now - self._last_tick) * 1000))
            self._last_tick = now
            self._handler(delta)