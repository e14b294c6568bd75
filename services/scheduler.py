"""Periodic asyncio ticker driving the simulator."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTicker:
    """Call ``callback`` every ``interval`` seconds on the running event loop.

    ``stop`` cancels the loop and waits for it to finish. Once stopped the
    callback is never invoked again.
    """

    def __init__(self, callback: Callable[[], object], interval: float) -> None:
        if interval <= 0:
            raise ValueError("Ticker interval must be positive.")
        self.callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task[None]] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._stopped:
            raise RuntimeError("A stopped ticker cannot be restarted.")
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        self._stopped = True
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self._stopped:
                return
            try:
                self.callback()
            except Exception:  # noqa: BLE001 - keep ticking after a bad tick
                logger.exception("Periodic tick failed")
