"""Repeating asyncio timer with synchronous cancellation."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import inspect
import logging

LOGGER = logging.getLogger(__name__)


class IntervalTimer:
    """Fire ``callback`` every ``interval`` seconds until stopped.

    Coroutine results are spawned as their own tasks, so a slow callback
    never delays the next tick. ``stop()`` cancels the sleeping task
    before returning; no tick can fire after it.
    """

    def __init__(self, interval: float, callback: Callable[[], object], name: str = "timer"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._task: asyncio.Task | None = None
        self._spawned: set[asyncio.Task] = set()

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"{self.name}-timer")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def close(self) -> None:
        self.stop()
        pending = list(self._spawned)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.fire()

    def fire(self) -> None:
        try:
            result = self.callback()
        except Exception:  # noqa: BLE001
            LOGGER.exception("%s callback failed", self.name)
            return
        if inspect.isawaitable(result):
            self.spawn(result)

    def spawn(self, awaitable) -> asyncio.Task:
        task = asyncio.ensure_future(awaitable)
        self._spawned.add(task)
        task.add_done_callback(self._reap)
        return task

    def _reap(self, task: asyncio.Task) -> None:
        self._spawned.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("%s callback task failed", self.name, exc_info=exc)
