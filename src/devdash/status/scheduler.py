"""Periodic cadences and in-flight coalescing for poll cycles."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from contextlib import suppress
from typing import Any, Dict, Generic, Optional, TypeVar

from ..util.log import Log

log = Log.create({"service": "status.scheduler"})

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


class Coalescer(Generic[K]):
    """At most one running task per key. Callers arriving while it runs share its result."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: Dict[K, asyncio.Task[Any]] = {}

    def busy(self, key: K) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(self, key: K, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None or task.done():
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        # cancelling one caller leaves the shared task running
        return await asyncio.shield(task)

    async def settle(self, key: K) -> None:
        """Wait for the running task of ``key``, if any."""
        task = self._tasks.get(key)
        if task is not None and not task.done():
            with suppress(Exception):
                await asyncio.shield(task)

    async def cancel_all(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, key: K, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]


class PeriodicTask:
    """Runs ``fn`` every ``interval`` seconds until stopped.

    Ticks are fixed-rate: the next tick is not delayed by a slow cycle. A tick
    that fires while the previous cycle is still running is skipped.
    """

    __slots__ = ("name", "interval", "immediate", "_fn", "_loop", "_cycle")

    def __init__(
        self,
        name: str,
        interval: float,
        fn: Callable[[], Awaitable[Any]],
        *,
        immediate: bool = True,
    ) -> None:
        self.name = name
        self.interval = interval
        self.immediate = immediate
        self._fn = fn
        self._loop: Optional[asyncio.Task[None]] = None
        self._cycle: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._loop is not None and not self._loop.done()

    def start(self) -> None:
        if self.running:
            return
        self._loop = asyncio.create_task(self._run(), name=f"devdash.{self.name}")
        log.info("cadence started", {"task": self.name, "interval": self.interval})

    async def stop(self) -> None:
        tasks = [task for task in (self._loop, self._cycle) if task is not None]
        self._loop = None
        self._cycle = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            log.info("cadence stopped", {"task": self.name})

    async def _run(self) -> None:
        if not self.immediate:
            await asyncio.sleep(self.interval)
        while True:
            self._tick()
            await asyncio.sleep(self.interval)

    def _tick(self) -> None:
        if self._cycle is not None and not self._cycle.done():
            log.debug("tick skipped, cycle still running", {"task": self.name})
            return
        self._cycle = asyncio.create_task(self._guarded())

    async def _guarded(self) -> None:
        try:
            await self._fn()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.error("periodic cycle failed", {"task": self.name, "error": e})
