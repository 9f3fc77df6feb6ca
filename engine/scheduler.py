"""
Critters - Tick Scheduler
Cooperative, tick-driven scheduler for long-running timed actions.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Drives timed actions one host tick at a time.

    Actions are coroutines that suspend with ``await scheduler.next_tick()``
    and are resumed by the next call to ``tick()``. Nothing ever blocks a
    thread: all waiting is "until the next tick", so between two ticks every
    piece of game code runs to completion without interleaving.

    Closing the scheduler is a silent cancellation: tracked routines are
    cancelled and any coroutine still waiting is released with ``False``.

    Usage:
        scheduler = TickScheduler()
        scheduler.spawn(scheduler.run_timed(1000, lambda p: print(p)))

        while running:
            scheduler.tick()
            await asyncio.sleep(TICK_MS / 1000)
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        """
        Initialize the scheduler.

        Args:
            clock: Returns the current time in seconds. Defaults to
                   time.monotonic; tests inject a fake clock.
        """
        self._clock = clock or time.monotonic
        self._tick_count = 0
        self._waiters: list[asyncio.Future[bool]] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    @property
    def now(self) -> float:
        """Current clock time in seconds."""
        return self._clock()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)

    def tick(self) -> int:
        """
        Advance one tick and resume everything waiting on ``next_tick()``.

        The resumed coroutines run the next time the event loop gets control.

        Returns:
            The new tick count
        """
        if self._closed:
            return self._tick_count

        self._tick_count += 1
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(True)
        return self._tick_count

    async def next_tick(self) -> bool:
        """
        Suspend until the next tick.

        Returns:
            True when resumed by a tick, False if the scheduler is closed
        """
        if self._closed:
            return False

        waiter: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        return await waiter

    async def run_timed(
        self,
        duration_ms: float,
        progress_callback: Callable[[float], None],
    ) -> bool:
        """
        Drive a progress value from 0.0 to 1.0 over ``duration_ms``.

        Calls ``progress_callback(0.0)`` before the first suspension, then
        once per tick with the elapsed fraction, and finally with exactly 1.0
        once the duration has passed.

        Args:
            duration_ms: How long the action takes
            progress_callback: Receives progress in [0.0, 1.0]

        Returns:
            True if the action ran to completion, False if the scheduler was
            closed mid-run (no further callbacks are made in that case)
        """
        progress_callback(0.0)

        start = self.now
        while duration_ms > 0:
            if not await self.next_tick():
                return False

            progress = (self.now - start) * 1000.0 / duration_ms
            if progress >= 1.0:
                break
            progress_callback(progress)

        progress_callback(1.0)
        return True

    async def wait(self, duration_ms: float) -> bool:
        """
        Suspend tick by tick until ``duration_ms`` has elapsed.

        Returns:
            True when the wait finished, False if the scheduler was closed
        """
        start = self.now
        while (self.now - start) * 1000.0 < duration_ms:
            if not await self.next_tick():
                return False
        return True

    def spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        """
        Start a routine as a tracked task.

        Tracked tasks are cancelled when the scheduler closes.
        """
        if self._closed:
            coro.close()
            raise RuntimeError("Cannot spawn routines on a closed scheduler")

        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            logger.error(
                f"Routine '{task.get_name()}' failed: {error}",
                exc_info=error,
            )

    async def close(self) -> None:
        """Tear down: release waiters and cancel every tracked routine."""
        if self._closed:
            return
        self._closed = True

        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(False)

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(f"Scheduler closed after {self._tick_count} ticks ({len(tasks)} routines cancelled)")

    def get_state(self) -> dict[str, Any]:
        """Get serializable state for debugging."""
        return {
            "tick_count": self._tick_count,
            "pending_waiters": len(self._waiters),
            "active_tasks": len(self._tasks),
            "closed": self._closed,
        }

    def __str__(self) -> str:
        return f"TickScheduler(tick={self._tick_count}, tasks={len(self._tasks)})"
