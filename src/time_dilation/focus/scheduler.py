"""Asyncio driver that ticks the timer once per interval while it runs."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TickScheduler:
    """Calls ``tick`` every ``interval`` seconds while ``is_running()`` holds.

    At most one tick task is outstanding. ``cancel()`` is synchronous: once it
    returns, the dropped task can no longer tick, because every iteration
    checks that it is still the scheduler's current task and that the timer is
    still running at the moment it fires.

    Usage:
        scheduler = TickScheduler(timer.tick, lambda: timer.is_running)
        timer.start()
        scheduler.arm()
        ...
        timer.pause()
        scheduler.cancel()
    """

    def __init__(
        self,
        tick: Callable[[], object],
        is_running: Callable[[], bool],
        interval: float = 1.0,
        on_failure: Callable[[], None] | None = None,
    ):
        self._tick = tick
        self._is_running = is_running
        self.interval = interval
        # Called after a tick raises, so the owner can stop its timer
        self.on_failure = on_failure
        self._task: asyncio.Task | None = None

    @property
    def is_armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        """Start ticking. No-op if a tick task is already live.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.is_armed:
            return
        self._task = asyncio.get_running_loop().create_task(self._tick_loop())
        logger.debug("Tick scheduler armed")

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        # The loop notices it was superseded; cancelling itself is unnecessary
        if task is not asyncio.current_task():
            task.cancel()
        logger.debug("Tick scheduler cancelled")

    def sync(self, running: bool) -> None:
        """Arm or cancel to match the timer's running flag."""
        if running:
            self.arm()
        else:
            self.cancel()

    async def _tick_loop(self) -> None:
        """Main timer tick loop."""
        me = asyncio.current_task()
        try:
            while True:
                await asyncio.sleep(self.interval)

                if self._task is not me or not self._is_running():
                    break

                self._tick()

                if self._task is not me or not self._is_running():
                    break
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in timer tick loop: {e}")
            if self._task is me:
                self._task = None
            if self.on_failure:
                try:
                    self.on_failure()
                except Exception as e:
                    logger.error(f"Error in on_failure callback: {e}")
        finally:
            if self._task is me:
                self._task = None
