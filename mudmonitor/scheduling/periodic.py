"""
Periodic Task - fixed-schedule background loop around one unit of work.

Ticks fire every ``interval`` seconds measured from the first tick, not
from the end of the previous cycle. A tick that fires while the previous
cycle is still running is skipped and counted, so cycles never overlap
and never queue up behind a slow one.

Failures inside the work are caught, logged and counted; the loop keeps
ticking. A logger that fails is reported on stderr and never stops the
loop. Only ``stop()`` ends it, cancelling the in-flight cycle too.
"""

import asyncio
import sys
from typing import Any, Awaitable, Callable

from mudmonitor.logging import Logger
from mudmonitor.logging.monitor_logging_models import (
    SchedulerError,
    SchedulerInfo,
    SchedulerWarning,
)


class PeriodicTask:
    """
    Example usage:
        task = PeriodicTask(
            name="status-poll",
            interval=300.0,
            work=poller.poll_cycle,
            initial_delay=30.0,
        )

        await task.start()
        ...
        await task.stop()
    """

    def __init__(
        self,
        name: str,
        interval: float,
        work: Callable[[], Awaitable[Any]],
        initial_delay: float = 0.0,
        logger: Logger | None = None,
    ):
        if not interval > 0:
            raise ValueError(f"interval must be positive, got {interval}")

        if initial_delay < 0:
            raise ValueError(f"initial_delay must not be negative, got {initial_delay}")

        self.name = name
        self.interval = interval
        self.initial_delay = initial_delay

        self._work = work
        self._logger = logger
        self._ticker: asyncio.Task | None = None
        self._cycle: asyncio.Task | None = None

        self.completed_cycles = 0
        self.failed_cycles = 0
        self.skipped_ticks = 0
        self.log_failures = 0
        self.last_result: Any = None

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    @property
    def cycle_in_progress(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    async def start(self) -> None:
        if self.running:
            return

        self._ticker = asyncio.create_task(self._run())

        await self._log(
            SchedulerInfo(
                message=f"Started {self.name} loop",
                task_name=self.name,
                interval=self.interval,
            )
        )

    async def stop(self) -> None:
        for task in (self._ticker, self._cycle):
            if task is None or task.done():
                continue

            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._ticker = None
        self._cycle = None

    async def run_once(self) -> Any:
        """
        Run a single cycle now. Returns None without running anything when
        a cycle is already in progress or when the cycle fails.
        """
        if self.cycle_in_progress:
            await self._log(
                SchedulerWarning(
                    message=f"Cycle of {self.name} already running, not starting another",
                    task_name=self.name,
                    interval=self.interval,
                )
            )
            return None

        self._cycle = asyncio.create_task(self._guarded_cycle())
        return await self._cycle

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()

        if self.initial_delay > 0:
            await asyncio.sleep(self.initial_delay)

        next_tick = loop.time()

        while True:
            if self.cycle_in_progress:
                self.skipped_ticks += 1
                await self._log(
                    SchedulerWarning(
                        message=f"Skipped tick of {self.name}, previous cycle still running",
                        task_name=self.name,
                        interval=self.interval,
                    )
                )

            else:
                self._cycle = asyncio.create_task(self._guarded_cycle())

            next_tick += self.interval
            now = loop.time()

            # Realign after the loop itself was blocked past one or more ticks.
            if next_tick <= now:
                missed = int((now - next_tick) // self.interval) + 1
                self.skipped_ticks += missed
                next_tick += missed * self.interval

            await asyncio.sleep(next_tick - now)

    async def _guarded_cycle(self) -> Any:
        try:
            result = await self._work()

        except asyncio.CancelledError:
            raise

        except Exception as err:
            self.failed_cycles += 1
            await self._log(
                SchedulerError(
                    message=f"Cycle of {self.name} failed: {type(err).__name__}: {err}",
                    task_name=self.name,
                    interval=self.interval,
                )
            )
            return None

        self.completed_cycles += 1
        self.last_result = result

        return result

    async def _log(self, entry: SchedulerInfo | SchedulerWarning | SchedulerError) -> None:
        if self._logger is None:
            return

        try:
            await self._logger.log(entry)

        except asyncio.CancelledError:
            raise

        except Exception as err:
            self.log_failures += 1
            print(
                f"{self.name}: could not log {type(entry).__name__}: {type(err).__name__}: {err}",
                file=sys.stderr,
            )
