"""City-local clock that refreshes once per second while a report is shown."""
import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional


def local_time_from(utc_seconds: float, offset_seconds: int) -> datetime:
    """Wall-clock time at a location `offset_seconds` away from UTC."""
    tz = timezone(timedelta(seconds=offset_seconds))
    return datetime.fromtimestamp(utc_seconds, tz=tz)


class ClockHandle:
    """Token for one running refresh timer; stale once superseded or stopped."""

    def __init__(self, generation: int, offset: int, task: "asyncio.Task"):
        self.generation = generation
        self.offset = offset
        self._task = task
        self._stopped = False

    def cancel(self) -> None:
        self._stopped = True
        self._task.cancel()

    @property
    def active(self) -> bool:
        return not self._stopped and not self._task.done()


class LocalClock:
    """
    Derives the local time of the displayed city.

    `start()` seeds the time from the report's observation timestamp and then
    re-derives it every `interval` seconds from `now()` plus the captured
    offset. Only one timer runs at a time; starting again replaces it.
    """

    def __init__(
        self,
        on_tick: Optional[Callable[[datetime], None]] = None,
        interval: float = 1.0,
        now: Callable[[], float] = time.time
    ):
        self.on_tick = on_tick
        self.interval = interval
        self._now = now
        self._generation = 0
        self._handle: Optional[ClockHandle] = None
        self.offset: Optional[int] = None
        self.local_time: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, offset: int, observed_at: Optional[int] = None) -> ClockHandle:
        """Start (or restart) ticking for a location with the given UTC offset."""
        self.stop()
        self._generation += 1
        self.offset = offset
        seed = observed_at if observed_at is not None else self._now()
        self.local_time = local_time_from(seed, offset)

        task = asyncio.get_running_loop().create_task(self._run(self._generation, offset))
        self._handle = ClockHandle(self._generation, offset, task)
        logging.debug(f"Local clock started: generation={self._generation} offset={offset}s")
        return self._handle

    def stop(self) -> None:
        """Cancel the running timer, if any, and forget the displayed time."""
        if self._handle is not None:
            logging.debug(f"Local clock stopped: generation={self._handle.generation}")
            self._handle.cancel()
            self._handle = None
        self.offset = None
        self.local_time = None

    async def _run(self, generation: int, offset: int) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if generation != self._generation or self._handle is None:
                return
            self.local_time = local_time_from(self._now(), offset)
            if self.on_tick is not None:
                self.on_tick(self.local_time)
