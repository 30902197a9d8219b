"""
Fixed-rate tick source built on the `schedule` library.

The ticker owns a private Scheduler with a single job that fires every
1/fps seconds. start() blocks and runs pending jobs until stop() is
called (typically from inside the tick callback) or max_ticks is reached.
A stopped ticker can be started again.
"""

import logging
import time
from typing import Callable, Optional

import schedule

logger = logging.getLogger(__name__)


class Ticker:
    def __init__(
        self,
        fps: float,
        callback: Callable[[], None],
        sleep: Callable[[float], None] = time.sleep,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.interval = 1.0 / fps
        self.callback = callback
        self.ticks = 0
        self._sleep = sleep
        self._scheduler = schedule.Scheduler()
        self._job: Optional[schedule.Job] = None
        self._running = False
        self._max_ticks: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._running

    def _tick(self):
        self.ticks += 1
        self.callback()
        if self._max_ticks is not None and self.ticks >= self._max_ticks:
            self.stop()

    def start(self, max_ticks: Optional[int] = None) -> int:
        """
        Arm the tick job and run it until stopped.

        Args:
            max_ticks: stop after this many ticks in total (counting earlier runs)

        Returns:
            Total number of ticks delivered so far.
        """
        if self._running:
            raise RuntimeError("Ticker is already running")
        self._max_ticks = max_ticks
        if max_ticks is not None and self.ticks >= max_ticks:
            return self.ticks

        self._running = True
        self._job = self._scheduler.every(self.interval).seconds.do(self._tick)
        logger.debug(f"Ticker armed at {self.fps} fps")

        while self._running:
            self._scheduler.run_pending()
            if not self._running:
                break
            idle = self._scheduler.idle_seconds
            if idle is None:
                break
            self._sleep(min(max(idle, 0.0), self.interval))

        return self.ticks

    def stop(self) -> None:
        self._running = False
        if self._job is not None:
            self._scheduler.cancel_job(self._job)
            self._job = None
            logger.debug(f"Ticker stopped after {self.ticks} ticks")
