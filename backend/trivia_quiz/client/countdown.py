"""Deadline-based countdown that fires one automatic submission."""
import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class CountdownScheduler:
    """Single-deadline timer for one quiz session.

    ``remaining`` is always recomputed as ``deadline - clock()``; the periodic
    tick only observes it, so repeated sleeps never accumulate drift. When the
    deadline passes, ``on_expire`` is awaited once and the scheduler stops.
    """

    def __init__(
        self,
        duration_seconds: float,
        on_expire: Callable[[], Awaitable[object]],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        resolution: float = 1.0,
    ):
        self.duration_seconds = duration_seconds
        self.resolution = resolution
        self._on_expire = on_expire
        self._clock = clock
        self._sleep = sleep
        self._deadline: Optional[float] = None
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False
        self._fired = False
        self._last_remaining: Optional[float] = None

    @property
    def started(self) -> bool:
        return self._deadline is not None

    @property
    def running(self) -> bool:
        return self.started and not self._cancelled and not self._fired

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> float:
        if self._deadline is None:
            return float(self.duration_seconds)
        return max(self._deadline - self._clock(), 0.0)

    def remaining_seconds(self) -> int:
        return int(math.ceil(self.remaining()))

    def start(self) -> None:
        if self.started:
            raise RuntimeError("Countdown already started")
        self._deadline = self._clock() + self.duration_seconds
        self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> float:
        """Observe the deadline once; returns the remaining time."""
        remaining = self.remaining()
        if self._last_remaining is not None and remaining >= self._last_remaining and remaining > 0:
            logger.warning("Countdown clock did not advance (%.3f >= %.3f)", remaining, self._last_remaining)
        self._last_remaining = remaining
        return remaining

    async def _run(self) -> None:
        while not self._cancelled:
            await self._sleep(self.resolution)
            if self._cancelled:
                return
            if self.tick() <= 0:
                break
        if self._cancelled:
            return
        self._fired = True
        logger.info("Countdown reached zero, firing automatic submission")
        try:
            await self._on_expire()
        except Exception:
            logger.exception("Automatic submission raised")

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        task = self._task
        # The expiry callback runs on this task; cancelling it mid-call would abort the submission.
        if task is not None and not task.done() and not self._fired:
            task.cancel()

    async def wait(self) -> None:
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass
