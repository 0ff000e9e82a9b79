"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/trigger.py
Hold the workflow until the registration minute opens.

Far from the target the trigger sleeps in coarse chunks; inside the final
window it spins on the wall clock so the strike lands within a few
milliseconds of ``hh:mm:00``.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable

from .models import RegistrationTime
from ..utils.logger import logger

COARSE_INTERVAL = 4.0
FINE_WINDOW = 10.0


def next_occurrence(target: RegistrationTime, now: datetime) -> datetime:
    """The start of the next target minute; ``now`` itself if already inside it."""
    candidate = now.replace(hour=target.hour_24, minute=target.minute, second=0, microsecond=0)
    if now >= candidate + timedelta(minutes=1):
        candidate += timedelta(days=1)
    return candidate


class DeadlineTrigger:
    """Blocks until the wall clock reaches a :class:`RegistrationTime`."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        coarse_interval: float = COARSE_INTERVAL,
        fine_window: float = FINE_WINDOW,
    ) -> None:
        if coarse_interval >= fine_window:
            # a coarse sleep started just outside the window must land inside it
            raise ValueError("coarse_interval must be shorter than fine_window")
        self._clock = clock
        self._sleep = sleep
        self.coarse_interval = coarse_interval
        self.fine_window = fine_window

    async def wait_until(self, target: RegistrationTime) -> datetime:
        """Return the wall-clock instant at which the target minute was observed."""
        now = self._clock()
        strike = next_occurrence(target, now)
        if strike.date() != now.date():
            logger.warning("Trigger armed for %s tomorrow (%s)", target, strike.strftime("%Y-%m-%d %H:%M"))
        else:
            logger.info("Trigger armed for %s", strike.strftime("%H:%M:%S"))

        while True:
            now = self._clock()
            remaining = (strike - now).total_seconds()
            if remaining <= 0:
                return now
            if remaining <= self.fine_window:
                # zero-delay yield keeps the browser connection draining
                await asyncio.sleep(0)
                continue
            await self._sleep(min(self.coarse_interval, remaining - self.fine_window + 0.001))
