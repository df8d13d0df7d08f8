"""Minute-aligned scheduler for service mode.

Each tick receives the minute it stands for. Ticks never overlap: the loop
awaits a tick before looking at the clock again. Minutes that slip by while a
tick is still running are replayed afterwards, at most ``catch_up_minutes``
of them.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from reminders.core.reference import ONE_MINUTE, seconds_until_next_minute, truncate_to_minute

LOGGER = logging.getLogger(__name__)


class MinuteScheduler:
    def __init__(
        self,
        tick: Callable[[datetime], Awaitable[None]],
        catch_up_minutes: int = 5,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._tick = tick
        self._catch_up_minutes = max(catch_up_minutes, 0)
        self._clock = clock
        self._sleep = sleep

    def _due(self, last: Optional[datetime], now: datetime) -> List[datetime]:
        if last is None:
            return [now]
        start = last + ONE_MINUTE
        earliest = now - self._catch_up_minutes * ONE_MINUTE
        if start < earliest:
            LOGGER.warning(
                "Skipping %s missed minute(s) beyond the catch-up window",
                int((earliest - start) / ONE_MINUTE),
            )
            start = earliest
        due = []
        while start <= now:
            due.append(start)
            start += ONE_MINUTE
        return due

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick forever, or until ``max_ticks`` minutes were processed."""

        ticks = 0
        last: Optional[datetime] = None
        while max_ticks is None or ticks < max_ticks:
            now = truncate_to_minute(self._clock())
            if last is not None and now <= last:
                await self._sleep(seconds_until_next_minute(self._clock()))
                continue

            for reference in self._due(last, now):
                await self._tick(reference)
                last = reference
                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    return
