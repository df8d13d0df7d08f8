"""Core scan pipeline.

This module is integration-agnostic. It only relies on the sink port for
notifications, enabling other sources or delivery adapters without changes
here.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

from reminders.core.errors import ParseError, SinkError
from reminders.core.grammar import split_lines
from reminders.core.matcher import evaluate
from reminders.core.models import FireDecision, ScanSummary
from reminders.core.ports import NotificationSinkPort

LOGGER = logging.getLogger(__name__)


class ReminderProcessor:
    """Orchestrates extraction, matching and notifications for a text blob."""

    def __init__(
        self,
        sink: NotificationSinkPort,
        publish_delay: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sink = sink
        self._publish_delay = publish_delay
        self._sleep = sleep

    async def handle(self, line: str, reference: datetime) -> FireDecision:
        """Evaluate one line and publish its payload when it fires.

        ParseError and SinkError propagate so the caller decides whether the
        rest of the batch continues.
        """

        decision = evaluate(line, reference)
        if not decision.fired:
            return decision

        await self._sink.publish(reference, decision.payload or "")
        LOGGER.info("Reminder fired (%s): %s", decision.shape.value, decision.payload)

        # Upstream push services drop bursts, so space out consecutive sends.
        if self._publish_delay > 0:
            await self._sleep(self._publish_delay)
        return decision

    async def scan(self, text: str, reference: datetime) -> ScanSummary:
        """Process every line of ``text``; failures stay local to their line."""

        lines = 0
        directives = 0
        fired = 0
        failed = 0

        for number, line in enumerate(split_lines(text), start=1):
            lines += 1
            try:
                decision = await self.handle(line, reference)
            except ParseError as exc:
                failed += 1
                directives += 1
                LOGGER.warning("Skipping line %s: %s", number, exc)
                continue
            except SinkError:
                failed += 1
                directives += 1
                LOGGER.exception("Failed to deliver reminder on line %s", number)
                continue

            if decision.is_directive:
                directives += 1
            if decision.fired:
                fired += 1

        summary = ScanSummary(lines=lines, directives=directives, fired=fired, failed=failed)
        LOGGER.info(
            "Scan complete @ %s: lines=%s, directives=%s, fired=%s, failed=%s",
            reference.strftime("%Y-%m-%d %H:%M"),
            summary.lines,
            summary.directives,
            summary.fired,
            summary.failed,
        )
        return summary
