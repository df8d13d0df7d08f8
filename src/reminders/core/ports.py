"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for directive sources and notification
sinks so that the core can be reused with different backends.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class DirectiveSourcePort(Protocol):
    """Supplies the text blob to scan. Raises SourceError when unreadable."""

    def fetch(self) -> str:
        ...


class NotificationSinkPort(Protocol):
    """Delivers a fired reminder. Raises SinkError on transport failure."""

    async def publish(self, reference: datetime, message: str) -> None:
        ...
