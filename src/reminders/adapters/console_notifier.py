"""Console notification adapter.

Used when no delivery credentials are configured, so reminders can be tried
out locally without a push account.
"""

from __future__ import annotations

from datetime import datetime

from reminders.adapters.notification_formatting import format_notification


class ConsoleNotifier:
    """Notifier adapter that echoes reminders to stdout."""

    async def publish(self, reference: datetime, message: str) -> None:
        print(f"reminder: {format_notification(reference, message, mode='plain')}")
