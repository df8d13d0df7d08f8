"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so reminders can be routed via a bot chat.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from datetime import datetime

from reminders.adapters.notification_formatting import format_notification
from reminders.core.errors import SinkError


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._timeout = timeout

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def _payload(self, reference: datetime, message: str) -> dict:
        return {
            "chat_id": self._chat_id,
            "text": format_notification(reference, message, mode="html"),
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

    async def publish(self, reference: datetime, message: str) -> None:
        """Send the formatted reminder via the Bot API."""

        data = json.dumps(self._payload(reference, message)).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise SinkError(f"Bot API error {e.code}: {body}") from e
        except (urllib.error.URLError, OSError) as e:
            raise SinkError(f"Bot API request failed: {e}") from e
