"""Pushover notification adapter.

Posts each fired reminder to the Pushover messages API.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from datetime import datetime
from typing import Optional

from reminders.core.errors import SinkError

LOGGER = logging.getLogger(__name__)

PUSHOVER_ENDPOINT = "https://api.pushover.net/1/messages.json"


class PushoverNotifier:
    """Notifier adapter that sends messages via the Pushover API."""

    def __init__(
        self,
        app_token: str,
        user_key: str,
        title: Optional[str] = None,
        timeout: float = 10,
        endpoint: str = PUSHOVER_ENDPOINT,
    ) -> None:
        self._app_token = app_token
        self._user_key = user_key
        self._title = title
        self._timeout = timeout
        self._endpoint = endpoint

    def _payload(self, reference: datetime, message: str) -> dict:
        payload = {
            "token": self._app_token,
            "user": self._user_key,
            "message": message,
            # Pushover shows the reminder's own minute, not the delivery time.
            "timestamp": int(time.mktime(reference.timetuple())),
        }
        if self._title:
            payload["title"] = self._title
        return payload

    async def publish(self, reference: datetime, message: str) -> None:
        """Send the reminder text to Pushover."""

        data = json.dumps(self._payload(reference, message)).encode("utf-8")
        request = urllib.request.Request(self._endpoint, data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        LOGGER.info("pushover: %s %r", reference.strftime("%Y-%m-%d %H:%M"), message)
        # Blocking call: scans are sequential and each publish must finish
        # before the next line is evaluated.
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise SinkError(f"Pushover API error {e.code}: {body}") from e
        except (urllib.error.URLError, OSError) as e:
            raise SinkError(f"Pushover request failed: {e}") from e
