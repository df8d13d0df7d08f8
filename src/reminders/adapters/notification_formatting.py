"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel.
"""

from __future__ import annotations

import html
from datetime import datetime

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def _format_plain(reference: datetime, message: str) -> str:
    return f"[{reference.strftime(TIMESTAMP_FORMAT)}] {message}"


def _format_html(reference: datetime, message: str) -> str:
    """Create the HTML body used by the Bot API adapter."""

    timestamp = html.escape(reference.strftime(TIMESTAMP_FORMAT))
    return "\n".join(
        [
            f"<b>Reminder</b> [{timestamp}]",
            "──────────────",
            html.escape(message),
        ]
    )


def format_notification(reference: datetime, message: str, mode: str) -> str:
    """Return the notification formatted for the requested mode."""

    if mode == "plain":
        return _format_plain(reference, message)
    if mode == "html":
        return _format_html(reference, message)
    raise ValueError(f"Unsupported notification format: {mode}")
