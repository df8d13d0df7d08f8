"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class SourceConfig:
    """Where directive text comes from."""

    inline: Tuple[str, ...]
    file: Optional[str]
    http_auth: Optional[str]
    http_username: Optional[str]
    http_password: Optional[str]
    timeout_seconds: float


@dataclass(frozen=True)
class NotificationConfig:
    """Delivery settings consumed by the notifier adapters."""

    method: str
    pushover_app_token: Optional[str]
    pushover_user_key: Optional[str]
    title: Optional[str]
    bot_token: Optional[str]
    bot_chat_id: Optional[str]
    publish_delay_seconds: float
    timeout_seconds: float

    @property
    def has_pushover_credentials(self) -> bool:
        return bool(self.pushover_app_token and self.pushover_user_key)


@dataclass(frozen=True)
class WatchConfig:
    """Service-mode settings for the minute scheduler."""

    catch_up_minutes: int
