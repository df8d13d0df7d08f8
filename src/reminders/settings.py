"""Configuration loading for reminders.

All user-editable settings (sources, notifications, watch mode, logging)
live in a single JSON file. Delivery secrets may instead come from the
environment or a ``.env`` file so they stay out of the config.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

from reminders.core.config import NotificationConfig, SourceConfig, WatchConfig
from reminders.core.errors import ConfigError
from reminders.core.grammar import split_lines

NOTIFICATION_METHODS = ("pushover", "bot", "console")


@dataclass(frozen=True)
class Settings:
    """Parsed configuration handed to the app layer."""

    config_path: str
    base_dir: str
    source: SourceConfig
    notifications: NotificationConfig
    watch: WatchConfig
    logging: dict


def _load_json_config(path: str) -> dict:
    """Load the config file and make sure it is a JSON object."""

    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")
    return raw


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be an object")
    return value


def _number(section: dict, key: str, default: float, label: str) -> float:
    value = section.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{label} must be a number, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"{label} must not be negative")
    return number


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _secret(section: dict, key: str, env_name: str) -> Optional[str]:
    # Config values win; the environment is the fallback for secrets.
    return _optional_str(section.get(key)) or _optional_str(os.getenv(env_name))


def _normalize_inline(raw_reminders: Any) -> Tuple[str, ...]:
    """Accept either a list of lines or one multi-line string."""

    if raw_reminders is None:
        return ()
    if isinstance(raw_reminders, str):
        return tuple(split_lines(raw_reminders))
    if isinstance(raw_reminders, list) and all(isinstance(line, str) for line in raw_reminders):
        return tuple(raw_reminders)
    raise ConfigError("'reminders' must be a string or a list of strings")


def _resolve_path(base_dir: str, path: str) -> str:
    if path.startswith(("http://", "https://")) or os.path.isabs(path):
        return path
    return os.path.join(base_dir, path)


def _build_source(raw: dict, base_dir: str) -> SourceConfig:
    if "file" not in raw and "reminders" not in raw:
        raise ConfigError("Config must define 'file' or 'reminders'")

    file_path = _optional_str(raw.get("file"))
    if file_path:
        file_path = _resolve_path(base_dir, file_path)

    http_auth = _optional_str(raw.get("http_auth"))
    if http_auth not in (None, "basic"):
        raise ConfigError(f"Unsupported http_auth: {http_auth}")

    username = _optional_str(raw.get("http_username"))
    password = _secret(raw, "http_password", "HTTP_PASSWORD")
    if http_auth == "basic" and (not username or not password):
        raise ConfigError("http_auth=basic requires http_username and http_password")

    return SourceConfig(
        inline=_normalize_inline(raw.get("reminders")),
        file=file_path,
        http_auth=http_auth,
        http_username=username,
        http_password=password,
        timeout_seconds=_number(raw, "http_timeout_seconds", 10, "http_timeout_seconds"),
    )


def _build_notifications(raw: dict) -> NotificationConfig:
    section = _section(raw, "notifications")
    method = str(section.get("method", "pushover")).lower()
    if method not in NOTIFICATION_METHODS:
        raise ConfigError("notifications.method must be 'pushover', 'bot' or 'console'")

    config = NotificationConfig(
        method=method,
        pushover_app_token=_secret(section, "pushover_app_token", "PUSHOVER_APP_TOKEN"),
        pushover_user_key=_secret(section, "pushover_user_key", "PUSHOVER_USER_KEY"),
        title=_optional_str(section.get("title")),
        bot_token=_optional_str(os.getenv("BOT_API")),
        bot_chat_id=_optional_str(section.get("bot_chat_id")),
        publish_delay_seconds=_number(
            section, "publish_delay_seconds", 2, "notifications.publish_delay_seconds"
        ),
        timeout_seconds=_number(section, "timeout_seconds", 10, "notifications.timeout_seconds"),
    )

    if method == "bot":
        if not config.bot_token:
            raise ConfigError("BOT_API is required when notifications.method=bot")
        if not config.bot_chat_id:
            raise ConfigError("notifications.bot_chat_id is required for bot notifications")
    return config


def _build_watch(raw: dict) -> WatchConfig:
    section = _section(raw, "watch")
    catch_up = _number(section, "catch_up_minutes", 5, "watch.catch_up_minutes")
    return WatchConfig(catch_up_minutes=int(catch_up))


def load_settings(path: Optional[str]) -> Settings:
    """Read and validate the config file. Raises ConfigError."""

    if not path:
        raise ConfigError("must specify the config file")

    load_dotenv()
    config_path = os.path.abspath(path)
    raw = _load_json_config(config_path)
    base_dir = os.path.dirname(config_path)

    return Settings(
        config_path=config_path,
        base_dir=base_dir,
        source=_build_source(raw, base_dir),
        notifications=_build_notifications(raw),
        watch=_build_watch(raw),
        logging=_section(raw, "logging"),
    )
