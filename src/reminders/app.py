"""Application entry point for the reminders scanner."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

from reminders.adapters.console_notifier import ConsoleNotifier
from reminders.adapters.pushover_notifier import PushoverNotifier
from reminders.adapters.sources import build_sources
from reminders.adapters.telegram_bot_notifier import TelegramBotNotifier
from reminders.core.errors import ConfigError, SinkError, SourceError
from reminders.core.models import ScanSummary
from reminders.core.ports import NotificationSinkPort
from reminders.core.processor import ReminderProcessor
from reminders.core.reference import REFERENCE_FORMAT, current_reference, parse_reference
from reminders.core.scheduler import MinuteScheduler
from reminders.settings import Settings, load_settings

NAME = "REMINDERS"
FONT = "tarty-1"

TEST_MESSAGE = "Test from reminders!"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(settings: Settings) -> list[str]:
    redact_cfg = settings.logging.get("redact", {})
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    notifications = settings.notifications
    values.extend(
        value
        for value in (
            notifications.pushover_app_token,
            notifications.pushover_user_key,
            notifications.bot_token,
            settings.source.http_password,
        )
        if value
    )
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(settings: Settings) -> None:
    config = settings.logging
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(settings), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/reminders.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.base_dir, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_sink(settings: Settings) -> tuple[NotificationSinkPort, float]:
    """Select the notification adapter and the delay applied after a send.

    The delay only applies to network delivery; console echoes are free.
    """

    config = settings.notifications
    if config.method == "bot":
        sink: NotificationSinkPort = TelegramBotNotifier(
            bot_token=config.bot_token or "",
            chat_id=config.bot_chat_id or "",
            timeout=config.timeout_seconds,
        )
    elif config.method == "pushover" and config.has_pushover_credentials:
        sink = PushoverNotifier(
            app_token=config.pushover_app_token or "",
            user_key=config.pushover_user_key or "",
            title=config.title,
            timeout=config.timeout_seconds,
        )
    else:
        # No delivery credentials: echo locally instead of failing.
        LOGGER.info("No delivery credentials configured, echoing reminders to the console")
        return ConsoleNotifier(), 0.0

    LOGGER.info("Selected notification method - %s", config.method)
    return sink, config.publish_delay_seconds


async def _scan_once(settings: Settings, processor: ReminderProcessor, reference: datetime) -> list[ScanSummary]:
    """Scan each source in order, fetching a source only after the previous one is scanned.

    A ``SourceError`` from a later source propagates once the earlier ones
    have been scanned.
    """

    summaries = []
    for source in build_sources(settings.source):
        text = source.fetch()
        summaries.append(await processor.scan(text, reference))
    return summaries


async def _watch(settings: Settings, processor: ReminderProcessor) -> None:
    async def tick(reference: datetime) -> None:
        try:
            await _scan_once(settings, processor, reference)
        except SourceError:
            # Only this minute is lost; the next tick fetches again.
            LOGGER.exception("Scan aborted @ %s", reference.strftime("%Y-%m-%d %H:%M"))

    scheduler = MinuteScheduler(tick, catch_up_minutes=settings.watch.catch_up_minutes)
    LOGGER.info("Watching for reminders, one scan per minute")
    await scheduler.run()


def _reference_arg(value: str) -> datetime:
    try:
        return parse_reference(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid time override {value!r}, expected '{REFERENCE_FORMAT}' (e.g. 2020/04/29 13:00)"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reminders",
        description="Fire /remind directives found in notes and to-do lists.",
    )
    parser.add_argument("-c", "--config", metavar="FILE.json", help="config file")
    parser.add_argument(
        "-t",
        "--time",
        type=_reference_arg,
        metavar="'YYYY/MM/DD HH:MM'",
        help="evaluate reminders at this local time instead of now",
    )
    parser.add_argument(
        "-p",
        "--pushover",
        action="store_true",
        help="send a test notification and exit",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="keep running and scan once every minute",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.watch and args.time is not None:
        parser.error("--time cannot be combined with --watch")

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    _configure_logging(settings)
    reference = args.time or current_reference()
    LOGGER.info("Reference time @ %s", reference.strftime("%Y-%m-%d %H:%M"))

    sink, publish_delay = _build_sink(settings)

    if args.pushover:
        try:
            asyncio.run(sink.publish(reference, TEST_MESSAGE))
        except SinkError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        return 0

    processor = ReminderProcessor(sink, publish_delay=publish_delay)

    if args.watch:
        _print_banner()
        try:
            asyncio.run(_watch(settings, processor))
        except KeyboardInterrupt:
            LOGGER.info("Stopped")
        return 0

    try:
        asyncio.run(_scan_once(settings, processor, reference))
    except SourceError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
