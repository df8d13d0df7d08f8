"""Reference instant helpers.

The reference instant is a naive local datetime truncated to the minute. It
is produced here, at the edge, and handed to the matcher as a plain value.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

REFERENCE_FORMAT = "%Y/%m/%d %H:%M"

ONE_MINUTE = timedelta(minutes=1)


def truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def current_reference(clock: Callable[[], datetime] = datetime.now) -> datetime:
    """Return the current local time with seconds and microseconds dropped."""

    return truncate_to_minute(clock())


def parse_reference(value: str) -> datetime:
    """Parse an operator override such as ``2020/04/29 13:00``.

    No timezone conversion is applied. Raises ValueError on a bad format.
    """

    return datetime.strptime(value.strip(), REFERENCE_FORMAT)


def seconds_until_next_minute(now: datetime) -> float:
    return (truncate_to_minute(now) + ONE_MINUTE - now).total_seconds()
