"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any source or delivery specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PatternShape(str, Enum):
    """Grammar variants a directive can match, listed in priority order."""

    ABSOLUTE_DATE_TIME_EXACT = "AbsoluteDateTimeExact"
    ABSOLUTE_DATE_TIME_MILITARY = "AbsoluteDateTimeMilitary"
    ABSOLUTE_DATE_HOUR_ONLY = "AbsoluteDateHourOnly"
    ABSOLUTE_DATE_DEFAULT_TIME = "AbsoluteDateDefaultTime"
    WEEKDAY_TIME_EXACT = "WeekdayTimeExact"
    WEEKDAY_TIME_MILITARY = "WeekdayTimeMilitary"
    WEEKDAY_HOUR_ONLY = "WeekdayHourOnly"
    WEEKDAY_DEFAULT_TIME = "WeekdayDefaultTime"
    DAILY_TIME_EXACT = "DailyTimeExact"
    DAILY_TIME_MILITARY = "DailyTimeMilitary"
    DAILY_HOUR_ONLY = "DailyHourOnly"
    MONTHLY = "Monthly"
    BIWEEKLY = "Biweekly"
    WEEKLY = "Weekly"
    DAILY = "Daily"


class DirectiveForm(str, Enum):
    """Where the trigger sits on the line."""

    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class Directive:
    """A line isolated as a recurrence directive, before field parsing.

    For the prefix form the payload follows the recurrence spec, so
    ``payload`` is ``None`` until the grammar splits ``spec``. For the suffix
    form the payload is the checklist text in front of the trigger.
    """

    text: str
    form: DirectiveForm
    trigger_start: int
    spec_start: int
    spec: str
    payload_start: Optional[int] = None
    payload: Optional[str] = None


@dataclass(frozen=True)
class RuleFields:
    """Fields captured by the grammar. Absent fields are ``None``."""

    payload: str
    month: Optional[int] = None
    day: Optional[int] = None
    year: Optional[int] = None
    hour: Optional[int] = None
    minute: Optional[int] = None
    meridiem: Optional[str] = None
    weekday: Optional[int] = None


@dataclass(frozen=True)
class FireDecision:
    """Result of evaluating one line against a reference instant."""

    fired: bool
    payload: Optional[str] = None
    shape: Optional[PatternShape] = None

    @property
    def is_directive(self) -> bool:
        return self.shape is not None


@dataclass(frozen=True)
class ScanSummary:
    """Counters reported after a full scan of a directive source."""

    lines: int
    directives: int
    fired: int
    failed: int
