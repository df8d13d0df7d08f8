"""Recurrence matching (core domain).

Matching is a pure function of ``(shape, fields, reference)``: it never reads
the wall clock, and every comparison is an exact equality at minute
resolution. A caller that skips a minute skips any rule due in that minute.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Dict, Optional

from reminders.core.errors import ParseError
from reminders.core.grammar import extract
from reminders.core.models import FireDecision, PatternShape, RuleFields

DEFAULT_HOUR = 8
DEFAULT_MINUTE = 0
MONDAY = 0


def resolve_year(year: Optional[int], reference: datetime) -> int:
    """Explicit year (two digits read as 20xx) or the reference year."""

    if year is None:
        return reference.year
    if year <= 99:
        return 2000 + year
    return year


def resolve_hour(hour: int, meridiem: Optional[str]) -> int:
    """Apply the am/pm suffix. 12am stays 12, 24-hour values pass through."""

    if meridiem == "pm" and hour < 12:
        return hour + 12
    return hour


def target_time(fields: RuleFields) -> time:
    """Time of day a rule fires at, applying the 08:00 default."""

    if fields.hour is None:
        hour = DEFAULT_HOUR
    else:
        hour = resolve_hour(fields.hour, fields.meridiem)
    minute = DEFAULT_MINUTE if fields.minute is None else fields.minute
    try:
        return time(hour, minute)
    except ValueError as exc:
        raise ParseError(f"invalid time {hour}:{minute:02d}") from exc


def target_date(fields: RuleFields, reference: datetime) -> date:
    """Calendar date of an absolute-date rule."""

    year = resolve_year(fields.year, reference)
    try:
        return date(year, fields.month, fields.day)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"invalid date {fields.month}/{fields.day}/{year}") from exc


def _same_minute(reference: datetime, at: time) -> bool:
    return reference.hour == at.hour and reference.minute == at.minute


def _default_time_at(reference: datetime) -> bool:
    return reference.hour == DEFAULT_HOUR and reference.minute == DEFAULT_MINUTE


def _match_absolute(fields: RuleFields, reference: datetime) -> bool:
    day = target_date(fields, reference)
    at = target_time(fields)
    return reference.date() == day and _same_minute(reference, at)


def _match_weekday(fields: RuleFields, reference: datetime) -> bool:
    at = target_time(fields)
    return reference.weekday() == fields.weekday and _same_minute(reference, at)


def _match_daily_time(fields: RuleFields, reference: datetime) -> bool:
    return _same_minute(reference, target_time(fields))


def _match_monthly(fields: RuleFields, reference: datetime) -> bool:
    return reference.day == 1 and _default_time_at(reference)


def _match_biweekly(fields: RuleFields, reference: datetime) -> bool:
    week = reference.isocalendar()[1]
    return reference.weekday() == MONDAY and week % 2 == 0 and _default_time_at(reference)


def _match_weekly(fields: RuleFields, reference: datetime) -> bool:
    return reference.weekday() == MONDAY and _default_time_at(reference)


def _match_daily(fields: RuleFields, reference: datetime) -> bool:
    return _default_time_at(reference)


_MATCHERS: Dict[PatternShape, Callable[[RuleFields, datetime], bool]] = {
    PatternShape.ABSOLUTE_DATE_TIME_EXACT: _match_absolute,
    PatternShape.ABSOLUTE_DATE_TIME_MILITARY: _match_absolute,
    PatternShape.ABSOLUTE_DATE_HOUR_ONLY: _match_absolute,
    PatternShape.ABSOLUTE_DATE_DEFAULT_TIME: _match_absolute,
    PatternShape.WEEKDAY_TIME_EXACT: _match_weekday,
    PatternShape.WEEKDAY_TIME_MILITARY: _match_weekday,
    PatternShape.WEEKDAY_HOUR_ONLY: _match_weekday,
    PatternShape.WEEKDAY_DEFAULT_TIME: _match_weekday,
    PatternShape.DAILY_TIME_EXACT: _match_daily_time,
    PatternShape.DAILY_TIME_MILITARY: _match_daily_time,
    PatternShape.DAILY_HOUR_ONLY: _match_daily_time,
    PatternShape.MONTHLY: _match_monthly,
    PatternShape.BIWEEKLY: _match_biweekly,
    PatternShape.WEEKLY: _match_weekly,
    PatternShape.DAILY: _match_daily,
}


def matches(shape: PatternShape, fields: RuleFields, reference: datetime) -> bool:
    """Return True when the rule fires at the reference minute.

    Raises ParseError when the captured fields do not form a valid date or
    time (``2/30``, ``25:00``).
    """

    return _MATCHERS[shape](fields, reference)


def evaluate(line: str, reference: datetime) -> FireDecision:
    """Extract and match one line, threading the payload through."""

    extracted = extract(line)
    if extracted is None:
        return FireDecision(fired=False)
    shape, fields = extracted
    if matches(shape, fields, reference):
        return FireDecision(fired=True, payload=fields.payload, shape=shape)
    return FireDecision(fired=False, shape=shape)
