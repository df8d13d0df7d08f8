"""Directive grammar and field extraction (core domain).

A directive is written either at the start of a line::

    /remind 4/29/2020 1pm call the dentist

or at the end of an open checklist item::

    - [ ] call the dentist /remind 4/29/2020 1pm

Both forms are first reduced to a ``Directive`` holding the recurrence spec
text, then the spec is parsed by one ordered grammar table. The first entry
that matches decides the shape; later entries are never attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Optional, Tuple

from reminders.core.errors import ParseError
from reminders.core.models import Directive, DirectiveForm, PatternShape, RuleFields

LOGGER = logging.getLogger(__name__)

TRIGGER_ALIASES = ("remind", "rem", "r")

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_TRIGGER = r"/(?:%s)" % "|".join(TRIGGER_ALIASES)

_PREFIX_LINE = re.compile(
    rf"(?P<trigger>{_TRIGGER})\s+(?P<spec>.*)",
    re.IGNORECASE,
)
# Greedy payload so the last trigger on the line owns the recurrence spec.
_SUFFIX_LINE = re.compile(
    rf"\s*-\s\[\s\]\s+(?P<payload>.*)\s+(?P<trigger>{_TRIGGER})\s+(?P<spec>.*?)\s*",
    re.IGNORECASE,
)

_DATE = r"(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{4}|\d{2}))?"
_CLOCK_MERIDIEM = r"(?P<hour>\d{1,2}):(?P<minute>\d{2})(?P<meridiem>am|pm)"
_CLOCK = r"(?P<hour>\d{1,2}):(?P<minute>\d{2})"
_HOUR_MERIDIEM = r"(?P<hour>\d{1,2})(?P<meridiem>am|pm)"
_WEEKDAY = r"(?P<weekday>[a-z]+)"


@dataclass(frozen=True)
class GrammarRule:
    """One row of the grammar table, compiled for both directive forms."""

    shape: PatternShape
    prefix_pattern: re.Pattern
    suffix_pattern: re.Pattern

    def pattern_for(self, form: DirectiveForm) -> re.Pattern:
        if form is DirectiveForm.PREFIX:
            return self.prefix_pattern
        return self.suffix_pattern


def _rule(shape: PatternShape, *tokens: str) -> GrammarRule:
    spec = r"\s+".join(tokens)
    return GrammarRule(
        shape=shape,
        prefix_pattern=re.compile(spec + r"\s+(?P<payload>.*)", re.IGNORECASE),
        suffix_pattern=re.compile(spec, re.IGNORECASE),
    )


GRAMMAR: Tuple[GrammarRule, ...] = (
    _rule(PatternShape.ABSOLUTE_DATE_TIME_EXACT, _DATE, _CLOCK_MERIDIEM),
    _rule(PatternShape.ABSOLUTE_DATE_TIME_MILITARY, _DATE, _CLOCK),
    _rule(PatternShape.ABSOLUTE_DATE_HOUR_ONLY, _DATE, _HOUR_MERIDIEM),
    _rule(PatternShape.ABSOLUTE_DATE_DEFAULT_TIME, _DATE),
    _rule(PatternShape.WEEKDAY_TIME_EXACT, _WEEKDAY, _CLOCK_MERIDIEM),
    _rule(PatternShape.WEEKDAY_TIME_MILITARY, _WEEKDAY, _CLOCK),
    _rule(PatternShape.WEEKDAY_HOUR_ONLY, _WEEKDAY, _HOUR_MERIDIEM),
    _rule(PatternShape.WEEKDAY_DEFAULT_TIME, _WEEKDAY),
    _rule(PatternShape.DAILY_TIME_EXACT, _CLOCK_MERIDIEM),
    _rule(PatternShape.DAILY_TIME_MILITARY, _CLOCK),
    _rule(PatternShape.DAILY_HOUR_ONLY, _HOUR_MERIDIEM),
    _rule(PatternShape.MONTHLY, "monthly"),
    _rule(PatternShape.BIWEEKLY, "biweekly"),
    _rule(PatternShape.WEEKLY, "weekly"),
    _rule(PatternShape.DAILY, "daily"),
)


def resolve_weekday(token: Optional[str]) -> Optional[int]:
    """Return the weekday index (Monday=0) for an English day token.

    The token must be at least three letters and a prefix of the full day
    name, so ``wed``, ``WED`` and ``Wednesday`` resolve while ``we`` and
    ``monthly`` do not.
    """

    if not token:
        return None
    lowered = token.lower()
    if len(lowered) < 3:
        return None
    for index, name in enumerate(WEEKDAY_NAMES):
        if name.startswith(lowered):
            return index
    return None


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` and ``\\r\\n`` only.

    Other characters ``str.splitlines`` treats as breaks (form feed,
    ``\\u2028`` and friends) stay inside the line and its payload.
    """

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def isolate_directive(line: str) -> Optional[Directive]:
    """Locate the trigger on a line and split out the recurrence spec."""

    match = _PREFIX_LINE.fullmatch(line)
    if match:
        return Directive(
            text=line,
            form=DirectiveForm.PREFIX,
            trigger_start=match.start("trigger"),
            spec_start=match.start("spec"),
            spec=match.group("spec"),
        )

    match = _SUFFIX_LINE.fullmatch(line)
    if match:
        return Directive(
            text=line,
            form=DirectiveForm.SUFFIX,
            trigger_start=match.start("trigger"),
            spec_start=match.start("spec"),
            spec=match.group("spec"),
            payload_start=match.start("payload"),
            payload=match.group("payload"),
        )
    return None


def _to_int(value: Optional[str], name: str, line: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ParseError(f"invalid {name} {value!r} in {line!r}") from exc


def _fields_from_match(match: re.Match, payload: str, line: str) -> Optional[RuleFields]:
    groups = match.groupdict()

    weekday = None
    if "weekday" in groups:
        weekday = resolve_weekday(groups["weekday"])
        if weekday is None:
            return None

    meridiem = groups.get("meridiem")
    return RuleFields(
        payload=payload.strip(),
        month=_to_int(groups.get("month"), "month", line),
        day=_to_int(groups.get("day"), "day", line),
        year=_to_int(groups.get("year"), "year", line),
        hour=_to_int(groups.get("hour"), "hour", line),
        minute=_to_int(groups.get("minute"), "minute", line),
        meridiem=meridiem.lower() if meridiem else None,
        weekday=weekday,
    )


def parse_directive(directive: Directive) -> Optional[Tuple[PatternShape, RuleFields]]:
    """Run the grammar table over an isolated directive, first match wins."""

    for rule in GRAMMAR:
        match = rule.pattern_for(directive.form).fullmatch(directive.spec)
        if not match:
            continue
        if directive.form is DirectiveForm.PREFIX:
            payload = match.group("payload")
        else:
            payload = directive.payload or ""
        fields = _fields_from_match(match, payload, directive.text)
        if fields is None:
            # Unknown weekday token, give the next shape a chance.
            continue
        return rule.shape, fields

    LOGGER.debug("Trigger without a recognizable schedule: %r", directive.text)
    return None


def extract(line: str) -> Optional[Tuple[PatternShape, RuleFields]]:
    """Classify a line and capture its fields, or ``None`` if not a directive."""

    directive = isolate_directive(line)
    if directive is None:
        return None
    return parse_directive(directive)
