from __future__ import annotations

import pytest

from reminders.core.grammar import GRAMMAR, extract, isolate_directive, resolve_weekday
from reminders.core.models import DirectiveForm, PatternShape


@pytest.mark.parametrize(
    "line, shape",
    [
        ("/remind 4/29/2020 1:30pm a", PatternShape.ABSOLUTE_DATE_TIME_EXACT),
        ("/remind 4/29/2020 13:30 a", PatternShape.ABSOLUTE_DATE_TIME_MILITARY),
        ("/remind 4/29/20 1pm a", PatternShape.ABSOLUTE_DATE_HOUR_ONLY),
        ("/remind 4/29 a", PatternShape.ABSOLUTE_DATE_DEFAULT_TIME),
        ("/remind wed 1:30pm a", PatternShape.WEEKDAY_TIME_EXACT),
        ("/remind Wednesday 13:30 a", PatternShape.WEEKDAY_TIME_MILITARY),
        ("/remind WED 1pm a", PatternShape.WEEKDAY_HOUR_ONLY),
        ("/remind wed a", PatternShape.WEEKDAY_DEFAULT_TIME),
        ("/remind 1:30pm a", PatternShape.DAILY_TIME_EXACT),
        ("/remind 13:30 a", PatternShape.DAILY_TIME_MILITARY),
        ("/remind 1pm a", PatternShape.DAILY_HOUR_ONLY),
        ("/remind monthly a", PatternShape.MONTHLY),
        ("/remind biweekly a", PatternShape.BIWEEKLY),
        ("/remind weekly a", PatternShape.WEEKLY),
        ("/remind daily a", PatternShape.DAILY),
    ],
)
def test_each_shape_is_classified(line: str, shape: PatternShape) -> None:
    result = extract(line)
    assert result is not None
    assert result[0] is shape
    assert result[1].payload == "a"


def test_grammar_table_covers_every_shape_once() -> None:
    shapes = [rule.shape for rule in GRAMMAR]
    assert shapes == list(PatternShape)


def test_absolute_date_time_exact_fields() -> None:
    shape, fields = extract("/remind 4/29/2020 1:05PM dentist appointment")
    assert shape is PatternShape.ABSOLUTE_DATE_TIME_EXACT
    assert (fields.month, fields.day, fields.year) == (4, 29, 2020)
    assert (fields.hour, fields.minute, fields.meridiem) == (1, 5, "pm")
    assert fields.payload == "dentist appointment"


def test_default_time_leaves_time_fields_empty() -> None:
    shape, fields = extract("/remind 12/25 open presents")
    assert shape is PatternShape.ABSOLUTE_DATE_DEFAULT_TIME
    assert fields.year is None
    assert fields.hour is None
    assert fields.minute is None
    assert fields.meridiem is None


def test_date_with_hour_but_no_payload_falls_back_to_default_time() -> None:
    # The hour-only shape needs text after the time, so "1pm" becomes payload.
    shape, fields = extract("/remind 4/29 1pm")
    assert shape is PatternShape.ABSOLUTE_DATE_DEFAULT_TIME
    assert fields.payload == "1pm"


def test_trigger_aliases() -> None:
    assert extract("/rem daily stretch")[0] is PatternShape.DAILY
    assert extract("/r daily stretch")[0] is PatternShape.DAILY
    assert extract("/reminder daily stretch") is None


def test_free_text_after_trigger_is_not_a_directive() -> None:
    assert extract("/remind buy milk") is None


def test_plain_lines_are_not_directives() -> None:
    assert extract("buy milk") is None
    assert extract("") is None
    assert extract("  /remind daily indented") is None


def test_cadence_requires_trailing_payload_separator() -> None:
    assert extract("/remind daily") is None
    assert extract("/remind daily ") is not None


def test_monthly_is_not_read_as_monday() -> None:
    shape, fields = extract("/remind monthly review budget")
    assert shape is PatternShape.MONTHLY
    assert fields.weekday is None


def test_two_letter_weekday_falls_through() -> None:
    assert extract("/remind we 1pm lunch") is None


def test_weekday_tokens_resolve_by_prefix() -> None:
    assert resolve_weekday("Wednesday") == 2
    assert resolve_weekday("wed") == 2
    assert resolve_weekday("WED") == 2
    assert resolve_weekday("tues") == 1
    assert resolve_weekday("thurs") == 3
    assert resolve_weekday("sun") == 6
    assert resolve_weekday("we") is None
    assert resolve_weekday("weds") is None
    assert resolve_weekday("monthly") is None
    assert resolve_weekday(None) is None


def test_weekday_field_is_resolved_index() -> None:
    shape, fields = extract("/remind Fri 5:15pm weekly report")
    assert shape is PatternShape.WEEKDAY_TIME_EXACT
    assert fields.weekday == 4
    assert fields.payload == "weekly report"


def test_suffix_form_on_open_checklist_item() -> None:
    shape, fields = extract("- [ ] pay rent /remind monthly")
    assert shape is PatternShape.MONTHLY
    assert fields.payload == "pay rent"


def test_suffix_form_with_indent_and_time() -> None:
    shape, fields = extract("    - [ ] call mom   /rem sun 10am  ")
    assert shape is PatternShape.WEEKDAY_HOUR_ONLY
    assert fields.weekday == 6
    assert fields.hour == 10
    assert fields.payload == "call mom"


def test_suffix_form_absolute_date() -> None:
    shape, fields = extract("- [ ] file taxes /r 4/15/2025 9:00")
    assert shape is PatternShape.ABSOLUTE_DATE_TIME_MILITARY
    assert (fields.month, fields.day, fields.year) == (4, 15, 2025)
    assert (fields.hour, fields.minute) == (9, 0)
    assert fields.payload == "file taxes"


def test_suffix_form_rejects_completed_items() -> None:
    assert extract("- [x] pay rent /remind monthly") is None


def test_suffix_form_requires_spec_to_end_the_line() -> None:
    assert extract("- [ ] pay rent /remind monthly on time") is None


def test_isolate_directive_offsets() -> None:
    line = "- [ ] water plants /remind daily"
    directive = isolate_directive(line)
    assert directive is not None
    assert directive.form is DirectiveForm.SUFFIX
    assert line[directive.trigger_start:].startswith("/remind")
    assert directive.spec == "daily"
    assert line[directive.payload_start:].startswith("water plants")

    directive = isolate_directive("/remind daily water plants")
    assert directive.form is DirectiveForm.PREFIX
    assert directive.trigger_start == 0
    assert directive.spec_start == len("/remind ")
    assert directive.payload is None
