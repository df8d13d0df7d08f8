from __future__ import annotations

import asyncio
from datetime import datetime

from reminders.core.errors import SinkError
from reminders.core.processor import ReminderProcessor


class FakeSink:
    def __init__(self, fail_on: "set[str] | None" = None) -> None:
        self.sent: list[tuple[datetime, str]] = []
        self._fail_on = fail_on or set()

    async def publish(self, reference: datetime, message: str) -> None:
        if message in self._fail_on:
            raise SinkError(f"could not deliver {message}")
        self.sent.append((reference, message))


class FakeSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# 2024-01-01 is a Monday in ISO week 1.
MONDAY_8AM = datetime(2024, 1, 1, 8, 0)

NOTES = "\n".join(
    [
        "# Home",
        "/remind daily take vitamins",
        "/remind weekly plan the week",
        "/remind biweekly payroll",
        "- [ ] water plants /rem mon",
        "- [x] done already /remind daily",
        "/remind buy milk",
        "/remind 2/30 impossible",
        "/remind 5pm evening walk",
    ]
)


def test_scan_publishes_every_due_line() -> None:
    sink = FakeSink()
    processor = ReminderProcessor(sink)

    summary = asyncio.run(processor.scan(NOTES, MONDAY_8AM))

    assert [message for _, message in sink.sent] == [
        "take vitamins",
        "plan the week",
        "water plants",
    ]
    assert all(reference == MONDAY_8AM for reference, _ in sink.sent)
    assert summary.lines == 9
    assert summary.fired == 3
    assert summary.failed == 1
    # daily, weekly, biweekly, suffix mon, 2/30 and 5pm.
    assert summary.directives == 6


def test_parse_error_does_not_abort_scan() -> None:
    sink = FakeSink()
    processor = ReminderProcessor(sink)
    text = "/remind 25:00 broken\n/remind daily still sent"

    summary = asyncio.run(processor.scan(text, MONDAY_8AM))

    assert [message for _, message in sink.sent] == ["still sent"]
    assert summary.failed == 1


def test_sink_error_does_not_abort_scan() -> None:
    sink = FakeSink(fail_on={"first"})
    processor = ReminderProcessor(sink)
    text = "/remind daily first\n/remind daily second"

    summary = asyncio.run(processor.scan(text, MONDAY_8AM))

    assert [message for _, message in sink.sent] == ["second"]
    assert summary.fired == 1
    assert summary.failed == 1


def test_publish_delay_only_after_firing() -> None:
    sink = FakeSink()
    sleep = FakeSleep()
    processor = ReminderProcessor(sink, publish_delay=2.0, sleep=sleep)
    text = "/remind daily a\n/remind 9am not now\nplain text\n/remind daily b"

    asyncio.run(processor.scan(text, MONDAY_8AM))

    assert sleep.calls == [2.0, 2.0]


def test_no_delay_when_disabled() -> None:
    sink = FakeSink()
    sleep = FakeSleep()
    processor = ReminderProcessor(sink, publish_delay=0.0, sleep=sleep)

    asyncio.run(processor.scan("/remind daily a", MONDAY_8AM))

    assert sink.sent
    assert sleep.calls == []


def test_handle_returns_decision_without_publishing_when_not_due() -> None:
    sink = FakeSink()
    processor = ReminderProcessor(sink)

    decision = asyncio.run(processor.handle("/remind monthly rent", MONDAY_8AM))

    # 2024-01-01 is also the first of the month.
    assert decision.fired
    assert sink.sent == [(MONDAY_8AM, "rent")]

    decision = asyncio.run(processor.handle("/remind monthly rent", datetime(2024, 1, 2, 8, 0)))
    assert not decision.fired
    assert len(sink.sent) == 1


def test_only_newlines_split_lines() -> None:
    sink = FakeSink()
    processor = ReminderProcessor(sink)
    text = "/remind daily call\x0cmom\r\n/remind daily water plants\n"

    summary = asyncio.run(processor.scan(text, MONDAY_8AM))

    assert [message for _, message in sink.sent] == ["call\x0cmom", "water plants"]
    assert summary.lines == 2


def test_empty_text_has_no_lines() -> None:
    summary = asyncio.run(ReminderProcessor(FakeSink()).scan("", MONDAY_8AM))
    assert summary.lines == 0
