"""Tests for the iCalendar encoder.

Encoded artifacts are re-read with ``icalendar.Calendar.from_ical`` and
compared against the source draft; a few properties are also checked on
the raw bytes where the exact wire form matters (TZID and trigger type).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from icalendar import Calendar, vDuration

from text2cal.calendar.encoder import PRODUCT_ID, encode_event
from text2cal.exceptions import EncodingError, ErrorCategory
from text2cal.models.event import EventDraft

TIMEZONE = "Asia/Shanghai"
GENERATED_AT = datetime(2025, 5, 20, 8, 0, tzinfo=timezone.utc)

DraftFactory = Callable[..., EventDraft]


def _encode(draft: EventDraft, tz: str = TIMEZONE) -> bytes:
    return encode_event(draft, GENERATED_AT, tz).content


def _single_event(content: bytes):
    calendar = Calendar.from_ical(content)
    events = list(calendar.walk("VEVENT"))
    assert len(events) == 1
    return calendar, events[0]


def _attendees(event) -> list[str]:
    value = event.get("ATTENDEE")
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [str(item) for item in value]


class TestRoundTrip:
    """A standard reader sees the same event that was encoded."""

    def test_summary_times_and_reminder(self, make_draft: DraftFactory) -> None:
        draft = make_draft()

        calendar, event = _single_event(_encode(draft))

        assert str(event["SUMMARY"]) == draft.summary
        assert event["DTSTART"].dt.replace(tzinfo=None) == draft.start_time
        assert event["DTEND"].dt.replace(tzinfo=None) == draft.end_time
        alarms = list(calendar.walk("VALARM"))
        assert len(alarms) == 1
        trigger = alarms[0]["TRIGGER"].to_ical().decode()
        assert vDuration.from_ical(trigger) == timedelta(minutes=-30)

    def test_optional_fields(self, make_draft: DraftFactory) -> None:
        _, event = _single_event(_encode(make_draft()))

        assert str(event["LOCATION"]) == "Blue Bottle"
        assert str(event["DESCRIPTION"]) == "Bring the design notes"
        assert str(event["STATUS"]) == "CONFIRMED"

    def test_special_characters_survive(self, make_draft: DraftFactory) -> None:
        description = (
            "会议链接: https://zoom.us/j/1234567890?pwd=abc; ID: 123 456 7890, "
            "passcode: 4242\nSecond line with a backslash \\ and " + "x" * 120
        )
        draft = make_draft(description=description, summary="周会; 项目, 评审")

        _, event = _single_event(_encode(draft))

        assert str(event["DESCRIPTION"]) == description
        assert str(event["SUMMARY"]) == "周会; 项目, 评审"


class TestCalendarStructure:
    """Required calendar-level properties and wire format."""

    def test_header_properties(self, make_draft: DraftFactory) -> None:
        calendar, _ = _single_event(_encode(make_draft()))

        assert str(calendar["VERSION"]) == "2.0"
        assert str(calendar["PRODID"]) == PRODUCT_ID

    def test_crlf_line_endings(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft(description="y" * 300))

        assert content.endswith(b"\r\n")
        assert b"\n" not in content.replace(b"\r\n", b"")

    def test_lines_folded(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft(description="y" * 300))

        assert all(len(line) <= 75 for line in content.split(b"\r\n"))

    def test_created_and_stamp(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft())

        assert b"DTSTAMP:20250520T080000Z" in content
        assert b"CREATED:20250520T080000Z" in content

    def test_naive_generated_at_taken_as_utc(self, make_draft: DraftFactory) -> None:
        content = encode_event(make_draft(), datetime(2025, 5, 20, 8, 0), TIMEZONE).content

        assert b"DTSTAMP:20250520T080000Z" in content

    def test_uid_unique_per_call(self, make_draft: DraftFactory) -> None:
        draft = make_draft()

        _, first = _single_event(_encode(draft))
        _, second = _single_event(_encode(draft))

        assert str(first["UID"]) != str(second["UID"])


class TestTimezone:
    """Start and end are local times tagged with TZID."""

    def test_tzid_on_start_and_end(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft())

        assert b"DTSTART;TZID=Asia/Shanghai:20250601T130000" in content
        assert b"DTEND;TZID=Asia/Shanghai:20250601T143000" in content

    def test_not_converted_to_utc(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft(), tz="America/New_York")

        assert b"DTSTART;TZID=America/New_York:20250601T130000" in content
        assert b"DTSTART:20250601T170000Z" not in content

    def test_unknown_timezone_raises(self, make_draft: DraftFactory) -> None:
        with pytest.raises(EncodingError, match="Unknown timezone"):
            _encode(make_draft(), tz="Not/AZone")


class TestOptionalProperties:
    """Absent values are omitted; empty values are kept."""

    def test_absent_location_and_description_omitted(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft(location=None, description=None))

        assert b"LOCATION" not in content
        assert b"DESCRIPTION:" not in content.split(b"BEGIN:VALARM")[0]

    def test_attendees_one_per_entry(self, make_draft: DraftFactory) -> None:
        attendees = ["a@example.com", "b@example.com", "a@example.com"]

        _, event = _single_event(_encode(make_draft(attendees=attendees)))

        assert _attendees(event) == [f"mailto:{a}" for a in attendees]

    def test_no_attendees(self, make_draft: DraftFactory) -> None:
        assert b"ATTENDEE" not in _encode(make_draft(attendees=[]))

    def test_line_break_in_attendee_raises_encoding_error(self, make_draft: DraftFactory) -> None:
        draft = make_draft(attendees=["bob@example.com\nLOCATION:x"])

        with pytest.raises(EncodingError, match="Calendar encoding failed") as exc_info:
            _encode(draft)

        assert exc_info.value.category is ErrorCategory.ENCODING_FAILURE
        assert "LOCATION:x" in exc_info.value.diagnostic


class TestAlarm:
    """VALARM presence and trigger encoding."""

    def test_zero_reminder_has_no_alarm(self, make_draft: DraftFactory) -> None:
        content = _encode(make_draft(reminder_minutes=0))

        assert b"VALARM" not in content

    @pytest.mark.parametrize("minutes", [1, 15, 90, 1440])
    def test_exactly_one_duration_trigger(self, make_draft: DraftFactory, minutes: int) -> None:
        content = _encode(make_draft(reminder_minutes=minutes))

        assert content.count(b"BEGIN:VALARM") == 1
        expected = vDuration(timedelta(minutes=-minutes)).to_ical()
        assert b"TRIGGER;VALUE=DURATION:" + expected in content

    def test_display_action(self, make_draft: DraftFactory) -> None:
        calendar, _ = _single_event(_encode(make_draft()))
        alarm = list(calendar.walk("VALARM"))[0]

        assert str(alarm["ACTION"]) == "DISPLAY"
        assert str(alarm["DESCRIPTION"]) == "Lunch with Bob"


class TestOrdering:
    """Start must precede end."""

    @pytest.mark.parametrize(
        "end",
        [datetime(2025, 6, 1, 13, 0), datetime(2025, 6, 1, 12, 0)],
    )
    def test_end_not_after_start_raises(self, make_draft: DraftFactory, end: datetime) -> None:
        with pytest.raises(EncodingError) as exc_info:
            _encode(make_draft(end_time=end))

        assert exc_info.value.category is ErrorCategory.ENCODING_FAILURE
        assert "Lunch with Bob" in exc_info.value.diagnostic

    def test_overnight_event_ok(self, make_draft: DraftFactory) -> None:
        draft = make_draft(
            start_time=datetime(2025, 6, 1, 22, 0),
            end_time=datetime(2025, 6, 2, 1, 0),
        )

        _, event = _single_event(_encode(draft))

        assert event["DTEND"].dt.replace(tzinfo=None) == datetime(2025, 6, 2, 1, 0)
