"""Encode an :class:`~text2cal.models.event.EventDraft` as an iCalendar file.

Builds one VCALENDAR with a single VEVENT using the ``icalendar`` library:

- **DTSTART / DTEND** as local wall-clock times with an explicit ``TZID``
  parameter, so the event shows at the intended local time wherever the
  file is opened.
- **DESCRIPTION / LOCATION** only when the draft carries them.
- **ATTENDEE** once per address, as a ``mailto:`` URI.
- **VALARM** (``ACTION:DISPLAY``) with a relative ``TRIGGER;VALUE=DURATION``
  when the draft asks for a reminder; none when ``reminder_minutes`` is 0.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import Alarm, Calendar, Event, vCalAddress

from text2cal.exceptions import EncodingError
from text2cal.models.event import DEFAULT_FILENAME, CalendarArtifact, EventDraft

logger = logging.getLogger(__name__)

PRODUCT_ID = "-//text2cal//Text to Calendar//EN"
UID_DOMAIN = "text2cal"


def encode_event(
    draft: EventDraft,
    generated_at: datetime,
    timezone: str,
    filename: str = DEFAULT_FILENAME,
) -> CalendarArtifact:
    """Convert a draft into serialized iCalendar bytes.

    Args:
        draft: The validated event.
        generated_at: Creation instant, written as ``DTSTAMP`` and
            ``CREATED``.  Naive values are taken to be UTC.
        timezone: IANA timezone identifier attached to start and end.
        filename: Suggested file name for the artifact.

    Returns:
        A new :class:`CalendarArtifact`; the encoder keeps no reference to it.

    Raises:
        EncodingError: If ``start_time`` is not before ``end_time``, the
            timezone is unknown, or a value cannot be encoded.
    """
    if draft.start_time >= draft.end_time:
        raise EncodingError(
            f"endTime ({draft.end_time.isoformat()}) must be after "
            f"startTime ({draft.start_time.isoformat()})",
            diagnostic=draft.model_dump_json(),
        )
    _check_timezone(timezone)

    # icalendar rejects some values (e.g. line breaks in an address) while
    # building components, not only when serializing.
    try:
        calendar = Calendar()
        calendar.add("prodid", PRODUCT_ID)
        calendar.add("version", "2.0")
        calendar.add("calscale", "GREGORIAN")
        calendar.add("method", "PUBLISH")
        calendar.add_component(_build_event(draft, _as_utc(generated_at), timezone))
        content = calendar.to_ical()
    except (ValueError, TypeError) as exc:
        raise EncodingError(
            f"Calendar encoding failed: {exc}",
            diagnostic=draft.model_dump_json(),
        ) from exc

    logger.info(
        "Encoded event '%s' (%s -> %s, %s, reminder=%d min)",
        draft.summary,
        draft.start_time.isoformat(),
        draft.end_time.isoformat(),
        timezone,
        draft.reminder_minutes,
    )
    return CalendarArtifact(content=content, filename=filename)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_event(draft: EventDraft, stamp: datetime, timezone: str) -> Event:
    """Build the VEVENT component (with its VALARM, if any)."""
    event = Event()
    event.add("uid", f"{uuid.uuid4()}@{UID_DOMAIN}")
    event.add("dtstamp", stamp)
    event.add("created", stamp)
    event.add("summary", draft.summary)
    event.add("dtstart", draft.start_time, parameters={"TZID": timezone})
    event.add("dtend", draft.end_time, parameters={"TZID": timezone})

    if draft.description is not None:
        event.add("description", draft.description)
    if draft.location is not None:
        event.add("location", draft.location)

    for address in draft.attendees:
        event.add("attendee", vCalAddress(f"mailto:{address}"))

    event.add("status", "CONFIRMED")

    if draft.has_reminder:
        event.add_component(_build_alarm(draft))
    return event


def _build_alarm(draft: EventDraft) -> Alarm:
    """Build a display alarm firing ``reminder_minutes`` before the start."""
    alarm = Alarm()
    alarm.add("action", "DISPLAY")
    alarm.add("description", draft.summary)
    alarm.add(
        "trigger",
        timedelta(minutes=-draft.reminder_minutes),
        parameters={"VALUE": "DURATION"},
    )
    return alarm


def _check_timezone(timezone: str) -> None:
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise EncodingError(
            f"Unknown timezone: {timezone!r}", diagnostic=timezone
        ) from exc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)
