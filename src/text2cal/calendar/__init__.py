"""iCalendar encoding and host calendar handoff."""

from __future__ import annotations

from text2cal.calendar.encoder import encode_event
from text2cal.calendar.handoff import (
    CalendarInsert,
    SystemCalendar,
    hand_off,
    to_calendar_insert,
    write_artifact,
)

__all__ = [
    "CalendarInsert",
    "SystemCalendar",
    "encode_event",
    "hand_off",
    "to_calendar_insert",
    "write_artifact",
]
