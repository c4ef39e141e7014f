"""Event data models.

- :class:`EventDraft` -- a validated event extracted from a model reply,
  with naive local wall-clock datetimes.
- :class:`CalendarArtifact` -- serialized iCalendar bytes plus a suggested
  filename, handed to the caller once encoding succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_REMINDER_MINUTES = 15
DEFAULT_FILENAME = "event.ics"
CALENDAR_MEDIA_TYPE = "text/calendar"


class EventDraft(BaseModel):
    """A calendar event extracted from natural-language text.

    ``start_time`` and ``end_time`` are local wall-clock times without an
    offset; the timezone is attached when the event is encoded.  The parser
    does not check that ``end_time`` follows ``start_time`` -- the encoder
    does.

    Attributes:
        summary: Event title.
        start_time: Local start time.
        end_time: Local end time.
        description: Free-text description, or ``None`` when absent.
        location: Event location, or ``None`` when absent.
        attendees: Attendee e-mail addresses in reply order, duplicates kept.
        reminder_minutes: Minutes before the start to remind; ``0`` means
            no reminder.
    """

    model_config = ConfigDict(frozen=True)

    summary: str = Field(min_length=1)
    start_time: datetime
    end_time: datetime
    description: str | None = None
    location: str | None = None
    attendees: list[str] = Field(default_factory=list)
    reminder_minutes: int = Field(default=DEFAULT_REMINDER_MINUTES, ge=0)

    @property
    def duration(self) -> timedelta:
        """Length of the event (negative if the times are inverted)."""
        return self.end_time - self.start_time

    @property
    def has_reminder(self) -> bool:
        """Whether an alarm should be attached to the event."""
        return self.reminder_minutes > 0


@dataclass(frozen=True)
class CalendarArtifact:
    """Serialized calendar file owned by the caller.

    Attributes:
        content: iCalendar bytes with CRLF line endings.
        filename: Suggested file name.
        media_type: MIME type to use when handing the file to another app.
    """

    content: bytes
    filename: str = DEFAULT_FILENAME
    media_type: str = CALENDAR_MEDIA_TYPE

    def write_to(self, directory: Path) -> Path:
        """Write the content to ``directory / filename`` and return the path."""
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.content)
        return path
