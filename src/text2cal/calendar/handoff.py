"""Hand an extracted event over to a host calendar application.

The host side (inserting into a system calendar, opening a file with the
default calendar app) lives outside this package.  This module defines the
:class:`SystemCalendar` protocol such a collaborator implements and maps an
:class:`~text2cal.models.event.EventDraft` onto the values it expects:

- **title / description / location** copied from the draft.
- **begin / end** as timezone-aware instants in the configured timezone.
- **has_alarm / reminder_minutes** from the draft's reminder setting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo

from text2cal.models.event import CalendarArtifact, EventDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarInsert:
    """Values passed to a host calendar's "insert event" screen.

    Attributes:
        title: Event title.
        description: Description, or ``None``.
        location: Location, or ``None``.
        begin: Timezone-aware start instant.
        end: Timezone-aware end instant.
        timezone: IANA timezone the instants are expressed in.
        has_alarm: Whether the host should set a reminder.
        reminder_minutes: Reminder lead time in minutes (0 without alarm).
    """

    title: str
    description: str | None
    location: str | None
    begin: datetime
    end: datetime
    timezone: str
    has_alarm: bool
    reminder_minutes: int

    @property
    def begin_millis(self) -> int:
        """Start as milliseconds since the Unix epoch."""
        return int(self.begin.timestamp() * 1000)

    @property
    def end_millis(self) -> int:
        """End as milliseconds since the Unix epoch."""
        return int(self.end.timestamp() * 1000)


class SystemCalendar(Protocol):
    """A host calendar application that accepts events and calendar files."""

    def insert_event(self, event: CalendarInsert) -> None:
        """Open the host's event editor pre-filled with *event*."""
        ...

    def open_file(self, path: Path, media_type: str) -> None:
        """Open the calendar file at *path* with the host's default app."""
        ...


def to_calendar_insert(draft: EventDraft, timezone: str) -> CalendarInsert:
    """Map a draft onto the values a host calendar expects.

    Args:
        draft: The validated event.
        timezone: IANA timezone of the draft's wall-clock times.

    Returns:
        A :class:`CalendarInsert` with timezone-aware instants.
    """
    tz = ZoneInfo(timezone)
    return CalendarInsert(
        title=draft.summary,
        description=draft.description,
        location=draft.location,
        begin=draft.start_time.replace(tzinfo=tz),
        end=draft.end_time.replace(tzinfo=tz),
        timezone=timezone,
        has_alarm=draft.has_reminder,
        reminder_minutes=draft.reminder_minutes,
    )


def write_artifact(artifact: CalendarArtifact, directory: Path) -> Path:
    """Write *artifact* into *directory* and return the file path."""
    path = artifact.write_to(directory)
    logger.info("Wrote calendar file %s (%d bytes)", path, len(artifact.content))
    return path


def hand_off(
    calendar: SystemCalendar,
    draft: EventDraft,
    artifact: CalendarArtifact,
    directory: Path,
    timezone: str,
    open_file: bool = False,
) -> Path:
    """Write the artifact and pass the event on to *calendar*.

    By default the host's event editor is opened with the draft's values;
    with ``open_file=True`` the written ``.ics`` file is opened instead.

    Returns:
        Path of the written calendar file.
    """
    path = write_artifact(artifact, directory)
    if open_file:
        calendar.open_file(path, artifact.media_type)
    else:
        calendar.insert_event(to_calendar_insert(draft, timezone))
    return path
