"""Schema of the JSON object the model is asked to return.

:class:`EventReply` mirrors the camelCase field names from the system prompt
and checks types only: strings must be strings, times must match the fixed
local format, and ``reminderMinutes`` must be a non-negative integer.
Fields beyond the seven named ones are ignored.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from text2cal.models.event import DEFAULT_REMINDER_MINUTES, EventDraft

LOCAL_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
# strptime also accepts unpadded fields such as "2025-6-1T9:0:0".
_LOCAL_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)


class EventReply(BaseModel):
    """One event object as returned by the model.

    ``None`` values mean the field was null or absent in the reply.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    summary: StrictStr
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    location: StrictStr | None = None
    description: StrictStr | None = None
    attendees: list[StrictStr] | None = None
    reminder_minutes: StrictInt | None = Field(default=None, alias="reminderMinutes")

    @field_validator("summary")
    @classmethod
    def _summary_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("summary must not be blank")
        return value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_local_time(cls, value: Any) -> datetime:
        """Accept only ``YYYY-MM-DDTHH:mm:ss`` strings without an offset."""
        if not isinstance(value, str) or not _LOCAL_TIME_PATTERN.fullmatch(value):
            raise ValueError("expected a string formatted as YYYY-MM-DDTHH:mm:ss")
        return datetime.strptime(value, LOCAL_TIME_FORMAT)

    @field_validator("reminder_minutes")
    @classmethod
    def _reminder_not_negative(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("reminderMinutes must not be negative")
        return value

    def to_draft(self) -> EventDraft:
        """Apply defaults for null fields and return an :class:`EventDraft`."""
        return EventDraft(
            summary=self.summary,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            location=self.location,
            attendees=list(self.attendees) if self.attendees is not None else [],
            reminder_minutes=(
                self.reminder_minutes
                if self.reminder_minutes is not None
                else DEFAULT_REMINDER_MINUTES
            ),
        )
