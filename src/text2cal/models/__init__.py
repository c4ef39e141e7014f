"""Data models for text2cal."""

from __future__ import annotations

from text2cal.models.event import CalendarArtifact, EventDraft
from text2cal.models.reply import EventReply
from text2cal.models.request import ChatMessage, ExtractionRequest

__all__ = [
    "CalendarArtifact",
    "ChatMessage",
    "EventDraft",
    "EventReply",
    "ExtractionRequest",
]
