"""text2cal: natural-language text to iCalendar.

Extracts a single calendar event from free text with a chat-completion
model and encodes it as an RFC 5545 ``.ics`` file.
"""

from __future__ import annotations

from text2cal.calendar.encoder import encode_event
from text2cal.exceptions import ErrorCategory, PipelineError
from text2cal.llm import ChatCompletionClient
from text2cal.models.event import CalendarArtifact, EventDraft
from text2cal.models.request import ChatMessage, ExtractionRequest
from text2cal.parser import extract_json_object, parse_reply
from text2cal.pipeline import (
    Completed,
    ExtractionOrchestrator,
    Failed,
    PipelineState,
    Progress,
)
from text2cal.prompts import build_messages, build_system_prompt, build_user_message

__version__ = "0.1.0"

__all__ = [
    "CalendarArtifact",
    "ChatCompletionClient",
    "ChatMessage",
    "Completed",
    "ErrorCategory",
    "EventDraft",
    "ExtractionOrchestrator",
    "ExtractionRequest",
    "Failed",
    "PipelineError",
    "PipelineState",
    "Progress",
    "build_messages",
    "build_system_prompt",
    "build_user_message",
    "encode_event",
    "extract_json_object",
    "parse_reply",
]
