"""Parse raw model replies into :class:`~text2cal.models.event.EventDraft`.

Models often wrap the requested JSON in prose or Markdown code fences, so
the parser first cuts the reply down to the span between the first ``{``
and the last ``}``, then decodes and validates that span.  Every failure is
raised as a classified error carrying the full raw reply.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from text2cal.exceptions import MalformedReplyError, ReplyValidationError
from text2cal.models.event import EventDraft
from text2cal.models.reply import EventReply

logger = logging.getLogger(__name__)


def extract_json_object(raw_reply: str) -> str:
    """Return the substring from the first ``{`` to the last ``}``.

    Args:
        raw_reply: The assistant reply text, possibly with surrounding noise.

    Returns:
        The candidate JSON object text, braces included.

    Raises:
        MalformedReplyError: If the reply has no ``{`` ... ``}`` pair.
    """
    start = raw_reply.find("{")
    end = raw_reply.rfind("}")
    if start == -1 or end < start:
        raise MalformedReplyError(
            "No JSON object found in model reply", raw_content=raw_reply
        )
    return raw_reply[start : end + 1]


def parse_reply(raw_reply: str) -> EventDraft:
    """Parse and validate a model reply.

    Null or absent ``location`` and ``description`` become ``None``; null or
    absent ``attendees`` becomes ``[]``; null or absent ``reminderMinutes``
    becomes 15.

    Args:
        raw_reply: The assistant reply text.

    Returns:
        The validated :class:`EventDraft`.

    Raises:
        MalformedReplyError: If no JSON object can be decoded from the reply.
        ReplyValidationError: If a field is missing or has the wrong type.
            ``field`` names the first offending field as spelled in the
            reply (e.g. ``"startTime"``).
    """
    candidate = extract_json_object(raw_reply)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedReplyError(
            f"Invalid JSON in model reply: {exc}", raw_content=raw_reply
        ) from exc

    try:
        reply = EventReply.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else "<root>"
        logger.warning("Model reply failed validation on %r: %s", field, first["msg"])
        raise ReplyValidationError(field, raw_reply, first["msg"]) from exc

    draft = reply.to_draft()
    logger.debug(
        "Parsed event '%s' (%s -> %s)",
        draft.summary,
        draft.start_time.isoformat(),
        draft.end_time.isoformat(),
    )
    return draft
