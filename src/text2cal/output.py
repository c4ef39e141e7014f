"""Console output for the text2cal CLI.

Renders pipeline updates as plain text: one line per progress step, an
event block for a completed extraction, and a failure block that always
includes the error category and its raw diagnostic payload.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from text2cal.exceptions import PipelineError
from text2cal.models.event import EventDraft
from text2cal.pipeline import Progress

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH

# Long model replies are cut so the terminal stays readable.
_MAX_DIAGNOSTIC_CHARS = 2000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_progress(update: Progress) -> str:
    """Render a progress update as a single line."""
    return f"[{update.state.value}] {update.message}"


def format_draft(draft: EventDraft, path: Path | None = None) -> str:
    """Render an extracted event (and the written file, if any).

    Args:
        draft: The extracted event.
        path: Where the calendar file was written, if it was.

    Returns:
        A multi-line string ready for console display.
    """
    lines: list[str] = [_SEPARATOR, "  EVENT EXTRACTED", _SEPARATOR]
    lines.append(f"  Title: {draft.summary}")
    lines.append(f"  When: {_format_event_time(draft.start_time, draft.end_time)}")

    if draft.location is not None:
        lines.append(f"  Where: {draft.location}")

    if draft.attendees:
        lines.append(f"  Who: {', '.join(draft.attendees)}")

    if draft.has_reminder:
        lines.append(f"  Reminder: {draft.reminder_minutes} min before")
    else:
        lines.append("  Reminder: none")

    if draft.description is not None:
        lines.append("  Description:")
        for line in draft.description.splitlines() or [""]:
            lines.append(f"    {line}")

    if path is not None:
        lines.append(f"  Calendar file: {path}")

    lines.append(_SEPARATOR)
    return "\n".join(lines)


def format_failure(error: PipelineError) -> str:
    """Render a failed attempt with its category and diagnostic payload."""
    lines: list[str] = [
        f"Error [{error.category.value}]: {error}",
    ]
    diagnostic = error.diagnostic
    if diagnostic:
        if len(diagnostic) > _MAX_DIAGNOSTIC_CHARS:
            diagnostic = diagnostic[:_MAX_DIAGNOSTIC_CHARS] + "..."
        lines.append("--- Diagnostic ---")
        lines.append(diagnostic)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_event_time(start: datetime, end: datetime) -> str:
    """Format a time range, omitting the end date when it is the same day.

    Example: ``Sun, Jun 01 2025 12:00 - 13:30``.
    """
    start_str = start.strftime("%a, %b %d %Y %H:%M")
    if start.date() == end.date():
        return f"{start_str} - {end.strftime('%H:%M')}"
    return f"{start_str} - {end.strftime('%a, %b %d %Y %H:%M')}"
