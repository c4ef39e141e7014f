"""Tests for the text2cal data models."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from text2cal.models import CalendarArtifact, ChatMessage, EventDraft, ExtractionRequest


def _make_draft(**overrides: object) -> EventDraft:
    defaults: dict = {
        "summary": "Lunch",
        "start_time": datetime(2025, 6, 1, 12, 0),
        "end_time": datetime(2025, 6, 1, 13, 30),
    }
    defaults.update(overrides)
    return EventDraft(**defaults)


class TestEventDraft:
    """Tests for :class:`EventDraft`."""

    def test_defaults(self) -> None:
        draft = _make_draft()

        assert draft.description is None
        assert draft.location is None
        assert draft.attendees == []
        assert draft.reminder_minutes == 15
        assert draft.has_reminder is True

    def test_duration(self) -> None:
        assert _make_draft().duration == timedelta(hours=1, minutes=30)

    def test_zero_reminder_means_no_alarm(self) -> None:
        assert _make_draft(reminder_minutes=0).has_reminder is False

    def test_empty_summary_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_draft(summary="")

    def test_negative_reminder_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_draft(reminder_minutes=-1)

    def test_inverted_times_accepted(self) -> None:
        """Ordering is checked by the encoder, not the model."""
        draft = _make_draft(end_time=datetime(2025, 6, 1, 11, 0))

        assert draft.duration < timedelta(0)

    def test_frozen(self) -> None:
        draft = _make_draft()

        with pytest.raises(ValidationError):
            draft.summary = "Dinner"  # type: ignore[misc]


class TestExtractionRequest:
    """Tests for :class:`ExtractionRequest`."""

    def _request(self, base_url: str = "https://api.example.com/v1/") -> ExtractionRequest:
        return ExtractionRequest(
            base_url=base_url,
            api_key="sk-secret",
            model="deepseek-chat",
            messages=(
                ChatMessage(role="system", content="rules"),
                ChatMessage(role="user", content="lunch"),
            ),
        )

    def test_endpoint_strips_trailing_slash(self) -> None:
        assert self._request().endpoint == "https://api.example.com/v1/chat/completions"

    def test_payload_shape(self) -> None:
        payload = self._request().payload()

        assert payload == {
            "model": "deepseek-chat",
            "messages": [
                {"role": "system", "content": "rules"},
                {"role": "user", "content": "lunch"},
            ],
            "temperature": 0.1,
            "stream": False,
        }

    def test_repr_hides_api_key(self) -> None:
        assert "sk-secret" not in repr(self._request())

    def test_invalid_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessage(role="assistant", content="hi")  # type: ignore[arg-type]


class TestCalendarArtifact:
    """Tests for :class:`CalendarArtifact`."""

    def test_defaults(self) -> None:
        artifact = CalendarArtifact(content=b"BEGIN:VCALENDAR\r\n")

        assert artifact.filename == "event.ics"
        assert artifact.media_type == "text/calendar"

    def test_write_to_creates_directory(self, tmp_path: Path) -> None:
        artifact = CalendarArtifact(content=b"data", filename="lunch.ics")

        path = artifact.write_to(tmp_path / "nested" / "out")

        assert path == tmp_path / "nested" / "out" / "lunch.ics"
        assert path.read_bytes() == b"data"
