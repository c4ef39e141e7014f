"""Shared fixtures for calendar encoding and handoff tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

from text2cal.models.event import EventDraft


@pytest.fixture()
def make_draft() -> Callable[..., EventDraft]:
    """Return a factory building an EventDraft with sensible defaults."""

    def _make(**overrides: object) -> EventDraft:
        defaults: dict = {
            "summary": "Lunch with Bob",
            "start_time": datetime(2025, 6, 1, 13, 0),
            "end_time": datetime(2025, 6, 1, 14, 30),
            "location": "Blue Bottle",
            "description": "Bring the design notes",
            "attendees": ["bob@example.com"],
            "reminder_minutes": 30,
        }
        defaults.update(overrides)
        return EventDraft(**defaults)

    return _make
