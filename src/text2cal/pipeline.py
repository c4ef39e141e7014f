"""Orchestrator for the text-to-calendar workflow.

Wires the components together for a single extraction attempt: prompt
construction, the chat-completion call, reply parsing and calendar encoding.
The entry point is :meth:`ExtractionOrchestrator.submit`, an async generator
yielding :class:`Progress` updates followed by exactly one terminal
:class:`Completed` or :class:`Failed`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from enum import Enum
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from text2cal.calendar.encoder import encode_event
from text2cal.config import Settings
from text2cal.exceptions import (
    EncodingError,
    ErrorCategory,
    ExtractionCancelledError,
    ExtractionTimeoutError,
    InputTooLongError,
    PipelineError,
)
from text2cal.llm import ChatCompletionClient
from text2cal.models.event import DEFAULT_FILENAME, CalendarArtifact, EventDraft
from text2cal.models.request import ExtractionRequest
from text2cal.parser import parse_reply
from text2cal.prompts import build_messages

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States and updates
# ---------------------------------------------------------------------------


class PipelineState(str, Enum):
    """Lifecycle of one extraction attempt."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_MODEL = "awaiting_model"
    ENCODING = "encoding"
    COMPLETED = "completed"
    FAILED = "failed"


_ACTIVE_STATES = frozenset(
    {PipelineState.SUBMITTING, PipelineState.AWAITING_MODEL, PipelineState.ENCODING}
)

ANALYZING_MESSAGE = "Analyzing text..."
PARSING_MESSAGE = "Parsing event..."
GENERATING_MESSAGE = "Generating calendar file..."


@dataclass(frozen=True)
class Progress:
    """Non-terminal progress notification.

    Attributes:
        state: State the attempt is in when the notification is sent.
        message: Short human-readable description of the current step.
    """

    state: PipelineState
    message: str


@dataclass(frozen=True)
class Completed:
    """Terminal success: the validated draft and its calendar file."""

    draft: EventDraft
    artifact: CalendarArtifact


@dataclass(frozen=True)
class Failed:
    """Terminal failure carrying exactly one classified error."""

    error: PipelineError

    @property
    def category(self) -> ErrorCategory:
        return self.error.category

    @property
    def diagnostic(self) -> str:
        return self.error.diagnostic


PipelineUpdate = Union[Progress, Completed, Failed]


def _utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ExtractionOrchestrator:
    """Runs extraction attempts, one at a time.

    Args:
        client: Chat-completion client; its connection pool is shared by
            all attempts.
        settings_provider: Called once per submission for the endpoint,
            credential, model, timezone and limits.  Settings are never
            stored between attempts.
        clock: Returns the current instant; used for the prompt's reference
            date and the calendar file's creation stamp.
        filename: Suggested file name for produced artifacts.
    """

    def __init__(
        self,
        client: ChatCompletionClient,
        settings_provider: Callable[[], Settings],
        clock: Callable[[], datetime] = _utc_now,
        filename: str = DEFAULT_FILENAME,
    ) -> None:
        self._client = client
        self._settings_provider = settings_provider
        self._clock = clock
        self._filename = filename
        self._state = PipelineState.IDLE
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> PipelineState:
        """Current state of the most recent attempt."""
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def submit(self, text: str) -> AsyncIterator[PipelineUpdate]:
        """Run one extraction attempt for *text*.

        Yields:
            :class:`Progress` updates, then exactly one :class:`Completed`
            or :class:`Failed`.

        Raises:
            RuntimeError: If another attempt is still in progress on this
                orchestrator.
        """
        if self._state in _ACTIVE_STATES:
            raise RuntimeError("An extraction is already in progress")

        settings = self._settings_provider()
        if len(text) > settings.max_input_chars:
            error = InputTooLongError(len(text), settings.max_input_chars)
            logger.warning("Rejected submission: %s", error)
            self._state = PipelineState.FAILED
            yield Failed(error)
            return

        self._transition(PipelineState.SUBMITTING)
        # None marks the end of the task; it only surfaces when the task ended
        # without emitting a terminal update.
        updates: asyncio.Queue[PipelineUpdate | None] = asyncio.Queue()
        task = asyncio.create_task(self._run(text, settings, updates.put_nowait))
        task.add_done_callback(lambda _: updates.put_nowait(None))
        self._task = task

        try:
            while True:
                update = await updates.get()
                if update is None:
                    if task.cancelled():
                        self._state = PipelineState.FAILED
                        yield Failed(ExtractionCancelledError())
                        return
                    task.result()
                    raise RuntimeError("Extraction ended without a terminal update")
                yield update
                if isinstance(update, (Completed, Failed)):
                    return
        finally:
            if not task.done():
                task.cancel()
            if self._state in _ACTIVE_STATES:
                self._state = PipelineState.FAILED
            self._task = None

    def cancel(self) -> None:
        """Cancel the in-flight attempt, aborting its HTTP request.

        The attempt's update stream then ends with a
        :class:`Failed` carrying :class:`ExtractionCancelledError`.  Does
        nothing when no attempt is running.
        """
        if self._task is not None and not self._task.done():
            logger.info("Cancelling in-flight extraction")
            self._task.cancel()

    async def run(self, text: str) -> Completed:
        """Run an attempt to completion and return its result.

        Raises:
            PipelineError: The classified error of a failed attempt.
        """
        async for update in self.submit(text):
            if isinstance(update, Completed):
                return update
            if isinstance(update, Failed):
                raise update.error
        raise RuntimeError("Extraction ended without a terminal update")

    # ------------------------------------------------------------------
    # Attempt stages
    # ------------------------------------------------------------------

    async def _run(
        self,
        text: str,
        settings: Settings,
        emit: Callable[[PipelineUpdate], None],
    ) -> None:
        """Run the attempt and emit its terminal update."""
        try:
            completed = await self._attempt(text, settings, emit)
        except PipelineError as exc:
            self._state = PipelineState.FAILED
            logger.error("Extraction failed [%s]: %s", exc.category.value, exc)
            if exc.diagnostic:
                logger.debug("Diagnostic payload:\n%s", exc.diagnostic)
            emit(Failed(exc))
        except asyncio.CancelledError:
            # The task belongs to this orchestrator; cancellation ends the
            # attempt rather than propagating.
            self._state = PipelineState.FAILED
            emit(Failed(ExtractionCancelledError()))
        except Exception:
            # Unclassified errors surface to the caller of submit(), but the
            # orchestrator must accept the next submission.
            self._state = PipelineState.FAILED
            logger.exception("Extraction crashed with an unclassified error")
            raise
        else:
            self._transition(PipelineState.COMPLETED)
            emit(completed)

    async def _attempt(
        self,
        text: str,
        settings: Settings,
        emit: Callable[[PipelineUpdate], None],
    ) -> Completed:
        now = self._clock()
        request = ExtractionRequest(
            base_url=settings.base_url,
            api_key=settings.api_key,
            model=settings.model,
            messages=build_messages(text, _local_date(now, settings.timezone)),
        )

        self._transition(PipelineState.AWAITING_MODEL)
        emit(Progress(PipelineState.AWAITING_MODEL, ANALYZING_MESSAGE))

        try:
            return await asyncio.wait_for(
                self._extract_and_encode(request, settings, now, emit),
                timeout=settings.deadline_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ExtractionTimeoutError(settings.deadline_seconds) from exc

    async def _extract_and_encode(
        self,
        request: ExtractionRequest,
        settings: Settings,
        now: datetime,
        emit: Callable[[PipelineUpdate], None],
    ) -> Completed:
        reply = await self._client.complete(request)

        emit(Progress(PipelineState.AWAITING_MODEL, PARSING_MESSAGE))
        draft = parse_reply(reply)

        self._transition(PipelineState.ENCODING)
        emit(Progress(PipelineState.ENCODING, GENERATING_MESSAGE))
        artifact = encode_event(draft, now, settings.timezone, self._filename)
        return Completed(draft=draft, artifact=artifact)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _transition(self, state: PipelineState) -> None:
        logger.info("Extraction state: %s -> %s", self._state.value, state.value)
        self._state = state


def _local_date(now: datetime, timezone: str) -> date:
    """Return the calendar date of *now* in *timezone*."""
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise EncodingError(f"Unknown timezone: {timezone!r}", diagnostic=timezone) from exc
    return now.astimezone(tz).date()
