"""Chat-completion client for event extraction.

Sends one OpenAI-compatible ``POST {base_url}/chat/completions`` request per
extraction attempt over a shared ``httpx.AsyncClient`` and returns the raw
assistant reply text.  Failures are raised as classified
:class:`~text2cal.exceptions.PipelineError` subclasses and are never retried
here; a new attempt is up to the user.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from text2cal.exceptions import (
    HttpStatusError,
    MalformedReplyError,
    TransportError,
    UnauthenticatedError,
)
from text2cal.models.request import ExtractionRequest

logger = logging.getLogger(__name__)

# Long inputs make the model slow to answer, so reads get minutes, not seconds.
DEFAULT_TIMEOUT = httpx.Timeout(180.0, connect=30.0)


class ChatCompletionClient:
    """Client for a chat-completion HTTP endpoint.

    The underlying connection pool may be shared between attempts; it holds
    no attempt-specific state.

    Args:
        http_client: An existing ``httpx.AsyncClient`` to reuse.  When
            omitted, the client creates (and later closes) its own.
        timeout: Default per-request timeout used when creating the
            ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> ChatCompletionClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def complete(
        self,
        request: ExtractionRequest,
        timeout: float | None = None,
    ) -> str:
        """Send *request* and return the assistant reply content.

        Args:
            request: The immutable request for this attempt.
            timeout: Optional per-call timeout in seconds overriding the
                client default.

        Returns:
            ``choices[0].message.content`` from the response body.

        Raises:
            UnauthenticatedError: If the credential is empty or blank.  No
                request is sent.
            TransportError: On connection errors, network timeouts and an
                unusable endpoint URL.
            HttpStatusError: On a non-2xx response.
            MalformedReplyError: If a 2xx body does not carry a reply.
        """
        if not request.api_key.strip():
            raise UnauthenticatedError()

        headers = {
            "Authorization": f"Bearer {request.api_key}",
            "Content-Type": "application/json",
        }
        extra: dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout

        logger.debug("POST %s (model=%s)", request.endpoint, request.model)
        try:
            response = await self._http.post(
                request.endpoint,
                json=request.payload(),
                headers=headers,
                **extra,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Chat-completion request timed out: %r", exc)
            raise TransportError(f"timed out: {exc!r}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Chat-completion request failed: %r", exc)
            raise TransportError(repr(exc)) from exc

        if not response.is_success:
            logger.error(
                "Chat-completion endpoint returned %d: %s",
                response.status_code,
                response.text[:500],
            )
            raise HttpStatusError(response.status_code, response.text)

        content = self._extract_content(response)
        logger.debug("Raw model reply:\n%s", content)
        return content

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_content(response: httpx.Response) -> str:
        """Pull ``choices[0].message.content`` out of a response body.

        Raises:
            MalformedReplyError: If the body is not JSON or the content is
                missing or not a string.
        """
        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, LookupError, TypeError) as exc:
            raise MalformedReplyError(
                f"Response body has no reply content: {exc}",
                raw_content=response.text,
            ) from exc

        if not isinstance(content, str):
            raise MalformedReplyError(
                "Reply content is not a string", raw_content=response.text
            )
        return content
