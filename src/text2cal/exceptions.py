"""Error taxonomy for the text2cal extraction pipeline.

Every failed extraction attempt is classified by exactly one subclass of
:class:`PipelineError`.  Each error carries its :class:`ErrorCategory` and a
``diagnostic`` payload (HTTP body, raw model reply, or transport detail) so
a user can tell a prompt-format regression from a network problem.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """User-facing classification of a failed extraction attempt."""

    INPUT_TOO_LONG = "input_too_long"
    UNAUTHENTICATED = "unauthenticated"
    TRANSPORT_FAILURE = "transport_failure"
    HTTP_FAILURE = "http_failure"
    MALFORMED_REPLY = "malformed_reply"
    VALIDATION_FAILURE = "validation_failure"
    ENCODING_FAILURE = "encoding_failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class PipelineError(Exception):
    """Base class for all classified pipeline failures.

    Attributes:
        category: The :class:`ErrorCategory` of this failure.
        diagnostic: Raw context for diagnosis (may be empty).
    """

    category: ErrorCategory

    def __init__(self, message: str, diagnostic: str = "") -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class InputTooLongError(PipelineError):
    """Raised when the submitted text exceeds the configured maximum length.

    Attributes:
        length: Length of the rejected input in characters.
        limit: The configured maximum.
    """

    category = ErrorCategory.INPUT_TOO_LONG

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"Input is {length} characters long; the limit is {limit}",
        )
        self.length = length
        self.limit = limit


class UnauthenticatedError(PipelineError):
    """Raised when no API credential is configured."""

    category = ErrorCategory.UNAUTHENTICATED

    def __init__(self, message: str = "API key is not set") -> None:
        super().__init__(message)


class TransportError(PipelineError):
    """Raised when the chat-completion request fails below the HTTP layer.

    Covers connection errors and network-level timeouts reported by the
    HTTP client.

    Attributes:
        detail: Description of the underlying transport failure.
    """

    category = ErrorCategory.TRANSPORT_FAILURE

    def __init__(self, detail: str) -> None:
        super().__init__(f"Request to the model endpoint failed: {detail}", detail)
        self.detail = detail


class HttpStatusError(PipelineError):
    """Raised when the endpoint answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the response.
        body: Raw response body, preserved for diagnostics.
    """

    category = ErrorCategory.HTTP_FAILURE

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"API call failed ({status_code})", body)
        self.status_code = status_code
        self.body = body


class MalformedReplyError(PipelineError):
    """Raised when no JSON object can be recovered from the model reply.

    Attributes:
        raw_content: The raw reply that could not be parsed.
    """

    category = ErrorCategory.MALFORMED_REPLY

    def __init__(self, message: str, raw_content: str) -> None:
        super().__init__(message, raw_content)
        self.raw_content = raw_content


class ReplyValidationError(PipelineError):
    """Raised when the reply JSON is missing a field or has the wrong type.

    Attributes:
        field: Name of the first offending field, as spelled in the reply.
        raw_content: The raw model reply.
    """

    category = ErrorCategory.VALIDATION_FAILURE

    def __init__(self, field: str, raw_content: str, reason: str = "") -> None:
        message = f"Invalid value for field {field!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, raw_content)
        self.field = field
        self.raw_content = raw_content


class EncodingError(PipelineError):
    """Raised when a draft cannot be turned into a calendar file."""

    category = ErrorCategory.ENCODING_FAILURE


class ExtractionTimeoutError(PipelineError):
    """Raised when an attempt exceeds its overall deadline.

    Attributes:
        timeout_seconds: The deadline that was exceeded.
    """

    category = ErrorCategory.TIMEOUT

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Extraction did not finish within {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds


class ExtractionCancelledError(PipelineError):
    """Raised when the caller cancels an in-flight attempt."""

    category = ErrorCategory.CANCELLED

    def __init__(self) -> None:
        super().__init__("Extraction was cancelled")
