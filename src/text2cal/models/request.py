"""Request models for the chat-completion call."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEMPERATURE = 0.1


class ChatMessage(BaseModel):
    """A single role-tagged message of the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user"]
    content: str


class ExtractionRequest(BaseModel):
    """Everything needed for one chat-completion call.

    Built once per extraction attempt and never mutated.

    Attributes:
        base_url: Endpoint base URL, e.g. ``https://api.deepseek.com/v1``.
        api_key: Bearer credential (masked in ``repr``).
        model: Model identifier.
        messages: The system and user messages, in order.
        temperature: Sampling temperature; kept low so repeated extractions
            of the same text agree.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str = Field(repr=False)
    model: str
    messages: tuple[ChatMessage, ...]
    temperature: float = DEFAULT_TEMPERATURE

    @property
    def endpoint(self) -> str:
        """Full URL of the chat-completion endpoint."""
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def payload(self) -> dict[str, Any]:
        """Return the JSON body for the chat-completion POST."""
        return {
            "model": self.model,
            "messages": [message.model_dump() for message in self.messages],
            "temperature": self.temperature,
            "stream": False,
        }
