"""Provider-neutral completion request/response and the adapter protocol.

Adapters translate a `CompletionRequest` into one provider call. They raise
`ProviderError` for transport/HTTP failures and `MalformedOutputError` when
the provider answers without usable message content; the invoker turns
both into failed task outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from content_enhancer.core.types import PromptType

JSON_OBJECT_FORMAT: dict[str, str] = {"type": "json_object"}


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One chat message in provider wire order."""

    role: str
    content: str


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """Everything an adapter needs for one call.

    ``prompt_type`` identifies the task for logging and offline adapters; it
    is not part of the provider payload.
    """

    model: str
    messages: tuple[ChatMessage, ...]
    temperature: float
    max_tokens: int
    response_format: dict[str, str] = field(
        default_factory=lambda: dict(JSON_OBJECT_FORMAT)
    )
    prompt_type: PromptType | None = None

    @property
    def system_prompt(self) -> str:
        """Content of the first system message, or an empty string."""
        return next((m.content for m in self.messages if m.role == "system"), "")

    @property
    def user_prompt(self) -> str:
        """Content of the first user message, or an empty string."""
        return next((m.content for m in self.messages if m.role == "user"), "")

    def to_payload(self) -> dict[str, Any]:
        """Chat-completions request body."""
        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": dict(self.response_format),
        }


@dataclass(frozen=True, slots=True)
class CompletionResponse:
    """The provider's message text and token accounting, if any."""

    content: str
    total_tokens: int | None = None
    raw: Any = None


@runtime_checkable
class CompletionAdapter(Protocol):
    """Protocol for completion providers."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Perform exactly one provider call for ``request``."""
        ...
