"""Completion provider adapters.

`build_adapter` selects the adapter for a configuration: the offline
`MockAdapter` unless ``use_real_api`` is set, then the provider named by
``provider``. Real adapters are imported lazily so the SDKs are only loaded
when used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from content_enhancer.exceptions import ConfigurationError

from .base import (
    ChatMessage,
    CompletionAdapter,
    CompletionRequest,
    CompletionResponse,
)
from .mock import MockAdapter

if TYPE_CHECKING:
    from content_enhancer.config import FrozenConfig


def build_adapter(config: FrozenConfig) -> CompletionAdapter:
    """Return the adapter the configuration asks for."""
    if not config.use_real_api:
        return MockAdapter()
    if not config.api_key:
        raise ConfigurationError("use_real_api=True requires an api_key")

    match config.provider:
        case "openai":
            from .chat_completions import ChatCompletionsAdapter

            return ChatCompletionsAdapter(
                config.api_key,
                base_url=config.base_url,
                timeout=config.request_timeout_s,
            )
        case "gemini":
            from .google_genai import GoogleGenAIAdapter

            return GoogleGenAIAdapter(config.api_key, timeout=config.request_timeout_s)
        case _:
            raise ConfigurationError(f"Unknown provider: {config.provider!r}")


__all__ = [
    "ChatMessage",
    "CompletionAdapter",
    "CompletionRequest",
    "CompletionResponse",
    "MockAdapter",
    "build_adapter",
]
