"""Gemini adapter built on the google-genai SDK."""

from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
import httpx

from content_enhancer.exceptions import MalformedOutputError, ProviderError

from .base import CompletionRequest, CompletionResponse

log = logging.getLogger(__name__)


class GoogleGenAIAdapter:
    """Maps a chat-style request onto ``generate_content``.

    The system message becomes ``system_instruction``, the user message the
    contents, and the JSON requirement ``response_mime_type``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt or None,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            response_mime_type="application/json",
        )
        log.debug("generate_content model=%s task=%s", request.model, request.prompt_type)
        try:
            response = await self._client.aio.models.generate_content(
                model=request.model,
                contents=request.user_prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise ProviderError(
                f"Gemini API error: {e.code} - {e.message or e.status or 'Unknown error'}",
                status_code=e.code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        text = _response_text(response)
        if not text:
            raise MalformedOutputError("No response content from Gemini")

        return CompletionResponse(
            content=text, total_tokens=_total_tokens(response), raw=response
        )


def _response_text(response: Any) -> str | None:
    try:
        text = response.text
    except (AttributeError, ValueError):
        return None
    return text if isinstance(text, str) else None


def _total_tokens(response: Any) -> int | None:
    usage = getattr(response, "usage_metadata", None)
    total = getattr(usage, "total_token_count", None)
    return total if isinstance(total, int) and total >= 0 else None
