"""OpenAI-compatible chat completions adapter built on httpx."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Self

import httpx

from content_enhancer.exceptions import MalformedOutputError, ProviderError

from .base import CompletionRequest, CompletionResponse

log = logging.getLogger(__name__)


class ChatCompletionsAdapter:
    """POSTs requests to ``<base_url>/chat/completions``.

    Timeouts are enforced by the httpx transport and surface as
    `ProviderError`. An injected ``client`` is not closed by this adapter.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        log.debug("POST %s model=%s task=%s", self._url, request.model, request.prompt_type)
        try:
            response = await self._client.post(
                self._url,
                json=request.to_payload(),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.TimeoutException as e:
            raise ProviderError(f"Provider request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Provider request failed: {e}") from e

        if response.is_error:
            raise ProviderError(
                f"Provider API error: {response.status_code} - "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedOutputError(f"Provider returned non-JSON body: {e}") from e

        content = _message_content(data)
        if not content:
            raise MalformedOutputError("No response content from provider")

        return CompletionResponse(
            content=content, total_tokens=_total_tokens(data), raw=data
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or "Unknown error"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return "Unknown error"


def _message_content(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


def _total_tokens(data: dict[str, Any]) -> int | None:
    usage = data.get("usage")
    if not isinstance(usage, dict):
        return None
    total = usage.get("total_tokens")
    if isinstance(total, int) and not isinstance(total, bool) and total >= 0:
        return total
    return None
