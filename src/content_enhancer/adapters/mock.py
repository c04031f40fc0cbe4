"""Deterministic offline adapter.

Used by default (``use_real_api=False``) for dry runs, examples and tests.
Responses can be scripted per prompt type: a dict is serialized as the
message content, a str is returned verbatim (so malformed JSON can be
simulated), and an exception instance is raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import json
from typing import Any

from content_enhancer.core.types import PromptType

from .base import CompletionRequest, CompletionResponse

type ScriptedResponse = Mapping[str, Any] | str | BaseException

_DEFAULT_PAYLOADS: dict[PromptType, dict[str, Any]] = {
    PromptType.HEAD: {
        "head": {
            "title": "Mock title",
            "metaDescription": "Mock description",
        },
        "confidence": 0.95,
        "notes": ["Mock head proposal"],
    },
    PromptType.DEEPLINKS: {
        "links": [{"selector": "a", "new_anchor": "Mock link", "new_href": "/mock"}],
        "confidence": 0.9,
        "notes": ["Mock deep-link proposal"],
    },
    PromptType.CONTENT: {
        "blocks": [{"selector": "h1", "new_text": "Mock content"}],
        "confidence": 0.9,
        "notes": ["Mock content proposal"],
    },
    PromptType.IMAGES: {
        "alts": [{"selector": "img", "new_alt": "Mock alt"}],
        "confidence": 0.9,
        "notes": ["Mock alt text proposal"],
    },
    PromptType.SCHEMA: {
        "schema": {"@context": "https://schema.org", "@type": "LocalBusiness"},
        "confidence": 0.9,
        "notes": ["Mock schema proposal"],
    },
}


class MockAdapter:
    """Deterministic stand-in for a completion provider."""

    def __init__(
        self,
        responses: Mapping[PromptType | str, ScriptedResponse] | None = None,
        *,
        delays: Mapping[PromptType | str, float] | None = None,
        total_tokens: int | None = None,
    ) -> None:
        self._responses = {PromptType(k): v for k, v in (responses or {}).items()}
        self._delays = {PromptType(k): v for k, v in (delays or {}).items()}
        self._total_tokens = total_tokens
        self.requests: list[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        prompt_type = request.prompt_type
        if prompt_type is not None and prompt_type in self._delays:
            await asyncio.sleep(self._delays[prompt_type])

        scripted = self._responses.get(prompt_type) if prompt_type else None
        if isinstance(scripted, BaseException):
            raise scripted
        if isinstance(scripted, str):
            content = scripted
        elif scripted is not None:
            content = json.dumps(scripted)
        else:
            payload = _DEFAULT_PAYLOADS.get(prompt_type) if prompt_type else None
            content = json.dumps(payload or {"confidence": 0.5, "notes": []})

        tokens = self._total_tokens
        if tokens is None:
            prompt_chars = len(request.system_prompt) + len(request.user_prompt)
            tokens = (prompt_chars + len(content)) // 4
        return CompletionResponse(content=content, total_tokens=tokens)
