"""Invocation stage: run one task against the completion provider.

`TaskInvoker.invoke` is a total function. Provider errors, malformed output
and validation failures all come back as a `TaskOutcome` with
``success=False``; nothing raised by an adapter crosses this boundary.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import TYPE_CHECKING, Any, Literal

from content_enhancer.adapters.base import ChatMessage, CompletionRequest
from content_enhancer.core.types import TaskDescriptor, TaskOutcome
from content_enhancer.exceptions import (
    MalformedOutputError,
    PayloadValidationError,
    ProviderError,
)
from content_enhancer.pipeline.validator import validate_payload
from content_enhancer.telemetry import TelemetryContext

if TYPE_CHECKING:
    from content_enhancer.adapters.base import CompletionAdapter
    from content_enhancer.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.3

_FENCED_JSON = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
_OUTER_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_object(text: str) -> dict[str, Any]:
    """Decode provider text into a JSON object.

    Tolerates a surrounding code fence or prose around a single object.

    Raises:
        MalformedOutputError: If no JSON object can be decoded.
    """
    candidate = text.strip()
    fenced = _FENCED_JSON.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as first_error:
        match = _OUTER_OBJECT.search(candidate)
        if match is None:
            raise MalformedOutputError(
                f"Failed to parse provider response as JSON: {first_error}"
            ) from first_error
        try:
            value = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise MalformedOutputError(
                f"Failed to parse provider response as JSON: {e}"
            ) from e
    if not isinstance(value, dict):
        raise MalformedOutputError(
            f"Provider response must be a JSON object, got {type(value).__name__}"
        )
    return value


class TaskInvoker:
    """Executes one task descriptor through a completion adapter."""

    def __init__(
        self,
        adapter: CompletionAdapter,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        validation_policy: Literal["strict", "lenient"] = "strict",
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            adapter: Provider adapter performing the actual call.
            temperature: Fixed sampling temperature for every task.
            validation_policy: ``strict`` demotes payloads with violations to
                failures; ``lenient`` keeps them successful and logs.
            telemetry: Optional telemetry context.
        """
        self._adapter = adapter
        self._temperature = temperature
        self._validation_policy = validation_policy
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    def build_request(self, descriptor: TaskDescriptor) -> CompletionRequest:
        """Translate a descriptor into the provider-neutral request."""
        return CompletionRequest(
            model=descriptor.model,
            messages=(
                ChatMessage(role="system", content=descriptor.system_prompt),
                ChatMessage(role="user", content=descriptor.user_prompt),
            ),
            temperature=self._temperature,
            max_tokens=descriptor.max_tokens,
            prompt_type=descriptor.prompt_type,
        )

    async def invoke(self, descriptor: TaskDescriptor) -> TaskOutcome:
        """Run ``descriptor`` once and settle it into an outcome."""
        prompt_type = descriptor.prompt_type
        start = time.perf_counter()
        tokens = 0
        try:
            request = self.build_request(descriptor)
            with self._telemetry("enhance.task", prompt_type=prompt_type.value):
                response = await self._adapter.complete(request)
            tokens = response.total_tokens or 0
            payload = parse_json_object(response.content)
            violations = tuple(validate_payload(payload, descriptor.required_keys))
        except (ProviderError, MalformedOutputError) as e:
            return self._failed(descriptor, str(e), start, tokens)
        except Exception as e:  # Adapter or validator broke its contract
            return self._failed(
                descriptor, f"Unexpected {type(e).__name__}: {e}", start, tokens
            )

        elapsed_ms = _elapsed_ms(start)
        if violations:
            self._telemetry.count(
                "enhance.validation_violation", len(violations), prompt_type=prompt_type.value
            )
            if self._validation_policy == "strict":
                error = PayloadValidationError(violations)
                logger.warning("Task %s rejected: %s", prompt_type.value, error)
                return TaskOutcome(
                    prompt_type=prompt_type,
                    success=False,
                    error=str(error),
                    processing_time_ms=elapsed_ms,
                    tokens_used=tokens,
                    model_used=descriptor.model,
                    violations=violations,
                )
            logger.warning(
                "Task %s payload has violations (kept): %s",
                prompt_type.value,
                "; ".join(violations),
            )

        logger.debug(
            "Task %s succeeded in %d ms (%d tokens)",
            prompt_type.value,
            elapsed_ms,
            tokens,
        )
        return TaskOutcome(
            prompt_type=prompt_type,
            success=True,
            result=payload,
            processing_time_ms=elapsed_ms,
            tokens_used=tokens,
            model_used=descriptor.model,
            violations=violations,
        )

    def _failed(
        self, descriptor: TaskDescriptor, error: str, start: float, tokens: int
    ) -> TaskOutcome:
        elapsed_ms = _elapsed_ms(start)
        logger.warning(
            "Task %s failed after %d ms: %s", descriptor.prompt_type.value, elapsed_ms, error
        )
        self._telemetry.count("enhance.task_failed", prompt_type=descriptor.prompt_type.value)
        return TaskOutcome(
            prompt_type=descriptor.prompt_type,
            success=False,
            error=error,
            processing_time_ms=elapsed_ms,
            tokens_used=tokens,
            model_used=descriptor.model,
        )


def _elapsed_ms(start: float) -> int:
    return max(0, round((time.perf_counter() - start) * 1000))
