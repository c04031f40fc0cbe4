"""Uniform degraded outcome for tasks that could not be attempted."""

from __future__ import annotations

from content_enhancer.core.types import PromptType, TaskOutcome

FALLBACK_CONFIDENCE = 0.1


def generate_fallback(
    prompt_type: PromptType, error: str, *, model_used: str = ""
) -> TaskOutcome:
    """Build a failed outcome with the fixed fallback payload.

    The payload always carries ``confidence == 0.1`` and at least one note,
    whatever ``error`` contains.
    """
    reason = error or "unknown error"
    return TaskOutcome(
        prompt_type=prompt_type,
        success=False,
        error=error,
        result={
            "confidence": FALLBACK_CONFIDENCE,
            "notes": [
                f"{prompt_type.value} prompt failed: {reason}",
                "Using fallback response",
            ],
        },
        model_used=model_used,
        fallback=True,
    )
