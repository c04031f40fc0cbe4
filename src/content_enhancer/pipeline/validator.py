"""Structural and semantic checks for parsed provider payloads.

Record-only: the validator reports violations and never raises. Whether a
violation demotes a task to a failure is the invoker's validation policy.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from content_enhancer.core.types import is_unit_interval

# Expected container shape of each type-specific payload field
_FIELD_SHAPES: dict[str, type] = {
    "head": dict,
    "schema": dict,
    "links": list,
    "blocks": list,
    "alts": list,
}


def validate_payload(payload: Any, required_keys: Iterable[str]) -> list[str]:
    """Return violation messages for ``payload``; an empty list means valid.

    Args:
        payload: Parsed provider output for one task.
        required_keys: Field names that must be present.
    """
    if not isinstance(payload, Mapping):
        return [f"Payload must be a JSON object, got {type(payload).__name__}"]

    violations = [
        f"Missing required key: {key}"
        for key in sorted(required_keys)
        if key not in payload
    ]

    if not is_unit_interval(payload.get("confidence")):
        violations.append("Confidence must be a number between 0 and 1")

    notes = payload.get("notes")
    if not isinstance(notes, list) or not all(isinstance(n, str) for n in notes):
        violations.append("Notes must be an array of strings")

    for key, shape in _FIELD_SHAPES.items():
        if key in payload and not isinstance(payload[key], shape):
            kind = "an object" if shape is dict else "an array"
            violations.append(f"{key} must be {kind}")

    return violations
