"""Core data types that flow through the enhancement pipeline.

This module defines the immutable data structures that represent one
enhancement request as it moves from the task catalog, through concurrent
dispatch, to the merged document. Each stage produces new values instead of
mutating shared state, which keeps the concurrent fan-out free of locking.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from enum import Enum
import math
import typing

# --- Minimal guard helpers (clarity > boilerplate) ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _is_non_negative_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _as_real(value: object) -> float | None:
    """Return ``value`` as a float, or None if it is not a real number.

    Integers too large for a float saturate to an infinity of the same sign.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    return None if math.isnan(number) else number


def is_unit_interval(value: object) -> bool:
    """Return True for a real number (not bool) within [0, 1]."""
    number = _as_real(value)
    return number is not None and 0.0 <= number <= 1.0


# --- Result Monad for Robust Error Handling ---
# Each dispatched task settles into exactly one of these, so the join at the
# end of dispatch handles successes and failures uniformly.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failure, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Prompt types ---


class PromptType(str, Enum):
    """Which slice of a page a task targets.

    The set is closed: every dispatch on a prompt type is an exhaustive
    ``match`` so a new member surfaces at every site that must handle it.
    """

    HEAD = "head"
    DEEPLINKS = "deeplinks"
    CONTENT = "content"
    IMAGES = "images"
    SCHEMA = "schema"

    def __str__(self) -> str:
        return self.value


def result_key(prompt_type: PromptType) -> str:
    """Return the payload field a prompt type contributes to the document."""
    match prompt_type:
        case PromptType.HEAD:
            return "head"
        case PromptType.DEEPLINKS:
            return "links"
        case PromptType.CONTENT:
            return "blocks"
        case PromptType.IMAGES:
            return "alts"
        case PromptType.SCHEMA:
            return "schema"
        case _:
            typing.assert_never(prompt_type)


# --- Task data ---


@dataclasses.dataclass(frozen=True, slots=True)
class TaskDescriptor:
    """One independent unit of enhancement work.

    Created fresh per request from the content map, profile and directive,
    and discarded after dispatch. ``build_error`` is set when the prompts
    could not be built; such a task settles to a fallback without a
    provider call, and its prompts may be empty.
    """

    prompt_type: PromptType
    system_prompt: str
    user_prompt: str
    model: str
    required_keys: frozenset[str]
    max_tokens: int = 1500
    build_error: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=isinstance(self.prompt_type, PromptType),
            message=f"must be a PromptType, got {self.prompt_type!r}",
            field_name="prompt_type",
            exc=TypeError,
        )
        prompt_fields = (
            ("system_prompt", "user_prompt") if self.build_error is None else ()
        )
        for name in (*prompt_fields, "model"):
            value = getattr(self, name)
            _require(
                condition=isinstance(value, str) and value.strip() != "",
                message="must be a non-empty str",
                field_name=name,
                exc=TypeError,
            )
        _require(
            condition=isinstance(self.required_keys, frozenset),
            message="must be a frozenset",
            field_name="required_keys",
            exc=TypeError,
        )
        _require(
            condition=_is_non_negative_int(self.max_tokens) and self.max_tokens > 0,
            message="must be a positive int",
            field_name="max_tokens",
        )


@dataclasses.dataclass(frozen=True, slots=True)
class TaskOutcome:
    """The resolved result of executing one task descriptor.

    Exactly one is created per dispatched task. ``result`` is the parsed
    provider payload on success; on a fallback failure it carries the
    degraded placeholder payload.
    """

    prompt_type: PromptType
    success: bool
    result: Mapping[str, typing.Any] | None = None
    error: str | None = None
    processing_time_ms: int = 0
    tokens_used: int = 0
    model_used: str = ""
    fallback: bool = False
    violations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=_is_non_negative_int(self.processing_time_ms),
            message="must be an int >= 0",
            field_name="processing_time_ms",
        )
        _require(
            condition=_is_non_negative_int(self.tokens_used),
            message="must be an int >= 0",
            field_name="tokens_used",
        )
        if self.success:
            _require(
                condition=isinstance(self.result, Mapping),
                message="successful outcome must carry a mapping result",
                field_name="result",
            )

    def to_dict(self) -> dict[str, typing.Any]:
        """Return a JSON-ready view of the outcome."""
        data: dict[str, typing.Any] = {
            "prompt_type": self.prompt_type.value,
            "success": self.success,
            "result": dict(self.result) if self.result is not None else None,
            "processing_time_ms": self.processing_time_ms,
            "tokens_used": self.tokens_used,
            "model_used": self.model_used,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.fallback:
            data["fallback"] = True
        if self.violations:
            data["violations"] = list(self.violations)
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class SettlementRecord:
    """A task descriptor paired with its outcome, in dispatch order."""

    descriptor: TaskDescriptor
    outcome: TaskOutcome

    def __post_init__(self) -> None:
        """Outcome must describe the same task as the descriptor."""
        _require(
            condition=self.descriptor.prompt_type == self.outcome.prompt_type,
            message=(
                f"outcome {self.outcome.prompt_type.value!r} does not match "
                f"descriptor {self.descriptor.prompt_type.value!r}"
            ),
            field_name="outcome.prompt_type",
        )


# --- Merge output ---


@dataclasses.dataclass(slots=True)
class ConfidenceAggregate:
    """Running sum of per-task confidences with an explicit empty case."""

    total: float = 0.0
    count: int = 0

    def add(self, confidence: object) -> None:
        """Count one successful task.

        A value outside [0, 1] (or not a number at all) is clamped; a task
        that reports no usable confidence still counts but adds nothing.
        """
        self.count += 1
        number = _as_real(confidence)
        if number is None:
            return
        self.total += min(max(number, 0.0), 1.0)

    @property
    def average(self) -> float:
        """Mean confidence, or 0.0 when no task succeeded."""
        if self.count == 0:
            return 0.0
        return self.total / self.count


@dataclasses.dataclass(frozen=True, slots=True)
class IndividualResult:
    """Per-task summary recorded in the merged document's metadata."""

    prompt_type: PromptType
    success: bool
    processing_time_ms: int = 0
    tokens_used: int = 0
    confidence: typing.Any = None
    changes_count: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        """Return the summary in its caller-facing shape."""
        if self.success:
            return {
                "prompt_type": self.prompt_type.value,
                "success": True,
                "confidence": self.confidence,
                "processing_time_ms": self.processing_time_ms,
                "tokens_used": self.tokens_used,
                "changes_count": self.changes_count,
            }
        return {
            "prompt_type": self.prompt_type.value,
            "success": False,
            "error": self.error,
            "processing_time_ms": self.processing_time_ms,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class MergeMetadata:
    """Aggregate bookkeeping for one merged enhancement request."""

    prompt_count: int
    successful_prompts: int
    failed_prompts: int
    individual_results: tuple[IndividualResult, ...]
    total_changes: int
    total_processing_time: int
    total_tokens: int

    def __post_init__(self) -> None:
        """Counts must agree with each other and with the summaries."""
        _require(
            condition=self.successful_prompts + self.failed_prompts
            == self.prompt_count,
            message="successful_prompts + failed_prompts must equal prompt_count",
            field_name="metadata",
        )
        _require(
            condition=len(self.individual_results) == self.prompt_count,
            message="must have one entry per settled task",
            field_name="individual_results",
        )

    def to_dict(self) -> dict[str, typing.Any]:
        """Return a JSON-ready view of the metadata."""
        return {
            "prompt_count": self.prompt_count,
            "successful_prompts": self.successful_prompts,
            "failed_prompts": self.failed_prompts,
            "individual_results": [r.to_dict() for r in self.individual_results],
            "total_changes": self.total_changes,
            "total_processing_time": self.total_processing_time,
            "total_tokens": self.total_tokens,
        }


@dataclasses.dataclass(frozen=True, slots=True)
class MergedDocument:
    """The unified, caller-facing result of one enhancement request."""

    head: Mapping[str, typing.Any]
    blocks: tuple[typing.Any, ...]
    links: tuple[typing.Any, ...]
    alts: tuple[typing.Any, ...]
    schema: Mapping[str, typing.Any]
    confidence: float
    notes: tuple[str, ...]
    metadata: MergeMetadata

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=is_unit_interval(self.confidence),
            message=f"must be within [0, 1], got {self.confidence!r}",
            field_name="confidence",
        )

    @property
    def total_changes(self) -> int:
        """Shortcut for ``metadata.total_changes``."""
        return self.metadata.total_changes

    def to_dict(self) -> dict[str, typing.Any]:
        """Return the JSON-ready envelope handed to downstream consumers."""
        return {
            "head": dict(self.head),
            "blocks": list(self.blocks),
            "links": list(self.links),
            "alts": list(self.alts),
            "schema": dict(self.schema),
            "confidence": self.confidence,
            "notes": list(self.notes),
            "metadata": self.metadata.to_dict(),
        }
