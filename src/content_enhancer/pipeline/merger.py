"""Result merger: combine settled task outcomes into one merged document.

Records are folded strictly in dispatch order, so the document depends only
on that order and never on network timing. Successful outcomes feed the
content accumulators; failed outcomes only add one explanatory note and a
summary entry.

Collision rules:
- head: shallow merge, later task wins per key
- links/blocks/alts: appended in order
- schema: replaced wholesale by the last successful schema task
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import copy
import dataclasses
import logging
import typing
from typing import Any

from content_enhancer.core.types import (
    ConfidenceAggregate,
    IndividualResult,
    MergedDocument,
    MergeMetadata,
    PromptType,
    SettlementRecord,
    TaskOutcome,
)
from content_enhancer.telemetry import TelemetryContext, TelemetryContextProtocol

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class _Accumulator:
    """Mutable state local to a single merge call."""

    head: dict[str, Any] = dataclasses.field(default_factory=dict)
    blocks: list[Any] = dataclasses.field(default_factory=list)
    links: list[Any] = dataclasses.field(default_factory=list)
    alts: list[Any] = dataclasses.field(default_factory=list)
    schema: dict[str, Any] = dataclasses.field(default_factory=dict)
    notes: list[str] = dataclasses.field(default_factory=list)
    summaries: list[IndividualResult] = dataclasses.field(default_factory=list)
    confidence: ConfidenceAggregate = dataclasses.field(
        default_factory=ConfidenceAggregate
    )
    successful: int = 0
    failed: int = 0


def _items(value: Any) -> list[Any]:
    return copy.deepcopy(list(value)) if isinstance(value, list) else []


class ResultMerger:
    """Fold an ordered list of settlement records into a `MergedDocument`."""

    def __init__(self, telemetry: TelemetryContextProtocol | None = None) -> None:
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    def merge(self, records: Sequence[SettlementRecord]) -> MergedDocument:
        """Merge ``records`` (in dispatch order) into one document."""
        acc = _Accumulator()
        with self._telemetry("enhance.merge", record_count=len(records)):
            for record in records:
                outcome = record.outcome
                if outcome.success and outcome.result is not None:
                    self._merge_success(acc, outcome, outcome.result)
                else:
                    self._merge_failure(acc, outcome)

        schema_changes = 1 if acc.schema else 0
        total_changes = (
            len(acc.blocks) + len(acc.links) + len(acc.alts) + len(acc.head) + schema_changes
        )
        metadata = MergeMetadata(
            prompt_count=len(records),
            successful_prompts=acc.successful,
            failed_prompts=acc.failed,
            individual_results=tuple(acc.summaries),
            total_changes=total_changes,
            total_processing_time=sum(s.processing_time_ms for s in acc.summaries),
            total_tokens=sum(s.tokens_used or 0 for s in acc.summaries),
        )
        document = MergedDocument(
            head=acc.head,
            blocks=tuple(acc.blocks),
            links=tuple(acc.links),
            alts=tuple(acc.alts),
            schema=acc.schema,
            confidence=acc.confidence.average,
            notes=tuple(acc.notes),
            metadata=metadata,
        )
        logger.debug(
            "Merged %d tasks: %d succeeded, %d failed, %d changes, confidence %.2f",
            metadata.prompt_count,
            metadata.successful_prompts,
            metadata.failed_prompts,
            total_changes,
            document.confidence,
        )
        return document

    def _merge_success(
        self, acc: _Accumulator, outcome: TaskOutcome, result: Mapping[str, Any]
    ) -> None:
        acc.successful += 1
        prompt_type = outcome.prompt_type
        changes = 0

        match prompt_type:
            case PromptType.HEAD:
                head = result.get("head")
                if isinstance(head, Mapping):
                    acc.head.update(copy.deepcopy(dict(head)))
                    changes = len(head)
            case PromptType.DEEPLINKS:
                links = _items(result.get("links"))
                acc.links.extend(links)
                changes = len(links)
            case PromptType.CONTENT:
                blocks = _items(result.get("blocks"))
                acc.blocks.extend(blocks)
                changes = len(blocks)
            case PromptType.IMAGES:
                alts = _items(result.get("alts"))
                acc.alts.extend(alts)
                changes = len(alts)
            case PromptType.SCHEMA:
                schema = result.get("schema")
                if isinstance(schema, Mapping):
                    acc.schema = copy.deepcopy(dict(schema))
                    changes = 1 if schema else 0
            case _:
                typing.assert_never(prompt_type)

        confidence = result.get("confidence")
        acc.confidence.add(confidence)

        notes = result.get("notes")
        if isinstance(notes, list):
            acc.notes.extend(f"[{prompt_type.value}] {note}" for note in notes)

        acc.summaries.append(
            IndividualResult(
                prompt_type=prompt_type,
                success=True,
                confidence=confidence,
                processing_time_ms=outcome.processing_time_ms,
                tokens_used=outcome.tokens_used,
                changes_count=changes,
            )
        )

    def _merge_failure(self, acc: _Accumulator, outcome: TaskOutcome) -> None:
        acc.failed += 1
        error = outcome.error or "Unknown error"
        acc.notes.append(f"[{outcome.prompt_type.value}] Failed: {error}")
        acc.summaries.append(
            IndividualResult(
                prompt_type=outcome.prompt_type,
                success=False,
                error=error,
                processing_time_ms=outcome.processing_time_ms or 0,
            )
        )


def merge_results(records: Sequence[SettlementRecord]) -> MergedDocument:
    """Merge ``records`` with a default `ResultMerger`."""
    return ResultMerger().merge(records)
