"""Concurrent fan-out of one request's tasks with a wait-all join.

Every task is wrapped so that it settles into a `Result` instead of raising;
the join therefore never short-circuits and never cancels siblings. The
settled results are converted back to settlement records in the original
dispatch order, independent of which provider call returned first.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
from typing import Protocol

from content_enhancer.core.types import (
    Failure,
    Result,
    SettlementRecord,
    Success,
    TaskDescriptor,
    TaskOutcome,
)
from content_enhancer.exceptions import PromptBuildError
from content_enhancer.pipeline.fallback import generate_fallback
from content_enhancer.telemetry import TelemetryContext, TelemetryContextProtocol

logger = logging.getLogger(__name__)


class SupportsInvoke(Protocol):
    """Anything that can settle one task descriptor into an outcome."""

    async def invoke(self, descriptor: TaskDescriptor) -> TaskOutcome: ...  # noqa: D102


class TaskDispatcher:
    """Runs all tasks of a request concurrently and waits for every one."""

    def __init__(
        self,
        invoker: SupportsInvoke,
        *,
        max_concurrency: int | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1 or None")
        self._invoker = invoker
        self._max_concurrency = max_concurrency
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def dispatch(
        self, descriptors: Sequence[TaskDescriptor]
    ) -> tuple[SettlementRecord, ...]:
        """Invoke each descriptor once and return index-aligned records."""
        if not descriptors:
            return ()

        semaphore = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency is not None
            else None
        )

        async def _settle(descriptor: TaskDescriptor) -> Result[TaskOutcome, Exception]:
            if descriptor.build_error is not None:
                return Failure(PromptBuildError(descriptor.build_error))
            try:
                if semaphore is None:
                    return Success(await self._invoker.invoke(descriptor))
                async with semaphore:
                    return Success(await self._invoker.invoke(descriptor))
            except Exception as e:
                return Failure(e)

        with self._telemetry("enhance.dispatch", task_count=len(descriptors)):
            settled = await asyncio.gather(*(_settle(d) for d in descriptors))

        return tuple(
            self._to_record(descriptor, result)
            for descriptor, result in zip(descriptors, settled, strict=True)
        )

    def _to_record(
        self, descriptor: TaskDescriptor, result: Result[TaskOutcome, Exception]
    ) -> SettlementRecord:
        prompt_type = descriptor.prompt_type
        match result:
            case Success(value=TaskOutcome() as outcome) if (
                outcome.prompt_type == prompt_type
            ):
                return SettlementRecord(descriptor=descriptor, outcome=outcome)
            case Success(value=other):
                error = f"Invoker returned an unusable outcome: {other!r}"
            case Failure(error=exc):
                error = str(exc) or type(exc).__name__
            case _:
                error = f"Unrecognized settlement: {result!r}"

        logger.warning("Task %s could not be settled: %s", prompt_type.value, error)
        return SettlementRecord(
            descriptor=descriptor,
            outcome=generate_fallback(prompt_type, error, model_used=descriptor.model),
        )
