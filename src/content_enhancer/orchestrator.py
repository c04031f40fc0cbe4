"""The primary entry point: one page in, one merged document out.

The orchestrator binds the task catalog to a request, fans the tasks out
through the dispatcher, merges the settled records and checks the merge
invariants before handing the document back. Individual task failures never
escape; only a broken invariant (a bug) raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
from time import perf_counter
from typing import TYPE_CHECKING, Any, Self

from content_enhancer.adapters import build_adapter
from content_enhancer.batch import BatchSummary, PageRequest, PageResult
from content_enhancer.catalog import build_tasks
from content_enhancer.config import FrozenConfig, resolve_config
from content_enhancer.exceptions import InvariantViolationError
from content_enhancer.pipeline import ResultMerger, TaskDispatcher, TaskInvoker
from content_enhancer.telemetry import SimpleReporter, TelemetryContext

if TYPE_CHECKING:
    from content_enhancer.adapters import CompletionAdapter
    from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
    from content_enhancer.core.types import (
        MergedDocument,
        PromptType,
        SettlementRecord,
        TaskDescriptor,
    )
    from content_enhancer.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


class EnhancementOrchestrator:
    """Runs enhancement requests against one configured provider."""

    def __init__(
        self,
        config: FrozenConfig,
        *,
        adapter: CompletionAdapter | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Frozen runtime configuration.
            adapter: Completion adapter to use; built from ``config`` when
                omitted, in which case the orchestrator owns and closes it.
            telemetry: Telemetry context. When omitted and
                ``config.telemetry_enabled`` is set, an in-memory
                `SimpleReporter` collects scopes (see ``reporter``).
        """
        self.config = config
        self._owns_adapter = adapter is None
        self._adapter = adapter if adapter is not None else build_adapter(config)

        self.reporter: SimpleReporter | None = None
        if telemetry is None and config.telemetry_enabled:
            self.reporter = SimpleReporter()
            telemetry = TelemetryContext(self.reporter, enabled=True)
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

        invoker = TaskInvoker(
            self._adapter,
            temperature=config.temperature,
            validation_policy=config.validation_policy,
            telemetry=self._telemetry,
        )
        self._dispatcher = TaskDispatcher(
            invoker,
            max_concurrency=config.max_concurrency,
            telemetry=self._telemetry,
        )
        self._merger = ResultMerger(telemetry=self._telemetry)

    async def enhance(
        self,
        content_map: ContentMap | Mapping[str, Any],
        profile: BusinessProfile | Mapping[str, Any],
        directive: Directive | Mapping[str, Any],
        *,
        head_only: bool = False,
        prompt_types: Iterable[PromptType | str] | None = None,
        tone: str | None = None,
    ) -> MergedDocument:
        """Enhance one page.

        Args:
            content_map: Extracted page content.
            profile: Business profile.
            directive: Page type, tone and schema requirements.
            head_only: Run only the head task.
            prompt_types: Run only these task types (catalog order kept).
            tone: Override for ``directive.tone``.

        Returns:
            The merged document, possibly with partial failures recorded in
            its notes and metadata.

        Raises:
            InvariantViolationError: If the merged document disagrees with
                the dispatched tasks.
        """
        descriptors = build_tasks(
            content_map,
            profile,
            directive,
            model=self.config.model,
            head_only=head_only,
            prompt_types=prompt_types,
            tone=tone,
        )
        logger.debug(
            "Dispatching %d tasks: %s",
            len(descriptors),
            ", ".join(d.prompt_type.value for d in descriptors),
        )
        records = await self._dispatcher.dispatch(descriptors)
        document = self._merger.merge(records)
        self._check_invariants(descriptors, records, document)
        return document

    async def enhance_batch(
        self,
        pages: Sequence[PageRequest | Mapping[str, Any]],
        profile: BusinessProfile | Mapping[str, Any],
        *,
        head_only: bool = False,
        tone: str | None = None,
    ) -> BatchSummary:
        """Enhance several pages sequentially and summarize the run.

        A page that raises is recorded as failed; the remaining pages still run.
        """
        start = perf_counter()
        results: list[PageResult] = []
        for index, raw_page in enumerate(pages, start=1):
            page = (
                raw_page
                if isinstance(raw_page, PageRequest)
                else PageRequest.model_validate(dict(raw_page))
            )
            logger.info(
                "Enhancing page %d/%d: %s [%s/%s]",
                index,
                len(pages),
                page.page_id,
                "head-only" if head_only else page.directive.type,
                tone or page.directive.tone,
            )
            try:
                document = await self.enhance(
                    page.content_map,
                    profile,
                    page.directive,
                    head_only=head_only,
                    tone=tone,
                )
            except Exception as e:
                logger.warning("Page %s failed: %s", page.page_id, e)
                results.append(
                    PageResult(page_id=page.page_id, status="failed", error=str(e))
                )
                continue
            results.append(
                PageResult(page_id=page.page_id, status="completed", document=document)
            )
        return BatchSummary.from_results(results, perf_counter() - start)

    def _check_invariants(
        self,
        descriptors: Sequence[TaskDescriptor],
        records: Sequence[SettlementRecord],
        document: MergedDocument,
    ) -> None:
        metadata = document.metadata
        problem: str | None = None
        if len(records) != len(descriptors):
            problem = f"{len(descriptors)} tasks dispatched but {len(records)} settled"
        elif metadata.prompt_count != len(descriptors):
            problem = (
                f"prompt_count {metadata.prompt_count} != {len(descriptors)} dispatched"
            )
        elif [r.prompt_type for r in metadata.individual_results] != [
            d.prompt_type for d in descriptors
        ]:
            problem = "individual results are not in dispatch order"
        if problem is not None:
            self._telemetry.count("enhance.invariant_violation")
            raise InvariantViolationError(problem, stage_name="merge")

    async def aclose(self) -> None:
        """Close the adapter if this orchestrator created it."""
        if not self._owns_adapter:
            return
        close = getattr(self._adapter, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_orchestrator(
    config: FrozenConfig | None = None,
    *,
    adapter: CompletionAdapter | None = None,
) -> EnhancementOrchestrator:
    """Create an orchestrator, resolving configuration when none is given.

    This is the only place where ambient configuration is resolved.
    """
    final_config = config if config is not None else resolve_config()
    return EnhancementOrchestrator(final_config, adapter=adapter)
