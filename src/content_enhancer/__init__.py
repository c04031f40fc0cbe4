"""Concurrent multi-task page enhancement with deterministic merging."""

import importlib.metadata
import logging

from content_enhancer.batch import BatchSummary, PageRequest, PageResult, WorkBatch
from content_enhancer.catalog import TASK_CATALOG, TaskSpec, build_tasks
from content_enhancer.config import FrozenConfig, resolve_config
from content_enhancer.core.inputs import (
    BusinessProfile,
    ContentMap,
    Directive,
    HeadFields,
    Reviews,
)
from content_enhancer.core.types import (
    MergedDocument,
    MergeMetadata,
    PromptType,
    SettlementRecord,
    TaskDescriptor,
    TaskOutcome,
)
from content_enhancer.exceptions import (
    ConfigurationError,
    ContentEnhancerError,
    InvariantViolationError,
    MalformedOutputError,
    PayloadValidationError,
    PromptBuildError,
    ProviderError,
)
from content_enhancer.orchestrator import EnhancementOrchestrator, create_orchestrator
from content_enhancer.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("content-enhancer")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "EnhancementOrchestrator",
    "create_orchestrator",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    # Inputs
    "BusinessProfile",
    "ContentMap",
    "Directive",
    "HeadFields",
    "Reviews",
    # Tasks and results
    "PromptType",
    "TASK_CATALOG",
    "TaskSpec",
    "build_tasks",
    "TaskDescriptor",
    "TaskOutcome",
    "SettlementRecord",
    "MergedDocument",
    "MergeMetadata",
    # Batch
    "BatchSummary",
    "PageRequest",
    "PageResult",
    "WorkBatch",
    # Exceptions
    "ConfigurationError",
    "ContentEnhancerError",
    "InvariantViolationError",
    "MalformedOutputError",
    "PayloadValidationError",
    "PromptBuildError",
    "ProviderError",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
]
