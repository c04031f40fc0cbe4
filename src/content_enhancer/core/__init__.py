"""Core data types and request inputs."""

from content_enhancer.core.inputs import (
    BusinessProfile,
    ContentMap,
    Directive,
    HeadFields,
    Reviews,
)
from content_enhancer.core.types import (
    ConfidenceAggregate,
    Failure,
    IndividualResult,
    MergedDocument,
    MergeMetadata,
    PromptType,
    Result,
    SettlementRecord,
    Success,
    TaskDescriptor,
    TaskOutcome,
    result_key,
)

__all__ = [
    "BusinessProfile",
    "ConfidenceAggregate",
    "ContentMap",
    "Directive",
    "Failure",
    "HeadFields",
    "IndividualResult",
    "MergeMetadata",
    "MergedDocument",
    "PromptType",
    "Result",
    "Reviews",
    "SettlementRecord",
    "Success",
    "TaskDescriptor",
    "TaskOutcome",
    "result_key",
]
