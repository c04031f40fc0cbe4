"""Enhancement pipeline stages: invoke, dispatch, validate and merge."""

from .dispatcher import SupportsInvoke, TaskDispatcher
from .fallback import FALLBACK_CONFIDENCE, generate_fallback
from .invoker import TaskInvoker, parse_json_object
from .merger import ResultMerger, merge_results
from .validator import validate_payload

__all__ = [
    "FALLBACK_CONFIDENCE",
    "ResultMerger",
    "SupportsInvoke",
    "TaskDispatcher",
    "TaskInvoker",
    "generate_fallback",
    "merge_results",
    "parse_json_object",
    "validate_payload",
]
