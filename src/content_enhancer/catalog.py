"""Task catalog: the static definition of every enhancement task.

The catalog order is the dispatch order, and therefore the merge order:
later tasks win head-key collisions and schema replacement.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any

from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
from content_enhancer.core.types import PromptType, TaskDescriptor, result_key
from content_enhancer.prompts import PROMPT_BUILDERS

logger = logging.getLogger(__name__)

BASE_REQUIRED_KEYS: frozenset[str] = frozenset({"confidence", "notes"})


@dataclass(frozen=True, slots=True)
class TaskSpec:
    """Static per-type settings: output bound and optional model override."""

    prompt_type: PromptType
    max_tokens: int
    model: str | None = None

    @property
    def required_keys(self) -> frozenset[str]:
        return BASE_REQUIRED_KEYS | {result_key(self.prompt_type)}


TASK_CATALOG: tuple[TaskSpec, ...] = (
    TaskSpec(PromptType.HEAD, max_tokens=1500),
    TaskSpec(PromptType.DEEPLINKS, max_tokens=1500),
    TaskSpec(PromptType.CONTENT, max_tokens=4000),
    TaskSpec(PromptType.IMAGES, max_tokens=1500),
    TaskSpec(PromptType.SCHEMA, max_tokens=2000),
)


def _coerce[M: (ContentMap, BusinessProfile, Directive)](
    model: type[M], value: M | Mapping[str, Any] | None
) -> M:
    if isinstance(value, model):
        return value
    if value is None:
        return model()
    return model.model_validate(dict(value))


def _describe(error: Exception) -> str:
    return f"Could not build prompt: {type(error).__name__}: {error}"


def build_tasks(
    content_map: ContentMap | Mapping[str, Any],
    profile: BusinessProfile | Mapping[str, Any],
    directive: Directive | Mapping[str, Any],
    *,
    model: str,
    head_only: bool = False,
    prompt_types: Iterable[PromptType | str] | None = None,
    tone: str | None = None,
    catalog: tuple[TaskSpec, ...] = TASK_CATALOG,
) -> tuple[TaskDescriptor, ...]:
    """Bind the catalog to one request's inputs.

    Args:
        content_map: Extracted page content.
        profile: Business profile.
        directive: Page type, tone and schema requirements.
        model: Default model for tasks whose catalog entry does not override it.
        head_only: Build only the head task.
        prompt_types: Restrict to these types; catalog order is kept.
        tone: Overrides ``directive.tone`` when given.
        catalog: Task specs to bind, in dispatch order.

    Returns:
        Task descriptors in catalog order. Inputs that cannot be read, or a
        builder that raises, yield descriptors carrying ``build_error``
        instead of prompts; nothing raised while building escapes.

    Raises:
        ValueError: If ``prompt_types`` names an unknown prompt type.
    """
    input_error: str | None = None
    try:
        cmap = _coerce(ContentMap, content_map)
        prof = _coerce(BusinessProfile, profile)
        direc = _coerce(Directive, directive).with_tone(tone)
    except Exception as e:
        input_error = _describe(e)
        logger.warning("Request inputs rejected: %s", input_error)

    selected: set[PromptType] | None = None
    if head_only:
        selected = {PromptType.HEAD}
    elif prompt_types is not None:
        selected = {PromptType(t) for t in prompt_types}

    descriptors = []
    for spec in catalog:
        if selected is not None and spec.prompt_type not in selected:
            continue
        system_prompt = user_prompt = ""
        build_error = input_error
        if build_error is None:
            try:
                builder = PROMPT_BUILDERS[spec.prompt_type]
                system_prompt, user_prompt = builder.build(cmap, prof, direc)
            except Exception as e:
                build_error = _describe(e)
                logger.warning(
                    "Task %s prompt build failed: %s", spec.prompt_type.value, build_error
                )
        descriptors.append(
            TaskDescriptor(
                prompt_type=spec.prompt_type,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                model=spec.model or model,
                required_keys=spec.required_keys,
                max_tokens=spec.max_tokens,
                build_error=build_error,
            )
        )
    return tuple(descriptors)
