"""Prompt builder interface shared by every task type."""

from abc import ABC, abstractmethod
from typing import NamedTuple

from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
from content_enhancer.core.types import PromptType


class PromptPair(NamedTuple):
    """System and user messages for one task."""

    system_prompt: str
    user_prompt: str


class BasePromptBuilder(ABC):
    """Abstract base class for all task prompt builders."""

    prompt_type: PromptType

    @abstractmethod
    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        """Create the system/user prompt pair for this task."""
