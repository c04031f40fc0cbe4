"""Prompt building for enhancement tasks."""

from .base import BasePromptBuilder, PromptPair
from .builders import (
    PROMPT_BUILDERS,
    ContentPromptBuilder,
    DeepLinksPromptBuilder,
    HeadPromptBuilder,
    ImagesPromptBuilder,
    SchemaPromptBuilder,
)
from .context import build_context, extract_location
from .tones import TONE_PROFILES, ToneProfile, get_tone_profile

__all__ = [
    "PROMPT_BUILDERS",
    "TONE_PROFILES",
    "BasePromptBuilder",
    "ContentPromptBuilder",
    "DeepLinksPromptBuilder",
    "HeadPromptBuilder",
    "ImagesPromptBuilder",
    "PromptPair",
    "SchemaPromptBuilder",
    "ToneProfile",
    "build_context",
    "extract_location",
    "get_tone_profile",
]
