"""Shared builders for enhancement tests."""

from typing import Any

from content_enhancer.catalog import TASK_CATALOG
from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
from content_enhancer.core.types import (
    PromptType,
    SettlementRecord,
    TaskDescriptor,
    TaskOutcome,
)
from content_enhancer.pipeline.fallback import generate_fallback

_REQUIRED_KEYS = {spec.prompt_type: spec.required_keys for spec in TASK_CATALOG}


def make_descriptor(
    prompt_type: PromptType | str, *, model: str = "test-model", max_tokens: int = 1500
) -> TaskDescriptor:
    pt = PromptType(prompt_type)
    return TaskDescriptor(
        prompt_type=pt,
        system_prompt=f"system prompt for {pt.value}",
        user_prompt=f"user prompt for {pt.value}",
        model=model,
        required_keys=_REQUIRED_KEYS[pt],
        max_tokens=max_tokens,
    )


def success(
    prompt_type: PromptType | str,
    result: dict[str, Any],
    *,
    processing_time_ms: int = 100,
    tokens_used: int = 50,
) -> SettlementRecord:
    """A settled successful task with ``result`` as its payload."""
    pt = PromptType(prompt_type)
    return SettlementRecord(
        descriptor=make_descriptor(pt),
        outcome=TaskOutcome(
            prompt_type=pt,
            success=True,
            result=result,
            processing_time_ms=processing_time_ms,
            tokens_used=tokens_used,
            model_used="test-model",
        ),
    )


def failure(
    prompt_type: PromptType | str, error: str, *, processing_time_ms: int = 0
) -> SettlementRecord:
    """A settled failed task (as produced by the invoker)."""
    pt = PromptType(prompt_type)
    return SettlementRecord(
        descriptor=make_descriptor(pt),
        outcome=TaskOutcome(
            prompt_type=pt,
            success=False,
            error=error,
            processing_time_ms=processing_time_ms,
        ),
    )


def fallback(prompt_type: PromptType | str, error: str) -> SettlementRecord:
    """A settled task that could not be attempted at all."""
    pt = PromptType(prompt_type)
    return SettlementRecord(
        descriptor=make_descriptor(pt), outcome=generate_fallback(pt, error)
    )


def sample_content_map(route: str = "/branches/watch-repairs-st-albans") -> ContentMap:
    return ContentMap.model_validate(
        {
            "route": route,
            "head": {
                "title": "Watch Repairs St Albans",
                "metaDescription": "Expert watch repairs.",
                "canonical": f"https://example.co.uk{route}",
            },
            "blocks": [
                {"id": "b1", "type": "h1", "text": "Watch repairs", "selector": "h1"},
                {"id": "b2", "type": "p", "text": "We fix watches.", "selector": "p"},
            ],
            "links": [{"selector": "a.cta", "text": "Contact", "href": "/contact"}],
            "images": [{"selector": "img.hero", "src": "/hero.jpg", "alt": ""}],
        }
    )


def sample_profile(**overrides: Any) -> BusinessProfile:
    data: dict[str, Any] = {
        "name": "Repairs Ltd",
        "domain": "example.co.uk",
        "services": ["watch repair", "battery replacement"],
        "geo_scope": ["Hertfordshire"],
        "reviews": {
            "count": "1,200",
            "site": "Trustpilot",
            "rating": "4.8",
            "url": "https://trustpilot.com/review/example.co.uk",
        },
        "guarantee": "2-year guarantee",
        "phone": "01234 567890",
        "hours": "Mon-Sat 9-5",
        "country": "UK",
    }
    data.update(overrides)
    return BusinessProfile.model_validate(data)


def sample_directive(**overrides: Any) -> Directive:
    data: dict[str, Any] = {
        "type": "location",
        "tone": "friendly",
        "schema_types": ["LocalBusiness"],
    }
    data.update(overrides)
    return Directive.model_validate(data)
