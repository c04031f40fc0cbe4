"""Prompt builders, one per prompt type.

Every system prompt embeds the shared context block and spells out the exact
JSON object the provider must return: the type-specific field plus
``confidence`` and ``notes``.
"""

from __future__ import annotations

import json
from typing import Any

from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
from content_enhancer.core.types import PromptType

from .base import BasePromptBuilder, PromptPair
from .context import build_context, extract_location, join_items

_JSON_ONLY = "Return JSON only (no code fences), with valid escaping."


def _as_json(items: list[Any] | dict[str, Any]) -> str:
    # Upstream entries are opaque; anything JSON cannot encode is stringified
    return json.dumps(items, ensure_ascii=False, indent=2, default=str)


class HeadPromptBuilder(BasePromptBuilder):
    """Title, meta description and canonical URL."""

    prompt_type = PromptType.HEAD

    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        context = build_context(profile, directive, content_map.route)
        system = f"""You are a head metadata and SERP optimization specialist focused on SEO and conversion.

TASK: Optimize page head metadata for maximum SEO impact and CTR.

{context}

RULES:
- Title: 55-60 chars; order = service + city + benefit/trust + brand suffix if space allows.
- Meta description: 150-160 chars; include one concise trust signal and a soft CTA.
- Avoid keyword stuffing, duplicate words, or invented claims/URLs.
- Canonical: use the provided canonical; if missing, omit it.
- {_JSON_ONLY}

You must respond with valid JSON in this exact format:
{{
  "head": {{
    "title": "string (55-60 chars)",
    "metaDescription": "string (150-160 chars)",
    "canonical": "string (absolute URL)"
  }},
  "confidence": 0.95,
  "notes": ["optimization details"]
}}"""
        title = content_map.head.title or ""
        meta = content_map.head.meta_description or ""
        canonical = content_map.head.canonical or ""
        user = f"""Optimize head metadata for this page:

CURRENT HEAD:
- Title: "{title}" ({len(title)} chars)
- Meta: "{meta}" ({len(meta)} chars)
- Canonical: "{canonical}"

TARGET IMPROVEMENTS:
- Title: 55-60 chars with contextually relevant keywords and benefits
- Meta: 150-160 chars with trust signals and compelling copy

Return optimized head metadata meeting exact character requirements."""
        return PromptPair(system, user)


class DeepLinksPromptBuilder(BasePromptBuilder):
    """Internal link anchors and targets."""

    prompt_type = PromptType.DEEPLINKS

    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        context = build_context(profile, directive, content_map.route)
        system = f"""You are an internal linking specialist.

TASK: Improve anchor text and suggest relevant internal deep links that help users and search engines.

{context}

RULES:
- Only link to pages on {profile.domain or "the same site"}; never invent external URLs.
- Anchor text must be descriptive (2-6 words) and avoid "click here".
- Keep the existing selector for each link you change.
- {_JSON_ONLY}

You must respond with valid JSON in this exact format:
{{
  "links": [{{"selector": "css selector", "new_anchor": "string", "new_href": "/path"}}],
  "confidence": 0.9,
  "notes": ["linking rationale"]
}}"""
        user = f"""Improve the internal links on page {content_map.route or "/"}.

CURRENT LINKS:
{_as_json(content_map.links)}

AVAILABLE SERVICES: {join_items(profile.services) or "n/a"}

Return improved links only for entries that benefit from a change."""
        return PromptPair(system, user)


class ContentPromptBuilder(BasePromptBuilder):
    """Headings and body copy blocks."""

    prompt_type = PromptType.CONTENT

    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        context = build_context(profile, directive, content_map.route)
        location = extract_location(content_map.route)
        system = f"""You are a conversion copywriter and on-page SEO specialist.

TASK: Rewrite page content blocks to be clearer, more persuasive and better targeted.

{context}

RULES:
- Preserve meaning and factual claims; never invent prices, awards or guarantees.
- Keep each block's selector; rewrite only its text.
- Headings stay concise; paragraphs stay within 20% of their original length.
- {_JSON_ONLY}

You must respond with valid JSON in this exact format:
{{
  "blocks": [{{"selector": "css selector", "new_text": "string"}}],
  "confidence": 0.9,
  "notes": ["content changes"]
}}"""
        user = f"""Optimize these content blocks{f" for {location}" if location else ""}:

{_as_json(content_map.blocks)}

Return rewritten blocks for the entries that should change."""
        return PromptPair(system, user)


class ImagesPromptBuilder(BasePromptBuilder):
    """Alt text for image candidates."""

    prompt_type = PromptType.IMAGES

    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        context = build_context(profile, directive, content_map.route)
        system = f"""You are an accessibility and image SEO specialist.

TASK: Write descriptive, concise alt text for page images.

{context}

RULES:
- Describe what the image shows in under 125 characters.
- Include a relevant keyword only when it reads naturally.
- Decorative images get an empty alt ("").
- {_JSON_ONLY}

You must respond with valid JSON in this exact format:
{{
  "alts": [{{"selector": "css selector", "new_alt": "string"}}],
  "confidence": 0.9,
  "notes": ["alt text notes"]
}}"""
        user = f"""Write alt text for the images on page {content_map.route or "/"}:

{_as_json(content_map.images)}"""
        return PromptPair(system, user)


class SchemaPromptBuilder(BasePromptBuilder):
    """JSON-LD structured data."""

    prompt_type = PromptType.SCHEMA

    def build(
        self, content_map: ContentMap, profile: BusinessProfile, directive: Directive
    ) -> PromptPair:
        context = build_context(profile, directive, content_map.route)
        schema_types = join_items(directive.schema_types) or "LocalBusiness"
        system = f"""You are a structured data (schema.org JSON-LD) specialist.

TASK: Produce one JSON-LD object describing this page.

{context}

RULES:
- Use "@context": "https://schema.org" and the requested types: {schema_types}.
- Only use facts present in the business profile or page content.
- Omit properties you cannot fill truthfully.
- {_JSON_ONLY}

You must respond with valid JSON in this exact format:
{{
  "schema": {{"@context": "https://schema.org", "@type": "LocalBusiness"}},
  "confidence": 0.9,
  "notes": ["schema notes"]
}}"""
        profile_data = profile.model_dump(exclude_none=True)
        user = f"""Create structured data for {content_map.route or "/"}.

BUSINESS PROFILE:
{_as_json(profile_data)}

PAGE TITLE: "{content_map.head.title or ""}"
CANONICAL: "{content_map.head.canonical or ""}\""""
        return PromptPair(system, user)


PROMPT_BUILDERS: dict[PromptType, BasePromptBuilder] = {
    builder.prompt_type: builder
    for builder in (
        HeadPromptBuilder(),
        DeepLinksPromptBuilder(),
        ContentPromptBuilder(),
        ImagesPromptBuilder(),
        SchemaPromptBuilder(),
    )
}
