"""Shared context blocks interpolated into every task prompt.

Each helper returns an empty string when the profile lacks the data, and
empty blocks are dropped when the context is assembled.
"""

from __future__ import annotations

import re
from typing import Any

from content_enhancer.core.inputs import BusinessProfile, Directive

from .tones import get_tone_profile

_BRANCH_ROUTE = re.compile(r"/branches/watch-repairs-(.+)")

_LOCALIZATION = {
    "UK": "LOCALIZATION: UK market - use VAT, postcodes, counties, British spelling, "
    "and UK-specific terminology.",
    "US": "LOCALIZATION: US market - use tax, ZIP codes, states, American spelling, "
    "and US-specific terminology.",
    "CA": "LOCALIZATION: Canadian market - use GST/PST, postal codes, provinces, "
    "Canadian spelling and terminology.",
}


def extract_location(route: str | None) -> str | None:
    """Derive a display location from a branch route.

    ``/branches/watch-repairs-st-albans`` becomes ``St Albans``.
    """
    if not route:
        return None
    match = _BRANCH_ROUTE.search(route)
    if not match:
        return None
    slug = match.group(1).strip("/").replace("-", " ")
    return " ".join(word.capitalize() for word in slug.split()) or None


def join_items(items: list[Any]) -> str:
    """Comma-join list entries of any type, skipping nulls."""
    return ", ".join(str(item) for item in items if item is not None)


def tone_context(directive: Directive) -> str:
    tone = get_tone_profile(directive.tone)
    return (
        f"TONE CONTEXT: {tone.personality}\n"
        f"TARGET STYLE: {tone.language}\n"
        f"VOICE APPROACH: {tone.formality}"
    )


def services_line(profile: BusinessProfile) -> str:
    if not profile.services:
        return ""
    return f"- Services: {join_items(profile.services)}"


def geo_scope_line(profile: BusinessProfile) -> str:
    if not profile.geo_scope:
        return ""
    return f"- Geographic Scope: {join_items(profile.geo_scope)}"


def trust_signals_line(profile: BusinessProfile) -> str:
    """Structured reviews win over a bare review count; guarantee is appended."""
    signals: list[str] = []
    reviews = profile.reviews
    if reviews is not None:
        if reviews.count and reviews.site:
            rating = f" ({reviews.rating}★)" if reviews.rating else ""
            url = f" [URL: {reviews.url}]" if reviews.url else ""
            signals.append(f"{reviews.count} reviews on {reviews.site}{rating}{url}")
    elif profile.review_count:
        signals.append(f"{profile.review_count} reviews")

    if profile.guarantee:
        signals.append(profile.guarantee)

    if not signals:
        return ""
    return f"- Trust Signals: {', '.join(signals)}"


def contact_line(profile: BusinessProfile) -> str:
    if profile.phone and profile.hours:
        return f"- Contact: {profile.phone} ({profile.hours})"
    if profile.phone or profile.hours:
        return f"- Contact: {profile.phone or profile.hours}"
    return ""


def business_context(profile: BusinessProfile) -> str:
    lines = [
        f"- Company: {profile.name or 'Business'}",
        f"- Domain: {profile.domain or 'website.com'}",
        services_line(profile),
        geo_scope_line(profile),
        trust_signals_line(profile),
        contact_line(profile),
    ]
    return "BUSINESS CONTEXT:\n" + "\n".join(line for line in lines if line)


def page_context(directive: Directive, location: str | None) -> str:
    lines = []
    if location:
        lines.append(
            f"LOCATION: {location} - Consider local culture and geographic "
            "relevance such as landmarks and important place names."
        )
    page_type = directive.type or "page"
    lines.append(
        f"PAGE TYPE: {page_type} page - Optimize for typical {page_type} user intent."
    )
    return "PAGE CONTEXT:\n" + "\n".join(lines)


def localization_context(country: str | None) -> str:
    return _LOCALIZATION.get(
        (country or "").upper(),
        "LOCALIZATION: International market - use neutral geographic terms "
        "and global best practices.",
    )


def build_context(
    profile: BusinessProfile, directive: Directive, route: str | None
) -> str:
    """Assemble the full context block shared by all task prompts."""
    blocks = [
        tone_context(directive),
        business_context(profile),
        page_context(directive, extract_location(route)),
        localization_context(profile.country),
    ]
    return "\n\n".join(block for block in blocks if block)
