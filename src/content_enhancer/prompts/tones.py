"""Tone profiles used to steer the voice of generated copy."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ToneProfile:
    """How a tone should read: personality, language style, formality."""

    name: str
    personality: str
    language: str
    formality: str


FRIENDLY = ToneProfile(
    name="friendly",
    personality="Warm, approachable and helpful, like a trusted local expert",
    language="Plain words, short sentences, second person",
    formality="Conversational but professional",
)
CORPORATE = ToneProfile(
    name="corporate",
    personality="Confident, measured and authoritative",
    language="Precise terminology, benefit statements backed by facts",
    formality="Formal",
)
MOM_N_POP = ToneProfile(
    name="mom-n-pop",
    personality="Family-run, personal and community minded",
    language="Homely phrasing, mentions of care and experience",
    formality="Informal",
)
STARTUP = ToneProfile(
    name="startup",
    personality="Energetic, modern and direct",
    language="Punchy verbs, crisp value propositions",
    formality="Casual",
)
PREMIUM = ToneProfile(
    name="premium",
    personality="Refined, exclusive and detail focused",
    language="Elegant vocabulary, understated confidence",
    formality="Polished",
)
CLINICAL = ToneProfile(
    name="clinical",
    personality="Calm, precise and reassuring",
    language="Accurate, evidence-led wording without hype",
    formality="Formal",
)
GOVTECH = ToneProfile(
    name="govtech",
    personality="Neutral, accessible and trustworthy",
    language="Plain English, inclusive, avoids jargon",
    formality="Formal",
)
MODERN_TECH = ToneProfile(
    name="modern-tech",
    personality="Knowledgeable, efficient and forward looking",
    language="Clear feature-to-benefit phrasing",
    formality="Professional",
)

TONE_PROFILES: dict[str, ToneProfile] = {
    "friendly": FRIENDLY,
    "corporate": CORPORATE,
    "mom-n-pop": MOM_N_POP,
    "startup-new": STARTUP,
    "premium-new": PREMIUM,
    "clinical": CLINICAL,
    "govtech": GOVTECH,
    "modern-tech": MODERN_TECH,
    # Aliases kept for older directives
    "startup-old": STARTUP,
    "local-shop": FRIENDLY,
    "local-expert": FRIENDLY,
    "premium-brand": PREMIUM,
    "helpful-calm": FRIENDLY,
    "classic-retail": MODERN_TECH,
}


def get_tone_profile(tone_name: str | None) -> ToneProfile:
    """Return the profile for ``tone_name``, falling back to friendly."""
    if not tone_name:
        return FRIENDLY
    return TONE_PROFILES.get(tone_name.strip().lower(), FRIENDLY)
