"""Shared prompt context: tone, trust signals, location and localization."""

import pytest

from content_enhancer.core.inputs import BusinessProfile, Directive
from content_enhancer.prompts import build_context, extract_location, get_tone_profile
from content_enhancer.prompts.context import (
    contact_line,
    localization_context,
    trust_signals_line,
)
from content_enhancer.prompts.tones import CORPORATE, FRIENDLY, PREMIUM
from tests.helpers import sample_directive, sample_profile

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("route", "expected"),
    [
        ("/branches/watch-repairs-st-albans", "St Albans"),
        ("/branches/watch-repairs-london/", "London"),
        ("/about", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_location(route, expected):
    assert extract_location(route) == expected


class TestToneProfiles:
    def test_known_tone(self):
        assert get_tone_profile("corporate") is CORPORATE

    def test_alias_and_case(self):
        assert get_tone_profile("  Premium-Brand ") is PREMIUM

    @pytest.mark.parametrize("tone", ["unheard-of", "", None])
    def test_unknown_tone_falls_back_to_friendly(self, tone):
        assert get_tone_profile(tone) is FRIENDLY


class TestTrustSignals:
    def test_structured_reviews_preferred_over_count(self):
        profile = sample_profile(review_count=50)
        line = trust_signals_line(profile)
        assert line == (
            "- Trust Signals: 1,200 reviews on Trustpilot (4.8★) "
            "[URL: https://trustpilot.com/review/example.co.uk], 2-year guarantee"
        )

    def test_review_count_used_without_structured_reviews(self):
        profile = BusinessProfile(review_count=85)
        assert trust_signals_line(profile) == "- Trust Signals: 85 reviews"

    def test_nothing_to_say(self):
        assert trust_signals_line(BusinessProfile()) == ""


def test_contact_line_variants():
    assert contact_line(BusinessProfile(phone="123", hours="9-5")) == "- Contact: 123 (9-5)"
    assert contact_line(BusinessProfile(phone="123")) == "- Contact: 123"
    assert contact_line(BusinessProfile()) == ""


@pytest.mark.parametrize(
    ("country", "marker"),
    [("UK", "British spelling"), ("us", "ZIP codes"), ("CA", "GST/PST"), ("DE", "International")],
)
def test_localization_by_country(country, marker):
    assert marker in localization_context(country)


def test_build_context_assembles_all_blocks():
    context = build_context(
        sample_profile(), sample_directive(tone="corporate"),
        "/branches/watch-repairs-st-albans",
    )
    assert CORPORATE.personality in context
    assert "- Company: Repairs Ltd" in context
    assert "- Services: watch repair, battery replacement" in context
    assert "- Geographic Scope: Hertfordshire" in context
    assert "LOCATION: St Albans" in context
    assert "PAGE TYPE: location page" in context
    assert "UK market" in context


def test_build_context_skips_empty_lines():
    context = build_context(BusinessProfile(), Directive(), "/")
    assert "- Services" not in context
    assert "- Trust Signals" not in context
    assert "LOCATION:" not in context
    assert "\n\n\n" not in context
