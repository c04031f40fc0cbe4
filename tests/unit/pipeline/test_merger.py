"""ResultMerger: deterministic fold of settled records into one document."""

import pytest

from content_enhancer.core.types import PromptType
from content_enhancer.pipeline.merger import ResultMerger, merge_results
from content_enhancer.telemetry import SimpleReporter, TelemetryContext
from tests.helpers import failure, fallback, success

pytestmark = pytest.mark.unit


def _all_success():
    return [
        success(
            "head",
            {"head": {"title": "T", "metaDescription": "D"}, "confidence": 0.9,
             "notes": ["title shortened"]},
        ),
        success(
            "deeplinks",
            {"links": [{"new_href": "/a"}], "confidence": 0.8, "notes": []},
        ),
        success(
            "content",
            {"blocks": [{"id": "b1"}, {"id": "b2"}], "confidence": 0.7,
             "notes": ["h1 rewritten"]},
        ),
        success("images", {"alts": [{"new_alt": "x"}], "confidence": 0.6, "notes": []}),
        success(
            "schema",
            {"schema": {"@type": "LocalBusiness"}, "confidence": 1.0, "notes": []},
        ),
    ]


def test_concrete_partial_failure_scenario():
    records = [
        success("head", {"head": {"title": "A"}, "confidence": 0.9, "notes": []}),
        failure("content", "timeout"),
        success(
            "schema",
            {"schema": {"@type": "LocalBusiness"}, "confidence": 0.8, "notes": []},
        ),
    ]
    doc = merge_results(records)

    assert doc.confidence == pytest.approx(0.85)
    assert doc.notes.count("[content] Failed: timeout") == 1
    assert doc.metadata.successful_prompts == 2
    assert doc.metadata.failed_prompts == 1
    assert doc.head == {"title": "A"}
    assert doc.schema == {"@type": "LocalBusiness"}
    assert doc.blocks == ()


def test_all_success_confidence_is_arithmetic_mean():
    doc = merge_results(_all_success())
    assert doc.confidence == pytest.approx((0.9 + 0.8 + 0.7 + 0.6 + 1.0) / 5)
    assert doc.metadata.successful_prompts == 5
    assert doc.metadata.failed_prompts == 0


def test_all_failed_yields_empty_document():
    records = [
        failure("head", "500"),
        failure("deeplinks", "timeout"),
        fallback("content", "crashed"),
        failure("images", "bad json"),
        failure("schema", "Validation failed: Missing required key: schema"),
    ]
    doc = merge_results(records)

    assert doc.confidence == 0
    assert doc.head == {}
    assert doc.schema == {}
    assert doc.blocks == doc.links == doc.alts == ()
    assert doc.metadata.failed_prompts == 5
    assert doc.total_changes == 0
    assert len(doc.notes) == 5
    assert all(": " in note and "Failed" in note for note in doc.notes)


def test_fallback_payload_never_reaches_content():
    doc = merge_results([fallback("content", "crashed")])
    assert doc.notes == ("[content] Failed: crashed",)
    assert doc.confidence == 0


def test_total_changes_is_sum_of_component_counts():
    records = [
        success(
            "head",
            {"head": {"title": "T", "metaDescription": "D", "canonical": "C"},
             "confidence": 1, "notes": []},
        ),
        success("deeplinks", {"links": [{}], "confidence": 1, "notes": []}),
        success("content", {"blocks": [{}, {}], "confidence": 1, "notes": []}),
        success("images", {"alts": [], "confidence": 1, "notes": []}),
        success("schema", {"schema": {"@type": "X"}, "confidence": 1, "notes": []}),
    ]
    doc = merge_results(records)

    assert doc.total_changes == 7
    counts = [r.changes_count for r in doc.metadata.individual_results]
    assert counts == [3, 1, 2, 0, 1]


def test_merge_is_deterministic():
    records = _all_success() + [failure("content", "timeout")]
    first = merge_results(records).to_dict()
    second = merge_results(records).to_dict()
    assert first == second


def test_head_collision_later_task_wins():
    records = [
        success("head", {"head": {"title": "first", "canonical": "c"},
                         "confidence": 1, "notes": []}),
        success("head", {"head": {"title": "second"}, "confidence": 1, "notes": []}),
    ]
    doc = merge_results(records)
    assert doc.head == {"title": "second", "canonical": "c"}


def test_schema_last_success_wins_wholesale():
    records = [
        success("schema", {"schema": {"@type": "A", "name": "n"},
                           "confidence": 1, "notes": []}),
        success("schema", {"schema": {"@type": "B"}, "confidence": 1, "notes": []}),
        failure("schema", "late failure"),
    ]
    doc = merge_results(records)
    assert doc.schema == {"@type": "B"}


def test_list_fields_are_appended_in_order():
    records = [
        success("content", {"blocks": [{"id": 1}], "confidence": 1, "notes": []}),
        success("content", {"blocks": [{"id": 2}, {"id": 3}],
                            "confidence": 1, "notes": []}),
    ]
    doc = merge_results(records)
    assert [b["id"] for b in doc.blocks] == [1, 2, 3]


def test_notes_are_prefixed_with_prompt_type_in_order():
    doc = merge_results(_all_success()[:3] + [failure("images", "boom")])
    assert doc.notes == (
        "[head] title shortened",
        "[content] h1 rewritten",
        "[images] Failed: boom",
    )


def test_metadata_totals_and_summaries():
    records = [
        success("head", {"head": {"title": "T"}, "confidence": 0.9, "notes": []},
                processing_time_ms=120, tokens_used=40),
        failure("content", "timeout", processing_time_ms=30),
    ]
    meta = merge_results(records).metadata

    assert meta.prompt_count == 2
    assert meta.total_processing_time == 150
    assert meta.total_tokens == 40
    assert meta.individual_results[0].to_dict() == {
        "prompt_type": "head",
        "success": True,
        "confidence": 0.9,
        "processing_time_ms": 120,
        "tokens_used": 40,
        "changes_count": 1,
    }
    assert meta.individual_results[1].to_dict() == {
        "prompt_type": "content",
        "success": False,
        "error": "timeout",
        "processing_time_ms": 30,
    }


def test_lenient_payload_with_bad_fields_does_not_break_merge():
    records = [
        success("head", {"head": "oops", "confidence": "high", "notes": "n/a"}),
        success("content", {"blocks": {"not": "a list"}, "confidence": 0.8,
                            "notes": []}),
    ]
    doc = merge_results(records)

    assert doc.head == {}
    assert doc.blocks == ()
    assert doc.confidence == pytest.approx(0.4)
    assert doc.notes == ()


def test_integer_confidence_too_large_for_float_is_clamped():
    doc = merge_results(
        [success("head", {"head": {}, "confidence": 10**400, "notes": []})]
    )
    assert doc.confidence == 1.0
    assert doc.metadata.individual_results[0].confidence == 10**400


def test_merged_content_is_copied_from_results():
    result = {"blocks": [{"id": "b1", "text": "orig"}], "confidence": 1, "notes": []}
    doc = merge_results([success("content", result)])
    result["blocks"][0]["text"] = "mutated"
    assert doc.blocks[0]["text"] == "orig"


def test_empty_input():
    doc = merge_results([])
    assert doc.confidence == 0
    assert doc.metadata.prompt_count == 0
    assert doc.total_changes == 0


def test_merge_scope_is_timed():
    reporter = SimpleReporter()
    merger = ResultMerger(telemetry=TelemetryContext(reporter, enabled=True))
    merger.merge(_all_success())
    assert "enhance.merge" in reporter.timings


def test_to_dict_envelope_keys():
    data = merge_results(_all_success()).to_dict()
    assert set(data) == {
        "head", "blocks", "links", "alts", "schema", "confidence", "notes", "metadata",
    }
    assert data["metadata"]["prompt_count"] == 5
    assert [r["prompt_type"] for r in data["metadata"]["individual_results"]] == [
        p.value for p in PromptType
    ]
