import pytest

from content_enhancer.pipeline.validator import validate_payload

pytestmark = pytest.mark.unit

HEAD_KEYS = frozenset({"head", "confidence", "notes"})


def test_valid_payload_has_no_violations():
    payload = {"head": {"title": "T"}, "confidence": 0.9, "notes": ["ok"]}
    assert validate_payload(payload, HEAD_KEYS) == []


def test_non_object_payload_is_a_single_violation():
    assert validate_payload(["not", "an", "object"], HEAD_KEYS) == [
        "Payload must be a JSON object, got list"
    ]


def test_missing_keys_are_reported_in_sorted_order():
    violations = validate_payload({}, HEAD_KEYS)
    assert violations[:3] == [
        "Missing required key: confidence",
        "Missing required key: head",
        "Missing required key: notes",
    ]


@pytest.mark.parametrize("confidence", [1.5, -0.01, "0.9", True, None])
def test_confidence_must_be_unit_interval_number(confidence):
    payload = {"head": {}, "confidence": confidence, "notes": []}
    assert "Confidence must be a number between 0 and 1" in validate_payload(
        payload, HEAD_KEYS
    )


def test_notes_must_be_strings():
    payload = {"head": {}, "confidence": 0.5, "notes": ["fine", 3]}
    assert validate_payload(payload, HEAD_KEYS) == ["Notes must be an array of strings"]


def test_field_shapes_are_checked():
    payload = {
        "head": [],
        "links": {},
        "schema": "x",
        "confidence": 0.5,
        "notes": [],
    }
    violations = validate_payload(payload, HEAD_KEYS)
    assert "head must be an object" in violations
    assert "links must be an array" in violations
    assert "schema must be an object" in violations


def test_validator_never_raises_on_odd_input():
    assert validate_payload(None, HEAD_KEYS)
    assert validate_payload(42, frozenset())


def test_integer_confidence_too_large_for_float_is_a_violation():
    payload = {"head": {}, "confidence": 10**400, "notes": []}
    assert validate_payload(payload, HEAD_KEYS) == [
        "Confidence must be a number between 0 and 1"
    ]
