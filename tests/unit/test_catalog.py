"""Task catalog binding: order, subsets, tone override and required keys."""

import pytest

from content_enhancer.catalog import TASK_CATALOG, TaskSpec, build_tasks
from content_enhancer.core.types import PromptType
from content_enhancer.prompts import PROMPT_BUILDERS, get_tone_profile
from tests.helpers import sample_content_map, sample_directive, sample_profile

pytestmark = pytest.mark.unit


def _build(**kwargs):
    return build_tasks(
        sample_content_map(),
        sample_profile(),
        sample_directive(),
        model="gpt-4-turbo-preview",
        **kwargs,
    )


def test_catalog_covers_every_prompt_type_once():
    assert [spec.prompt_type for spec in TASK_CATALOG] == list(PromptType)
    assert set(PROMPT_BUILDERS) == set(PromptType)


def test_build_tasks_keeps_catalog_order_and_bounds():
    tasks = _build()
    assert [t.prompt_type for t in tasks] == list(PromptType)
    assert {t.prompt_type: t.max_tokens for t in tasks} == {
        PromptType.HEAD: 1500,
        PromptType.DEEPLINKS: 1500,
        PromptType.CONTENT: 4000,
        PromptType.IMAGES: 1500,
        PromptType.SCHEMA: 2000,
    }
    assert all(t.model == "gpt-4-turbo-preview" for t in tasks)


def test_required_keys_per_type():
    tasks = {t.prompt_type: t for t in _build()}
    assert tasks[PromptType.HEAD].required_keys == {"head", "confidence", "notes"}
    assert tasks[PromptType.DEEPLINKS].required_keys == {"links", "confidence", "notes"}
    assert tasks[PromptType.CONTENT].required_keys == {"blocks", "confidence", "notes"}
    assert tasks[PromptType.IMAGES].required_keys == {"alts", "confidence", "notes"}
    assert tasks[PromptType.SCHEMA].required_keys == {"schema", "confidence", "notes"}


def test_head_only():
    tasks = _build(head_only=True)
    assert [t.prompt_type for t in tasks] == [PromptType.HEAD]


def test_prompt_type_subset_keeps_catalog_order():
    tasks = _build(prompt_types=["schema", PromptType.HEAD])
    assert [t.prompt_type for t in tasks] == [PromptType.HEAD, PromptType.SCHEMA]


def test_unknown_prompt_type_is_rejected():
    with pytest.raises(ValueError):
        _build(prompt_types=["footer"])


def test_tone_override_reaches_prompts():
    tasks = _build(tone="premium-new")
    premium = get_tone_profile("premium-new").personality
    assert all(premium in t.system_prompt for t in tasks)


def test_spec_model_override():
    catalog = (TaskSpec(PromptType.SCHEMA, max_tokens=100, model="small-model"),)
    (task,) = _build(catalog=catalog)
    assert task.model == "small-model"
    assert task.max_tokens == 100


def test_plain_mappings_are_accepted():
    tasks = build_tasks(
        {"route": "/", "head": {"title": "Home"}},
        {"name": "Shop"},
        {"type": "home"},
        model="m",
    )
    assert len(tasks) == 5
    assert '"Home"' in tasks[0].user_prompt
    assert "Shop" in tasks[0].system_prompt


def test_content_prompt_lists_blocks():
    content = next(t for t in _build() if t.prompt_type is PromptType.CONTENT)
    assert "We fix watches." in content.user_prompt
    assert "St Albans" in content.user_prompt


def test_loose_upstream_inputs_still_build_every_prompt():
    opened = object()
    tasks = build_tasks(
        {
            "route": None,
            "head": {"title": None, "metaDescription": 42},
            "blocks": ["Intro paragraph", None, {"id": "b1"}],
            "links": None,
        },
        {"name": "Shop", "services": ["repair", 3, None], "opened": opened},
        {"type": None, "tone": None, "schema_types": None},
        model="m",
    )

    assert [t.prompt_type for t in tasks] == list(PromptType)
    assert all(t.build_error is None for t in tasks)
    head, _, content, _, schema = tasks
    assert 'Title: "" (0 chars)' in head.user_prompt
    assert 'Meta: "42" (2 chars)' in head.user_prompt
    assert "Intro paragraph" in content.user_prompt
    assert str(opened) in schema.user_prompt
    assert "- Services: repair, 3" in head.system_prompt
    assert "PAGE TYPE: page page" in head.system_prompt


def test_unreadable_inputs_mark_every_task():
    tasks = build_tasks("not a content map", {"name": "Shop"}, {}, model="m")

    assert len(tasks) == 5
    assert all(t.system_prompt == t.user_prompt == "" for t in tasks)
    assert all(t.build_error.startswith("Could not build prompt: ") for t in tasks)


def test_failing_builder_only_marks_its_own_task(monkeypatch):
    class Exploding:
        def build(self, content_map, profile, directive):
            raise TypeError("bad image entry")

    monkeypatch.setitem(PROMPT_BUILDERS, PromptType.IMAGES, Exploding())
    tasks = {t.prompt_type: t for t in _build()}

    assert tasks[PromptType.IMAGES].build_error == (
        "Could not build prompt: TypeError: bad image entry"
    )
    assert all(
        t.build_error is None and t.user_prompt
        for pt, t in tasks.items()
        if pt is not PromptType.IMAGES
    )
