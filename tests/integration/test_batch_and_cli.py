"""Batch enhancement and the command-line runner."""

import json

import pytest

from content_enhancer import BatchSummary, EnhancementOrchestrator, FrozenConfig, WorkBatch
from content_enhancer.adapters import MockAdapter
from content_enhancer.cli import main
from content_enhancer.exceptions import ProviderError

pytestmark = pytest.mark.integration


BATCH = {
    "batch_id": "batch-001",
    "profile": {"name": "Repairs Ltd", "domain": "example.co.uk", "country": "UK"},
    "pages": [
        {
            "page_id": "home",
            "content_map": {"route": "/", "head": {"title": "Home"}},
            "directive": {"type": "home", "tone": "friendly"},
        },
        {
            "page_id": "st-albans",
            "content_map": {"route": "/branches/watch-repairs-st-albans"},
            "directive": {"type": "location", "tone": "premium-new"},
        },
    ],
}


@pytest.mark.asyncio
async def test_enhance_batch_summarizes_pages():
    orchestrator = EnhancementOrchestrator(FrozenConfig())
    batch = WorkBatch.model_validate(BATCH)

    summary = await orchestrator.enhance_batch(batch.pages, batch.profile)

    assert isinstance(summary, BatchSummary)
    assert summary.total_pages == 2
    assert summary.completed == 2
    assert summary.failed == 0
    assert summary.total_changes == 12
    assert summary.average_confidence == pytest.approx((0.95 + 0.9 * 4) / 5)
    assert [p.page_id for p in summary.pages] == ["home", "st-albans"]


@pytest.mark.asyncio
async def test_failed_tasks_do_not_fail_the_page():
    adapter = MockAdapter({"head": ProviderError("down")})
    orchestrator = EnhancementOrchestrator(FrozenConfig(), adapter=adapter)

    summary = await orchestrator.enhance_batch(
        BATCH["pages"], BATCH["profile"], head_only=True
    )

    assert summary.completed == 2
    assert summary.total_changes == 0
    assert summary.average_confidence == 0
    page = summary.pages[0].to_dict()
    assert page["document"]["notes"] == ["[head] Failed: down"]


@pytest.mark.asyncio
async def test_page_that_raises_is_recorded_as_failed():
    class Exploding(EnhancementOrchestrator):
        async def enhance(self, content_map, profile, directive, **kwargs):
            if content_map.route == "/":
                raise RuntimeError("page blew up")
            return await super().enhance(content_map, profile, directive, **kwargs)

    summary = await Exploding(FrozenConfig()).enhance_batch(
        BATCH["pages"], BATCH["profile"]
    )

    assert summary.completed == 1
    assert summary.failed == 1
    failed = summary.to_dict()["pages"][0]
    assert failed == {
        "page_id": "home",
        "status": "failed",
        "changes": 0,
        "confidence": 0.0,
        "error": "page blew up",
    }


def test_select_unknown_pages_is_an_error():
    with pytest.raises(ValueError, match="No matching pages found for: nope"):
        WorkBatch.model_validate(BATCH).select(["nope"])


@pytest.fixture
def batch_file(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps(BATCH), encoding="utf-8")
    return path


def test_cli_dry_run_prints_summary(batch_file, capsys):
    exit_code = main([str(batch_file), "--pages", "st-albans", "--tone", "corporate"])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["batch_id"] == "batch-001"
    assert output["total_pages"] == 1
    assert output["completed"] == 1
    assert output["pages"][0]["page_id"] == "st-albans"
    assert output["pages"][0]["document"]["metadata"]["prompt_count"] == 5


def test_cli_head_only_writes_output_file(batch_file, tmp_path):
    out = tmp_path / "result.json"
    assert main([str(batch_file), "--head-only", "--output", str(out)]) == 0

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["total_pages"] == 2
    assert all(
        page["document"]["metadata"]["prompt_count"] == 1 for page in data["pages"]
    )


def test_cli_real_api_without_key_fails_cleanly(batch_file, capsys):
    assert main([str(batch_file), "--real-api"]) == 2
    assert capsys.readouterr().out == ""


def test_cli_missing_batch_file(tmp_path):
    assert main([str(tmp_path / "missing.json")]) == 2


def test_cli_unknown_page(batch_file):
    assert main([str(batch_file), "--pages", "nope"]) == 2
