"""Command-line batch runner.

Reads a work batch JSON file (``batch_id``, ``profile``, ``pages``) and
prints the batch summary, including each page's merged document, as JSON.
The offline mock adapter is used unless ``--real-api`` is given.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Any

from pydantic import ValidationError

from content_enhancer.batch import BatchSummary, WorkBatch
from content_enhancer.config import resolve_config
from content_enhancer.exceptions import ConfigurationError
from content_enhancer.orchestrator import create_orchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content_enhancer",
        description="Enhance the pages of a work batch with concurrent AI tasks",
    )
    parser.add_argument("batch", type=Path, help="Work batch JSON file")
    parser.add_argument(
        "--pages", default=None, help="Comma-separated page ids to process"
    )
    parser.add_argument(
        "--head-only", action="store_true", help="Run only the head task per page"
    )
    parser.add_argument("--tone", default=None, help="Override every page's tone")
    parser.add_argument(
        "--real-api",
        action="store_true",
        help="Call the configured provider instead of the offline mock",
    )
    parser.add_argument(
        "--profile", default=None, help="Configuration profile from pyproject.toml"
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Write JSON here instead of stdout"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


async def run_batch(
    batch: WorkBatch,
    *,
    page_ids: list[str] | None = None,
    head_only: bool = False,
    tone: str | None = None,
    overrides: dict[str, Any] | None = None,
    profile: str | None = None,
) -> BatchSummary:
    """Resolve configuration and enhance the selected pages of ``batch``."""
    pages = batch.select(page_ids)
    config = resolve_config(overrides, profile=profile)
    async with create_orchestrator(config) as orchestrator:
        return await orchestrator.enhance_batch(
            pages, batch.profile, head_only=head_only, tone=tone
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        batch = WorkBatch.model_validate_json(args.batch.read_text(encoding="utf-8"))
    except OSError as e:
        logger.error("Cannot read batch file %s: %s", args.batch, e)
        return 2
    except ValidationError as e:
        logger.error("Invalid batch file %s: %s", args.batch, e)
        return 2

    page_ids = (
        [p.strip() for p in args.pages.split(",") if p.strip()] if args.pages else None
    )
    overrides = {"use_real_api": True} if args.real_api else None
    logger.info(
        "Loaded batch %s (%d pages)%s",
        batch.batch_id,
        len(batch.pages),
        "" if args.real_api else " - dry run with mock provider",
    )

    try:
        summary = asyncio.run(
            run_batch(
                batch,
                page_ids=page_ids,
                head_only=args.head_only,
                tone=args.tone,
                overrides=overrides,
                profile=args.profile,
            )
        )
    except (ConfigurationError, ValueError) as e:
        logger.error("%s", e)
        return 2

    output = json.dumps(
        {"batch_id": batch.batch_id, **summary.to_dict()}, indent=2, ensure_ascii=False
    )
    if args.output is not None:
        args.output.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)

    logger.info(
        "%d/%d pages completed, %d changes, average confidence %.2f, %.1fs",
        summary.completed,
        summary.total_pages,
        summary.total_changes,
        summary.average_confidence,
        summary.processing_time_s,
    )
    return 0 if summary.failed == 0 else 1
