"""Batch types: several pages enhanced against one business profile.

Pages run one after another; a page that raises is recorded as failed and
the batch continues.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from content_enhancer.core.inputs import BusinessProfile, ContentMap, Directive
from content_enhancer.core.types import MergedDocument


class PageRequest(BaseModel):
    """One page of a work batch."""

    model_config = ConfigDict(extra="allow")

    page_id: str
    content_map: ContentMap = Field(default_factory=ContentMap)
    directive: Directive = Field(default_factory=Directive)


class WorkBatch(BaseModel):
    """A batch file: shared profile plus the pages to enhance."""

    model_config = ConfigDict(extra="allow")

    batch_id: str = "batch"
    profile: BusinessProfile = Field(default_factory=BusinessProfile)
    pages: list[PageRequest] = Field(default_factory=list)

    def select(self, page_ids: list[str] | None) -> list[PageRequest]:
        """Return the requested pages in batch order (all when ``page_ids`` is None).

        Raises:
            ValueError: If ``page_ids`` matches no page.
        """
        if page_ids is None:
            return list(self.pages)
        wanted = set(page_ids)
        selected = [page for page in self.pages if page.page_id in wanted]
        if not selected:
            raise ValueError(f"No matching pages found for: {', '.join(page_ids)}")
        return selected


@dataclasses.dataclass(frozen=True, slots=True)
class PageResult:
    """Outcome of enhancing one page."""

    page_id: str
    status: Literal["completed", "failed"]
    document: MergedDocument | None = None
    error: str | None = None

    @property
    def changes(self) -> int:
        return self.document.total_changes if self.document is not None else 0

    @property
    def confidence(self) -> float:
        return self.document.confidence if self.document is not None else 0.0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "page_id": self.page_id,
            "status": self.status,
            "changes": self.changes,
            "confidence": self.confidence,
        }
        if self.document is not None:
            data["document"] = self.document.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclasses.dataclass(frozen=True, slots=True)
class BatchSummary:
    """Aggregate view of a batch run.

    ``total_changes`` and ``average_confidence`` cover completed pages only.
    """

    total_pages: int
    completed: int
    failed: int
    total_changes: int
    average_confidence: float
    processing_time_s: float
    pages: tuple[PageResult, ...]

    @classmethod
    def from_results(
        cls, results: list[PageResult], processing_time_s: float
    ) -> BatchSummary:
        completed = [r for r in results if r.status == "completed"]
        average = (
            sum(r.confidence for r in completed) / len(completed) if completed else 0.0
        )
        return cls(
            total_pages=len(results),
            completed=len(completed),
            failed=len(results) - len(completed),
            total_changes=sum(r.changes for r in completed),
            average_confidence=average,
            processing_time_s=round(processing_time_s, 1),
            pages=tuple(results),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pages": self.total_pages,
            "completed": self.completed,
            "failed": self.failed,
            "total_changes": self.total_changes,
            "average_confidence": self.average_confidence,
            "processing_time_s": self.processing_time_s,
            "pages": [page.to_dict() for page in self.pages],
        }
