"""Request inputs supplied by the upstream content pipeline.

These models are permissive on purpose: the enhancement core only
interpolates them into prompts, so unknown fields are kept, ``null`` is
accepted wherever a value may be missing, and list entries may have any
shape. Prompt builders render a missing text field as an empty string.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _null_as(empty: type[list] | type[dict]) -> BeforeValidator:
    return BeforeValidator(lambda value: empty() if value is None else value)


# A list whose entries are passed through untouched; ``null`` reads as empty
LooseList = Annotated[list[Any], _null_as(list)]


class _InputModel(BaseModel):
    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )


class HeadFields(_InputModel):
    """Current head metadata of the page."""

    title: str | None = None
    meta_description: str | None = Field(default=None, alias="metaDescription")
    canonical: str | None = None


class ContentMap(_InputModel):
    """Extracted page content: head fields, blocks, links and image candidates."""

    route: str | None = "/"
    head: Annotated[HeadFields, _null_as(dict)] = Field(default_factory=HeadFields)
    blocks: LooseList = Field(default_factory=list)
    links: LooseList = Field(default_factory=list)
    images: LooseList = Field(default_factory=list)


class Reviews(_InputModel):
    """Structured review information; preferred over a bare review count."""

    count: str | int | None = None
    site: str | None = None
    rating: str | float | None = None
    url: str | None = None


class BusinessProfile(_InputModel):
    """Brand, services, locale and trust signals for the business."""

    name: str | None = None
    domain: str | None = None
    services: LooseList = Field(default_factory=list)
    geo_scope: LooseList = Field(default_factory=list)
    reviews: Reviews | None = None
    review_count: int | str | None = None
    guarantee: str | None = None
    phone: str | None = None
    hours: str | None = None
    country: str | None = "UK"
    locale: str | None = None


class Directive(_InputModel):
    """Enhancement instructions: page type, tone and required schema types."""

    type: str | None = "page"
    tone: str | None = "friendly"
    schema_types: LooseList = Field(default_factory=lambda: ["LocalBusiness"])

    def with_tone(self, tone: str | None) -> Directive:
        """Return a copy with ``tone`` overridden when one is given."""
        if not tone:
            return self
        return self.model_copy(update={"tone": tone})
