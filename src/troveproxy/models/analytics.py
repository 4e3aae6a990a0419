"""Result analytics models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SortKey = Literal["relevance", "date_asc", "date_desc", "title"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TypeCount(_CamelModel):
    name: str = Field(description="Record type, e.g. 'Article'")
    count: int = Field(ge=0)


class DecadeCount(_CamelModel):
    decade: str = Field(description="Decade label, e.g. '1850s'")
    count: int = Field(ge=0)


class YearRange(_CamelModel):
    earliest: int
    latest: int


class ResultAnalytics(_CamelModel):
    """Aggregate view of a result page, as served by ``POST /api/analytics``."""

    total: int = Field(default=0, ge=0, description="Number of records analysed")
    content_types: list[TypeCount] = Field(default_factory=list, description="Record counts per type, largest first")
    decades: list[DecadeCount] = Field(default_factory=list, description="Dated records per decade, chronological")
    year_range: YearRange | None = Field(default=None, description="Earliest and latest year seen, if any")
    keywords: list[str] = Field(default_factory=list, description="Most frequent words in titles and snippets")


class QueryValidation(_CamelModel):
    """Outcome of client-side style query validation."""

    is_valid: bool
    query: str | None = Field(default=None, description="Trimmed query when valid")
    error: str | None = Field(default=None, description="Why the query was rejected")
    trove_url: str | None = Field(default=None, description="The same search on the Trove website, when valid")


class ArrangeRequest(_CamelModel):
    """Body of ``POST /api/results/arrange``."""

    docs: list[dict[str, Any]] = Field(default_factory=list, description="Result records")
    sort_by: SortKey = Field(default="relevance", description="relevance keeps upstream order")
    types: list[str] = Field(default_factory=list, description="Record types to keep; empty keeps all")
    snippet_length: int | None = Field(default=None, ge=20, description="Clean and truncate snippets to this length")


class ArrangedResults(_CamelModel):
    """A filtered, sorted page with its decade grouping."""

    total: int = Field(default=0, ge=0, description="Records left after filtering")
    count_label: str = Field(description="Compact count, e.g. '1.5K'")
    docs: list[dict[str, Any]] = Field(default_factory=list, description="Records in display order")
    decades: dict[str, list[dict[str, Any]]] = Field(
        default_factory=dict, description="Dated records keyed by decade label, chronological"
    )
