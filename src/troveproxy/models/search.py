"""Search request and response models.

The wire format uses camelCase keys (``numFound``, ``sourceUrl``) because the
browser front end consumes the envelope directly; Python code uses the
snake_case attribute names.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RESULT_LIMIT = 20
MAX_RESULT_LIMIT = 100

_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def _parse_int(value: Any) -> int | None:
    """Parse a leading integer from a raw query-string value.

    Mirrors the lenient parsing browsers apply to ``?n=20abc``: leading
    digits win, anything unparseable yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group(0)) if match else None


def clamp_result_limit(raw: Any, maximum: int = MAX_RESULT_LIMIT) -> int:
    """Clamp the requested page size to ``[1, maximum]``.

    Missing, unparseable or zero values fall back to the default of 20.
    """
    parsed = _parse_int(raw)
    if not parsed:
        return min(DEFAULT_RESULT_LIMIT, maximum)
    return max(1, min(parsed, maximum))


def clamp_start_offset(raw: Any) -> int:
    """Clamp the start offset to a non-negative integer (default 0)."""
    parsed = _parse_int(raw)
    if parsed is None or parsed < 0:
        return 0
    return parsed


class SearchRequest(BaseModel):
    """A validated search request, built per incoming HTTP call."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1, description="Trimmed, non-empty search text")
    result_limit: int = Field(default=DEFAULT_RESULT_LIMIT, ge=1, le=MAX_RESULT_LIMIT, description="Results per page")
    start_offset: int = Field(default=0, ge=0, description="Start offset into the upstream result set")

    @classmethod
    def from_raw(
        cls,
        query: str | None,
        n: Any = None,
        s: Any = None,
        *,
        max_results: int = MAX_RESULT_LIMIT,
    ) -> SearchRequest | None:
        """Build a request from raw query-string values.

        Returns:
            The request, or ``None`` when the query is missing or blank.
        """
        trimmed = (query or "").strip()
        if not trimmed:
            return None
        return cls(
            query=trimmed,
            result_limit=clamp_result_limit(n, min(max_results, MAX_RESULT_LIMIT)),
            start_offset=clamp_start_offset(s),
        )


class NormalizedRecord(BaseModel):
    """One search result in the flat shape consumed by the client."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Upstream record id, or a synthetic result-<index>")
    title: str = Field(default="Untitled", description="Article heading or work title")
    snippet: str = Field(default="", description="Short text excerpt")
    date: str = Field(default="", description="Publication or issue date as given upstream")
    type: str = Field(default="newspaper", description="Record category or type")
    contributor: str = Field(default="", description="Newspaper title or contributing organisation")
    source_url: str = Field(default="", alias="sourceUrl", description="Link to the record on Trove")


class SearchResultPage(BaseModel):
    """The ``response`` block of the search envelope."""

    model_config = ConfigDict(populate_by_name=True)

    docs: list[NormalizedRecord] = Field(default_factory=list, description="Normalized records")
    num_found: int = Field(default=0, ge=0, alias="numFound", description="Total upstream matches")
    start: int = Field(default=0, ge=0, description="Offset of the first returned record")


class SearchResultEnvelope(BaseModel):
    """Successful search response returned to the client."""

    response: SearchResultPage = Field(description="Result page")
    query: str = Field(description="Echo of the trimmed query")
    success: bool = Field(default=True, description="Always true for a 200 response")


class ErrorBody(BaseModel):
    """Error response body. Diagnostic fields are omitted when unset."""

    error: str = Field(description="Human-readable error message")
    attempts: int | None = Field(default=None, description="Upstream attempts made before giving up")
    suggestion: str | None = Field(default=None, description="What the caller can do next")
