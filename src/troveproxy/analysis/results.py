"""Aggregate statistics over result pages.

All helpers accept plain record dicts (the ``docs`` of a search envelope) so
they work on whatever the browser posts back.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any, get_args

from troveproxy.analysis.text import clean_snippet, extract_keywords, extract_year, format_result_count, truncate_text
from troveproxy.models.analytics import (
    ArrangedResults,
    DecadeCount,
    ResultAnalytics,
    SortKey,
    TypeCount,
    YearRange,
)

SORT_KEYS: tuple[str, ...] = get_args(SortKey)
DEFAULT_TYPE = "newspaper"


def decade_of(year: int) -> int:
    return year // 10 * 10


def group_by_decade(docs: Iterable[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group dated records under ``"<decade>s"`` labels in chronological order.

    Records without a four-digit year are left out.
    """
    buckets: dict[int, list[dict[str, Any]]] = {}
    for doc in docs:
        year = extract_year(doc.get("date"))
        if year is not None:
            buckets.setdefault(decade_of(year), []).append(doc)
    return {f"{decade}s": buckets[decade] for decade in sorted(buckets)}


def sort_results(docs: Sequence[dict[str, Any]], sort_by: str = "relevance") -> list[dict[str, Any]]:
    """Return a sorted copy. ``relevance`` keeps upstream order.

    Undated records sort as year 0.

    Raises:
        ValueError: If ``sort_by`` is not one of ``SORT_KEYS``.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by!r}")
    if sort_by == "date_asc":
        return sorted(docs, key=lambda d: extract_year(d.get("date")) or 0)
    if sort_by == "date_desc":
        return sorted(docs, key=lambda d: extract_year(d.get("date")) or 0, reverse=True)
    if sort_by == "title":
        return sorted(docs, key=lambda d: str(d.get("title") or "").lower())
    return list(docs)


def filter_by_type(docs: Sequence[dict[str, Any]], types: Iterable[str] | None) -> list[dict[str, Any]]:
    """Keep records whose type is listed. An empty filter keeps everything."""
    wanted = set(types or ())
    if not wanted:
        return list(docs)
    return [doc for doc in docs if (doc.get("type") or DEFAULT_TYPE) in wanted]


def analyze_results(docs: Sequence[dict[str, Any]], max_keywords: int = 10) -> ResultAnalytics:
    """Type distribution, decade histogram, year range and keywords for a page."""
    types = Counter(str(doc.get("type") or DEFAULT_TYPE) for doc in docs)
    years = [year for year in (extract_year(doc.get("date")) for doc in docs) if year is not None]
    decades = Counter(decade_of(year) for year in years)
    text = " ".join(f"{doc.get('title') or ''} {clean_snippet(doc.get('snippet'))}" for doc in docs)

    return ResultAnalytics(
        total=len(docs),
        content_types=[TypeCount(name=name, count=count) for name, count in types.most_common()],
        decades=[DecadeCount(decade=f"{decade}s", count=decades[decade]) for decade in sorted(decades)],
        year_range=YearRange(earliest=min(years), latest=max(years)) if years else None,
        keywords=extract_keywords(text, max_keywords),
    )


def arrange_results(
    docs: Sequence[dict[str, Any]],
    *,
    sort_by: str = "relevance",
    types: Iterable[str] | None = None,
    snippet_length: int | None = None,
) -> ArrangedResults:
    """Filter by type, sort, and group a page of records for display.

    With ``snippet_length`` set, snippets are stripped of markup and
    truncated; the input records are never modified.
    """
    arranged = sort_results(filter_by_type(docs, types), sort_by)
    if snippet_length:
        arranged = [
            {**doc, "snippet": truncate_text(clean_snippet(doc.get("snippet")), snippet_length)} for doc in arranged
        ]
    return ArrangedResults(
        total=len(arranged),
        count_label=format_result_count(len(arranged)),
        docs=arranged,
        decades=group_by_decade(arranged),
    )
