"""Record normalization — map heterogeneous Trove records to ``NormalizedRecord``.

Newspaper articles carry ``heading`` plus a nested ``title`` object naming the
newspaper; works carry a plain ``title`` and ``contributor``. Every field has
a fallback, so normalization never fails.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from troveproxy.models.search import NormalizedRecord


def _text(value: Any) -> str:
    """Return a non-empty string for scalar values, ``""`` otherwise."""
    if value is None or isinstance(value, dict | list | bool):
        return ""
    return str(value)


def _first(record: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = _text(record.get(key))
        if value:
            return value
    return ""


def _contributor(record: dict[str, Any]) -> str:
    title = record.get("title")
    if isinstance(title, dict):
        newspaper = _text(title.get("title"))
        if newspaper:
            return newspaper
    return _text(record.get("contributor"))


def normalize_record(record: Any, index: int) -> NormalizedRecord:
    """Normalize one upstream record.

    Args:
        record: Raw record from the upstream result list.
        index: Position in that list, used for the synthetic id.

    Returns:
        A NormalizedRecord with every field populated.
    """
    if not isinstance(record, dict):
        record = {}

    return NormalizedRecord(
        id=_first(record, "id") or f"result-{index}",
        title=_first(record, "heading", "title") or "Untitled",
        snippet=_first(record, "snippet"),
        date=_first(record, "date", "issued"),
        type=_first(record, "category", "type") or "newspaper",
        contributor=_contributor(record),
        source_url=_first(record, "troveUrl", "url", "identifier"),
    )


def normalize_records(records: Iterable[Any]) -> list[NormalizedRecord]:
    return [normalize_record(record, index) for index, record in enumerate(records)]
