"""Upstream response shape detection.

Trove's v3 API nests results under ``category[0].records`` while the older v2
API used ``response.zone[0].records``. Neither deployment announces which one
it speaks, so the proxy tries an ordered chain of matchers and takes the first
hit. Each matcher is a pure function ``dict -> ResultPage | None``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from troveproxy.models.status import ResponseStructure

logger = logging.getLogger(__name__)


class ResultPage(BaseModel):
    """Raw records located in an upstream body, before normalization."""

    records: list[Any] = Field(default_factory=list, description="Raw upstream record dicts")
    total: int = Field(default=0, ge=0, description="Total matches reported upstream")
    shape: str = Field(default="none", description="Which matcher recognised the body")


ShapeMatcher = Callable[[Any], ResultPage | None]


def parse_total(value: Any) -> int:
    """Coerce an upstream ``total`` (int or numeric string) to a non-negative int."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        return max(int(str(value).strip()), 0)
    except (TypeError, ValueError):
        return 0


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _records_page(records: dict[str, Any], key: str, shape: str) -> ResultPage | None:
    items = records.get(key)
    if not isinstance(items, list):
        return None
    return ResultPage(records=items, total=parse_total(records.get("total")), shape=shape)


def match_current_shape(data: Any) -> ResultPage | None:
    """Match the v3 ``category[0].records.{article|work}`` shape.

    A non-empty ``category`` list claims the body even when its first entry
    holds neither list: the result is then an empty page rather than a
    fall-through to the legacy matcher.
    """
    categories = _as_dict(data).get("category")
    if not isinstance(categories, list) or not categories:
        return None

    records = _as_dict(_as_dict(categories[0]).get("records"))
    page = _records_page(records, "article", "current-article") or _records_page(records, "work", "current-work")
    if page is None:
        logger.info(
            "Trove category[0] has no article/work list (records keys: %s)",
            sorted(records),
        )
        return ResultPage(shape="current-empty")
    return page


def match_legacy_shape(data: Any) -> ResultPage | None:
    """Match the v2 ``response.zone[0].records.work`` shape."""
    zones = _as_dict(_as_dict(data).get("response")).get("zone")
    if not isinstance(zones, list) or not zones:
        return None
    records = _as_dict(_as_dict(zones[0]).get("records"))
    return _records_page(records, "work", "legacy-work")


SHAPE_MATCHERS: tuple[ShapeMatcher, ...] = (match_current_shape, match_legacy_shape)


def extract_result_page(data: Any, matchers: tuple[ShapeMatcher, ...] = SHAPE_MATCHERS) -> ResultPage:
    """Locate the result list and total in an upstream body.

    Never raises: an unrecognised body yields an empty page with total 0.
    """
    for matcher in matchers:
        page = matcher(data)
        if page is not None:
            logger.debug("Trove response matched shape=%s, records=%d", page.shape, len(page.records))
            return page

    logger.warning(
        "No results found in expected Trove structures (top-level keys: %s)",
        sorted(_as_dict(data)),
    )
    return ResultPage()


def describe_structure(data: Any) -> ResponseStructure:
    """Summarise which known result containers a probe body holds."""
    body = _as_dict(data)
    categories = body.get("category")
    first = _as_dict(categories[0]) if isinstance(categories, list) and categories else {}
    records = _as_dict(first.get("records"))
    return ResponseStructure(
        has_category=bool(categories),
        has_articles=bool(records.get("article")),
        has_works=bool(records.get("work")),
        top_level_keys=list(body),
    )


def current_total(data: Any) -> int:
    """``category[0].records.total`` from a v3 body, or 0."""
    categories = _as_dict(data).get("category")
    if not isinstance(categories, list) or not categories:
        return 0
    return parse_total(_as_dict(_as_dict(categories[0]).get("records")).get("total"))
