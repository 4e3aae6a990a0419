"""Tests for search request parsing and clamping."""

from __future__ import annotations

from typing import Any

import pytest

from troveproxy.models.search import (
    SearchRequest,
    SearchResultEnvelope,
    SearchResultPage,
    clamp_result_limit,
    clamp_start_offset,
)


class TestClampResultLimit:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 20),
            ("", 20),
            ("abc", 20),
            ("0", 20),
            ("5", 5),
            ("20abc", 20),
            ("²", 20),
            ("3²", 3),
            ("100", 100),
            ("500", 100),
            (500, 100),
            ("-3", 1),
            (7, 7),
        ],
    )
    def test_values(self, raw: Any, expected: int) -> None:
        assert clamp_result_limit(raw) == expected

    def test_custom_maximum(self) -> None:
        assert clamp_result_limit("80", maximum=50) == 50


class TestClampStartOffset:
    @pytest.mark.parametrize(("raw", "expected"), [(None, 0), ("x", 0), ("-1", 0), ("40", 40), (0, 0)])
    def test_values(self, raw: Any, expected: int) -> None:
        assert clamp_start_offset(raw) == expected


class TestSearchRequest:
    def test_from_raw_trims_query(self) -> None:
        request = SearchRequest.from_raw("  gold  ", "10", "20")
        assert request is not None
        assert request.query == "gold"
        assert request.result_limit == 10
        assert request.start_offset == 20

    @pytest.mark.parametrize("query", [None, "", "   ", "\t\n"])
    def test_blank_query_is_rejected(self, query: str | None) -> None:
        assert SearchRequest.from_raw(query) is None

    def test_defaults(self) -> None:
        request = SearchRequest.from_raw("eureka")
        assert request is not None
        assert request.result_limit == 20
        assert request.start_offset == 0

    def test_max_results_setting(self) -> None:
        request = SearchRequest.from_raw("eureka", "90", max_results=50)
        assert request is not None
        assert request.result_limit == 50


def test_envelope_wire_format() -> None:
    envelope = SearchResultEnvelope(response=SearchResultPage(num_found=3, start=0), query="q")
    dumped = envelope.model_dump(by_alias=True)
    assert dumped == {"response": {"docs": [], "numFound": 3, "start": 0}, "query": "q", "success": True}
