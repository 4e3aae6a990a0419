"""Tests for record normalization."""

from __future__ import annotations

from typing import Any

from troveproxy.models.search import NormalizedRecord
from troveproxy.trove.normalize import normalize_record, normalize_records


class TestNormalizeRecord:
    def test_newspaper_article(self, article_body: dict[str, Any]) -> None:
        raw = article_body["category"][0]["records"]["article"][0]
        record = normalize_record(raw, 0)
        assert record == NormalizedRecord(
            id="1",
            title="Gold found",
            snippet="",
            date="1851-05-15",
            type="newspaper",
            contributor="The Argus",
            source_url="https://trove.nla.gov.au/newspaper/article/1",
        )

    def test_legacy_work(self, legacy_body: dict[str, Any]) -> None:
        raw = legacy_body["response"]["zone"][0]["records"]["work"][0]
        record = normalize_record(raw, 0)
        assert record.title == "Ballarat Diary"
        assert record.date == "1854"
        assert record.contributor == "SLV"
        assert record.type == "newspaper"

    def test_empty_record_gets_defaults(self) -> None:
        record = normalize_record({}, 4)
        assert record.id == "result-4"
        assert record.title == "Untitled"
        assert record.snippet == ""
        assert record.date == ""
        assert record.type == "newspaper"
        assert record.contributor == ""
        assert record.source_url == ""

    def test_non_dict_record(self) -> None:
        record = normalize_record("garbage", 2)
        assert record.id == "result-2"

    def test_nested_title_is_not_used_as_title(self) -> None:
        record = normalize_record({"title": {"title": "The Age"}}, 0)
        assert record.title == "Untitled"
        assert record.contributor == "The Age"

    def test_fallback_order(self) -> None:
        record = normalize_record(
            {"id": 77, "type": "Book", "url": "https://example.org/w/77", "issued": "1901"},
            0,
        )
        assert record.id == "77"
        assert record.type == "Book"
        assert record.source_url == "https://example.org/w/77"
        assert record.date == "1901"

    def test_wire_names(self) -> None:
        dumped = normalize_record({"troveUrl": "u"}, 0).model_dump(by_alias=True)
        assert dumped["sourceUrl"] == "u"
        assert set(dumped) == {"id", "title", "snippet", "date", "type", "contributor", "sourceUrl"}

    def test_idempotent(self, article_body: dict[str, Any]) -> None:
        raw = article_body["category"][0]["records"]["article"][0]
        assert normalize_record(raw, 0) == normalize_record(raw, 0)


def test_normalize_records_uses_list_position() -> None:
    records = normalize_records([{"heading": "A"}, {"id": "x"}, {}])
    assert [r.id for r in records] == ["result-0", "x", "result-2"]
    assert [r.title for r in records] == ["A", "Untitled", "Untitled"]
