"""Tests for the text helpers."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from troveproxy.analysis.text import (
    build_trove_search_url,
    clean_snippet,
    extract_keywords,
    extract_year,
    format_result_count,
    local_suggestions,
    truncate_text,
    validate_query,
)


class TestCleanSnippet:
    def test_strips_tags_and_entities(self) -> None:
        raw = "<p>The  <b>gold</b>\n fields &amp; the &quot;diggers&quot; &lt;1851&gt;</p>"
        assert clean_snippet(raw) == 'The gold fields & the "diggers" <1851>'

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value: Any) -> None:
        assert clean_snippet(value) == ""


class TestTruncateText:
    def test_short_text_unchanged(self) -> None:
        assert truncate_text("short", 10) == "short"

    def test_breaks_at_late_word_boundary(self) -> None:
        text = "alpha beta gamma delta epsilon"
        assert truncate_text(text, 24) == "alpha beta gamma delta..."

    def test_hard_cut_without_nearby_space(self) -> None:
        assert truncate_text("a" * 30, 10) == "a" * 10 + "..."

    def test_none(self) -> None:
        assert truncate_text(None) == ""


class TestExtractKeywords:
    def test_frequency_order_without_stop_words(self) -> None:
        text = "The gold rush. Gold miners and the gold licence; miners protest at Ballarat."
        assert extract_keywords(text, 3) == ["gold", "miners", "rush"]

    def test_short_words_dropped(self) -> None:
        assert extract_keywords("an ox is on it") == []

    def test_empty(self) -> None:
        assert extract_keywords("") == []


class TestExtractYear:
    @pytest.mark.parametrize(
        ("date", "expected"),
        [("1851-05-15", 1851), ("c. 1901", 1901), ("15/03/1854", 1854), ("undated", None), (None, None)],
    )
    def test_values(self, date: Any, expected: int | None) -> None:
        assert extract_year(date) == expected


class TestValidateQuery:
    def test_valid_is_trimmed(self) -> None:
        result = validate_query("  gold rush ")
        assert result.is_valid
        assert result.query == "gold rush"

    @pytest.mark.parametrize(
        ("query", "error"),
        [
            (None, "Please enter a search term"),
            ("", "Please enter a search term"),
            (" a ", "Search term must be at least 2 characters long"),
            ("x" * 201, "Search term is too long (maximum 200 characters)"),
            ("gold <script>", "Search contains invalid characters"),
            ("a[1]", "Search contains invalid characters"),
        ],
    )
    def test_invalid(self, query: Any, error: str) -> None:
        result = validate_query(query)
        assert not result.is_valid
        assert result.error == error


class TestLocalSuggestions:
    def test_topic_match(self) -> None:
        assert local_suggestions("gold") == ['"gold rush"']

    def test_topic_and_exact_phrase(self) -> None:
        assert local_suggestions("melbourne cup") == ['"melbourne cup"', '"melbourne cup"']

    def test_location(self) -> None:
        assert local_suggestions("syd") == ['"sydney harbour bridge"', "syd Sydney"]

    def test_too_short(self) -> None:
        assert local_suggestions("g") == []

    def test_limit(self) -> None:
        assert len(local_suggestions("an")) <= 5


class TestFormatResultCount:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(None, "Unknown"), ("abc", "Unknown"), (999, "999"), (1500, "1.5K"), ("2500000", "2.5M"), (0, "0")],
    )
    def test_values(self, count: Any, expected: str) -> None:
        assert format_result_count(count) == expected


class TestBuildTroveSearchUrl:
    def test_query_only(self) -> None:
        url = httpx.URL(build_trove_search_url("gold rush"))
        assert url.host == "trove.nla.gov.au"
        assert url.path == "/search"
        assert dict(url.params) == {"q": "gold rush"}

    def test_filters(self) -> None:
        url = httpx.URL(build_trove_search_url("gold", category="newspaper", date_from="1850"))
        assert dict(url.params) == {"q": "gold", "category": "newspaper", "l-date": "1850-*"}
