"""Text helpers for snippets, keywords and search queries."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any

import httpx

from troveproxy.models.analytics import QueryValidation

TROVE_SEARCH_URL = "https://trove.nla.gov.au/search"

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 200

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]")
_INVALID_QUERY_CHARS = re.compile(r"[<>{}\[\]\\]")
_YEAR = re.compile(r"(\d{4})")

_ENTITIES = (
    ("&quot;", '"'),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "will", "with", "would", "said", "mr", "mrs", "can",
        "could", "should", "may", "might", "must", "shall",
    }
)  # fmt: skip

HISTORICAL_TOPICS = (
    "gold rush",
    "federation",
    "world war",
    "great depression",
    "anzac",
    "gallipoli",
    "melbourne cup",
    "sydney harbour bridge",
    "aboriginal",
    "convict",
    "bushfire",
    "drought",
    "flood",
)

LOCATIONS = (
    "Melbourne",
    "Sydney",
    "Brisbane",
    "Perth",
    "Adelaide",
    "Tasmania",
    "Victoria",
    "Queensland",
    "New South Wales",
)


def clean_snippet(snippet: str | None) -> str:
    """Strip HTML tags, collapse whitespace and decode the common entities."""
    if not snippet:
        return ""
    text = _WHITESPACE.sub(" ", _TAG.sub("", str(snippet)))
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def truncate_text(text: str | None, max_length: int = 150) -> str:
    """Shorten text to ``max_length``, breaking at a word when one is near the end."""
    if not text or len(text) <= max_length:
        return text or ""
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def extract_keywords(text: str | None, max_keywords: int = 10) -> list[str]:
    """Most frequent words longer than two characters, stop words excluded.

    Ties keep first-seen order.
    """
    if not text:
        return []
    words = [
        word
        for word in _NON_WORD.sub(" ", text.lower()).split()
        if len(word) > 2 and word not in STOP_WORDS
    ]
    return [word for word, _ in Counter(words).most_common(max_keywords)]


def extract_year(date: Any) -> int | None:
    """First four-digit run in a date string."""
    if not date:
        return None
    match = _YEAR.search(str(date))
    return int(match.group(1)) if match else None


def validate_query(query: Any) -> QueryValidation:
    if not isinstance(query, str) or not query:
        return QueryValidation(is_valid=False, error="Please enter a search term")
    trimmed = query.strip()
    if len(trimmed) < MIN_QUERY_LENGTH:
        return QueryValidation(is_valid=False, error="Search term must be at least 2 characters long")
    if len(trimmed) > MAX_QUERY_LENGTH:
        return QueryValidation(is_valid=False, error="Search term is too long (maximum 200 characters)")
    if _INVALID_QUERY_CHARS.search(trimmed):
        return QueryValidation(is_valid=False, error="Search contains invalid characters")
    return QueryValidation(is_valid=True, query=trimmed)


def local_suggestions(query: str | None, limit: int = 5) -> list[str]:
    """Offline suggestions: matching historical topics, an exact-phrase form and locations."""
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []

    lowered = query.lower()
    suggestions = [
        f'"{topic}"' for topic in HISTORICAL_TOPICS if lowered in topic or topic.split(" ")[0] in lowered
    ]
    if '"' not in query and " " in query:
        suggestions.append(f'"{query}"')
    suggestions.extend(f"{query} {location}" for location in LOCATIONS if lowered in location.lower())
    return suggestions[:limit]


def format_result_count(count: Any) -> str:
    """Compact count label: ``1.5M``, ``12.3K`` or a comma-grouped integer."""
    if count is None or isinstance(count, bool):
        return "Unknown"
    try:
        num = int(count)
    except (TypeError, ValueError):
        return "Unknown"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return f"{num:,}"


def build_trove_search_url(
    query: str,
    *,
    category: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> str:
    """Link to the same search on the public Trove website."""
    params: dict[str, str] = {"q": query}
    if category:
        params["category"] = category
    if date_from or date_to:
        params["l-date"] = f"{date_from or '*'}-{date_to or '*'}"
    return str(httpx.URL(TROVE_SEARCH_URL, params=params))
