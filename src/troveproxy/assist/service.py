"""Assist service — LLM-backed helpers that always return something useful.

Every operation degrades to deterministic output when no LLM is configured
or the call fails, so the assist endpoints never surface LLM errors.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from troveproxy.assist import prompts
from troveproxy.assist.llm import LLMClient, LLMError
from troveproxy.config.settings import AISettings
from troveproxy.models.assist import AssistNote, CategoryCount

logger = logging.getLogger(__name__)

SUMMARY_LIMIT = 10
TRANSLATE_LIMIT = 5
MAX_CATEGORIES = 8
MAX_SUGGESTIONS = 5
MIN_SUGGESTION_INPUT = 2

SUMMARY_UNAVAILABLE = "AI summarization temporarily unavailable. Please review the search results manually."
TRANSLATION_UNAVAILABLE = "Historical language assistance temporarily unavailable."
FALLBACK_CATEGORY = "Historical Records"
FALLBACK_CATEGORY_DESCRIPTION = "Australian historical documents"


def _now() -> str:
    return datetime.now(UTC).isoformat()


class AssistService:
    """Query enhancement, summaries, categories and suggestions.

    Args:
        settings: AI configuration. Without an API key no LLM client is built
            and every operation returns its fallback.
        llm: Pre-built LLM client, overriding the one derived from settings.
    """

    def __init__(self, settings: AISettings, llm: LLMClient | None = None) -> None:
        self._settings = settings
        if llm is None and settings.api_key:
            llm = LLMClient(settings)
        self._llm = llm
        if self._llm is None:
            logger.warning("No LLM API key configured; assist features will return fallbacks")

    @property
    def enabled(self) -> bool:
        return self._llm is not None

    @property
    def model(self) -> str:
        return self._settings.model

    async def _complete(self, prompt: str) -> str | None:
        if self._llm is None:
            return None
        try:
            return await self._llm.chat(prompt)
        except LLMError as e:
            logger.warning("Assist completion failed, using fallback: %s", e)
            return None

    async def enhance_query(self, query: str) -> str:
        """Expand a search query with historical context terms."""
        enhanced = await self._complete(prompts.ENHANCE_QUERY_PROMPT.format(query=query))
        if enhanced is None:
            return f"{query} Australian historical context colonial period archives records"
        if len(enhanced) < len(query):
            return f"{query} Australian historical records colonial period archives"
        return enhanced

    async def summarize_results(self, docs: list[dict[str, Any]]) -> list[AssistNote]:
        if not docs:
            return []
        summary = await self._complete(prompts.SUMMARIZE_PROMPT.format(results=prompts.format_results(docs[:SUMMARY_LIMIT])))
        return [AssistNote(type="summary", content=summary or SUMMARY_UNAVAILABLE, timestamp=_now())]

    async def categorize_results(self, docs: list[dict[str, Any]]) -> list[CategoryCount]:
        """Group records into Australian-history themes.

        Falls back to a single "Historical Records" category holding every
        record when the model is unavailable or its answer cannot be parsed.
        """
        if not docs:
            return []

        fallback = [CategoryCount(category=FALLBACK_CATEGORY, count=len(docs), description=FALLBACK_CATEGORY_DESCRIPTION)]
        if self._llm is None:
            return fallback

        prompt = prompts.CATEGORIZE_PROMPT.format(results=prompts.format_result_lines(docs[:SUMMARY_LIMIT]))
        try:
            raw = await self._llm.chat_json_array(prompt)
        except LLMError as e:
            logger.warning("Categorisation failed, using fallback: %s", e)
            return fallback

        categories: list[CategoryCount] = []
        for item in raw[:MAX_CATEGORIES]:
            try:
                categories.append(CategoryCount.model_validate(item))
            except ValidationError:
                logger.debug("Skipping malformed category entry: %r", item)
        return categories or fallback

    async def explain_historical_language(self, docs: list[dict[str, Any]]) -> list[AssistNote]:
        if not docs:
            return []
        text = " ".join(
            str(doc.get("snippet") or doc.get("text") or doc.get("title") or "") for doc in docs[:TRANSLATE_LIMIT]
        )
        notes = await self._complete(prompts.TRANSLATE_PROMPT.format(text=text))
        return [AssistNote(type="translation", content=notes or TRANSLATION_UNAVAILABLE, timestamp=_now())]

    async def smart_suggestions(self, partial: str) -> list[str]:
        """Up to five suggested queries for a partially typed one."""
        if len(partial) < MIN_SUGGESTION_INPUT:
            return []
        reply = await self._complete(prompts.SUGGESTIONS_PROMPT.format(partial=partial))
        if not reply:
            return []
        return [line.strip() for line in reply.splitlines() if line.strip()][:MAX_SUGGESTIONS]

    async def check_connection(self) -> bool:
        if self._llm is None:
            return False
        return await self._llm.verify_connection()
