"""LLM client — thin wrapper around an OpenAI-compatible chat-completion API.

The assist prompts are self-contained, so each call sends a single user
message and returns the text of the first choice.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from openai import APIStatusError, AsyncOpenAI

from troveproxy.assist.prompts import CONNECTION_PROMPT

if TYPE_CHECKING:
    from troveproxy.config.settings import AISettings

logger = logging.getLogger(__name__)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def _diagnose_api_error(e: APIStatusError, base_url: str, model: str) -> str:
    """Produce a human-readable diagnosis for common API status errors."""
    code = e.status_code

    if code == 401:
        return (
            f"Authentication failed (HTTP 401): API key is invalid or missing.\n"
            f"  → Check TROVEPROXY_AI__API_KEY in your .env file.\n"
            f"  → Endpoint: {base_url}"
        )
    if code == 404:
        return (
            f"Not found (HTTP 404): The model or endpoint does not exist.\n"
            f"  → Endpoint: {base_url}/chat/completions\n"
            f"  → Model: {model}\n"
            f"  → Check that TROVEPROXY_AI__BASE_URL and TROVEPROXY_AI__MODEL are correct."
        )
    if code == 429:
        return (
            f"Rate limited (HTTP 429): Too many requests.\n"
            f"  → Wait and retry, or reduce concurrency.\n"
            f"  → Endpoint: {base_url}"
        )
    return f"API error (HTTP {code}): {e}\n  → Endpoint: {base_url}/chat/completions\n  → Model: {model}"


class LLMClient:
    """Async LLM client wrapping the OpenAI-compatible API.

    Args:
        settings: AI configuration with api_key, base_url, model, etc.
        client: Pre-built ``AsyncOpenAI`` instance (tests pass a mock).
    """

    def __init__(self, settings: AISettings, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._client = client or AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
        masked_key = settings.api_key[:8] + "..." if settings.api_key else "Missing"
        logger.info("LLM client created: base_url=%s, model=%s, api_key=%s", settings.base_url, settings.model, masked_key)

    @property
    def model(self) -> str:
        return self._settings.model

    async def chat(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one user message and return the completion text.

        Raises:
            LLMError: If the call fails or the model returns no content.
        """
        model = self._settings.model
        temperature = temperature if temperature is not None else self._settings.temperature
        max_tokens = max_tokens or self._settings.max_tokens

        logger.info(
            "LLM chat request: model=%s, temperature=%s, max_tokens=%s, prompt_len=%d",
            model,
            temperature,
            max_tokens,
            len(prompt),
        )

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )
        except APIStatusError as e:
            diagnosis = _diagnose_api_error(e, self._settings.base_url, model)
            logger.error("LLM API error:\n%s", diagnosis)
            raise LLMError(f"LLM API error (HTTP {e.status_code})") from e
        except Exception as e:
            logger.error("LLM call FAILED: model=%s, error_type=%s, error=%s", model, type(e).__name__, e)
            raise LLMError(f"LLM call failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if content is None:
            raise LLMError("Model returned empty content")

        logger.info(
            "LLM chat response OK: model=%s, usage=%s, content_len=%d",
            response.model,
            response.usage.model_dump() if response.usage else "N/A",
            len(content),
        )
        return content.strip()

    async def chat_json_array(self, prompt: str) -> list[Any]:
        """Send a prompt whose answer should contain a JSON array and parse it.

        Raises:
            LLMError: If the call fails or no JSON array can be parsed.
        """
        content = self._strip_code_fences(await self.chat(prompt))
        match = _JSON_ARRAY.search(content)
        if match is None:
            raise LLMError("No JSON array in model output")
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning("LLM returned malformed JSON array. Content preview: %s", content[:300])
            raise LLMError("Invalid JSON array from LLM") from e
        if not isinstance(parsed, list):
            raise LLMError("Model output is not a JSON array")
        return parsed

    async def verify_connection(self) -> bool:
        """Ask the model to answer 'Connected'.

        Returns True if the reply contains it, False on any failure.
        """
        try:
            reply = await self.chat(CONNECTION_PROMPT, max_tokens=16)
        except LLMError as e:
            logger.error("LLM connectivity check FAILED: %s", e)
            return False
        return "Connected" in reply

    @staticmethod
    def _strip_code_fences(text: str) -> str:
        """Remove markdown code fences from LLM output.

        Handles patterns like ```json ... ``` or ``` ... ```
        """
        text = text.strip()
        if text.startswith("```"):
            first_newline = text.find("\n")
            if first_newline != -1:
                text = text[first_newline + 1 :]
            if text.endswith("```"):
                text = text[:-3]
        return text.strip()


class LLMError(Exception):
    """Raised when an LLM call or response parsing fails."""
