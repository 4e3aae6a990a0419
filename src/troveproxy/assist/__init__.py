"""LLM assist — query enhancement, summaries and categorisation with fallbacks."""

from troveproxy.assist.llm import LLMClient, LLMError
from troveproxy.assist.service import AssistService

__all__ = ["AssistService", "LLMClient", "LLMError"]
