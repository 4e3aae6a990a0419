"""Request and response models for the LLM assist endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Body carrying a (possibly partial) search query."""

    query: str = Field(description="Search text as typed by the user")


class DocsRequest(BaseModel):
    """Body carrying result records, usually the ``docs`` of a search envelope."""

    docs: list[dict[str, Any]] = Field(default_factory=list, description="Result records")


class AssistNote(BaseModel):
    """A block of generated text (summary or historical-language notes)."""

    type: str = Field(description="'summary' or 'translation'")
    content: str = Field(description="Generated or fallback text")
    timestamp: str = Field(description="ISO-8601 UTC generation time")


class CategoryCount(BaseModel):
    """One thematic category and how many records fall into it."""

    category: str = Field(description="Category name")
    count: int = Field(default=0, ge=0, description="Number of records in the category")
    description: str = Field(default="", description="Short description of the category")


class EnhanceResponse(BaseModel):
    original: str = Field(description="Query as submitted")
    enhanced: str = Field(description="Expanded query text")


class NotesResponse(BaseModel):
    notes: list[AssistNote] = Field(default_factory=list)


class CategoriesResponse(BaseModel):
    categories: list[CategoryCount] = Field(default_factory=list)


class SuggestionsResponse(BaseModel):
    query: str = Field(description="Partial query the suggestions are for")
    suggestions: list[str] = Field(default_factory=list, description="Up to five suggested queries")


class AssistStatus(BaseModel):
    """``GET /api/ai/status`` body."""

    configured: bool = Field(description="Whether an LLM API key is configured")
    connected: bool = Field(description="Whether the model answered the connection probe")
    model: str = Field(description="Configured chat model")
