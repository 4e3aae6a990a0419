"""LLM assist endpoints.

These never fail because of the model: when no LLM is configured, or a call
fails, each endpoint answers 200 with deterministic fallback content.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from troveproxy.api.deps import get_assist_service
from troveproxy.assist.service import AssistService
from troveproxy.models.assist import (
    AssistStatus,
    CategoriesResponse,
    DocsRequest,
    EnhanceResponse,
    NotesResponse,
    QueryRequest,
    SuggestionsResponse,
)

router = APIRouter()


@router.post("/enhance", response_model=EnhanceResponse, summary="Enhance Query")
async def enhance(body: QueryRequest, service: AssistService = Depends(get_assist_service)) -> EnhanceResponse:
    """Expand a query with historical context terms."""
    return EnhanceResponse(original=body.query, enhanced=await service.enhance_query(body.query))


@router.post("/summarize", response_model=NotesResponse, summary="Summarize Results")
async def summarize(body: DocsRequest, service: AssistService = Depends(get_assist_service)) -> NotesResponse:
    return NotesResponse(notes=await service.summarize_results(body.docs))


@router.post("/categorize", response_model=CategoriesResponse, summary="Categorize Results")
async def categorize(body: DocsRequest, service: AssistService = Depends(get_assist_service)) -> CategoriesResponse:
    return CategoriesResponse(categories=await service.categorize_results(body.docs))


@router.post("/translate", response_model=NotesResponse, summary="Explain Historical Language")
async def translate(body: DocsRequest, service: AssistService = Depends(get_assist_service)) -> NotesResponse:
    return NotesResponse(notes=await service.explain_historical_language(body.docs))


@router.post("/suggestions", response_model=SuggestionsResponse, summary="Smart Suggestions")
async def suggestions(body: QueryRequest, service: AssistService = Depends(get_assist_service)) -> SuggestionsResponse:
    return SuggestionsResponse(query=body.query, suggestions=await service.smart_suggestions(body.query))


@router.get("/status", response_model=AssistStatus, summary="Assist Status")
async def status(service: AssistService = Depends(get_assist_service)) -> AssistStatus:
    """Report whether an LLM is configured and answering."""
    return AssistStatus(
        configured=service.enabled,
        connected=await service.check_connection(),
        model=service.model,
    )
