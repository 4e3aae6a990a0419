"""Analytics endpoints — aggregate statistics, display arrangement and offline query helpers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from troveproxy.analysis.results import analyze_results, arrange_results
from troveproxy.analysis.text import build_trove_search_url, local_suggestions, validate_query
from troveproxy.api.deps import get_trove_client
from troveproxy.models.analytics import ArrangedResults, ArrangeRequest, QueryValidation, ResultAnalytics
from troveproxy.models.assist import DocsRequest, SuggestionsResponse
from troveproxy.trove.client import TroveClient

router = APIRouter()


@router.post(
    "/analytics",
    response_model=ResultAnalytics,
    summary="Result Analytics",
    description="Type distribution, chronological decade histogram, year range and keywords for a page of records.",
)
async def analytics(body: DocsRequest) -> ResultAnalytics:
    return analyze_results(body.docs)


@router.post(
    "/results/arrange",
    response_model=ArrangedResults,
    summary="Arrange Results",
    description=(
        "Filter a page of records by type, sort it (`relevance`, `date_asc`, `date_desc`, `title`) "
        "and group the dated records by decade. `snippetLength` cleans and truncates snippets."
    ),
)
async def arrange(body: ArrangeRequest) -> ArrangedResults:
    return arrange_results(body.docs, sort_by=body.sort_by, types=body.types, snippet_length=body.snippet_length)


@router.get("/suggestions", response_model=SuggestionsResponse, summary="Query Suggestions")
async def suggestions(q: str = Query(default="", description="Partial query")) -> SuggestionsResponse:
    """Suggestions built from known historical topics and Australian places."""
    return SuggestionsResponse(query=q, suggestions=local_suggestions(q))


@router.get("/validate-query", response_model=QueryValidation, summary="Validate Query")
async def validate(
    q: str = Query(default="", description="Query to check"),
    client: TroveClient = Depends(get_trove_client),
) -> QueryValidation:
    """Check a query before searching; valid queries include a link to the same search on Trove."""
    result = validate_query(q)
    if result.is_valid and result.query:
        result.trove_url = build_trove_search_url(result.query, category=client.category)
    return result
