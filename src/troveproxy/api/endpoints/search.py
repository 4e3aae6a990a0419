"""Search endpoint — proxied Trove search with bounded retry."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from troveproxy.api.deps import get_trove_client
from troveproxy.models.search import ErrorBody, SearchResultEnvelope
from troveproxy.trove.client import TroveClient
from troveproxy.trove.exceptions import TroveProxyError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/trove",
    response_model=SearchResultEnvelope,
    summary="Search Trove",
    description=(
        "Search Trove newspapers. Transient upstream failures (503 or network errors) "
        "are retried up to three times with a constant back-off; any other upstream "
        "status is returned immediately.\n\n"
        "`n` is clamped to 1-100 (default 20); `s` is the start offset (default 0)."
    ),
    responses={
        400: {"model": ErrorBody, "description": "Missing or blank query"},
        500: {"model": ErrorBody, "description": "API key not configured, or an internal error"},
        503: {"model": ErrorBody, "description": "Trove unavailable after every attempt"},
    },
)
async def search_trove(
    q: str | None = Query(default=None, description="Search text"),
    n: str | None = Query(default=None, description="Results per page"),
    s: str | None = Query(default=None, description="Start offset"),
    client: TroveClient = Depends(get_trove_client),
) -> SearchResultEnvelope | JSONResponse:
    """Search Trove and return normalized records.

    Args:
        q: Search text; surrounding whitespace is ignored.
        n: Requested page size, parsed leniently.
        s: Requested start offset, parsed leniently.
        client: The shared Trove client (injected).
    """
    try:
        request = client.prepare_request(q, n, s)
        return await client.search(request)
    except TroveProxyError as e:
        logger.warning("Search rejected: status=%d, error=%s", e.status_code, e.message)
        return JSONResponse(status_code=e.status_code, content=e.payload())
    except Exception as e:
        logger.exception("Search failed for query=%r", q)
        return JSONResponse(status_code=500, content={"error": f"Server error: {e}"})
