"""Diagnostic endpoints — liveness, upstream status and API-key probes.

Each probe is a single, non-retried upstream request with a fixed query.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from troveproxy import __version__
from troveproxy.api.deps import get_trove_client
from troveproxy.models.status import API_VERSION, DirectTestResult, KeyTestResult, RootInfo, TroveStatus
from troveproxy.trove.client import TroveClient
from troveproxy.trove.shapes import current_total, describe_structure

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])

KEY_TEST_QUERY = "australia"
DIRECT_TEST_QUERY = "melbourne"


@router.get("/", response_model=RootInfo, summary="Liveness")
async def root(client: TroveClient = Depends(get_trove_client)) -> RootInfo:
    """Report that the proxy is running and whether a key is configured."""
    return RootInfo(
        message=f"Trove API Backend is running! ({API_VERSION})",
        has_api_key=client.has_api_key,
        key_preview=client.key_preview,
        version=__version__,
    )


@router.get(
    "/api/check-trove-status",
    response_model=TroveStatus,
    summary="Upstream Status",
    description="Probe Trove with a trivial query. Always answers 200; `isUp` carries the verdict.",
)
async def check_trove_status(client: TroveClient = Depends(get_trove_client)) -> TroveStatus:
    return await client.check_status()


@router.get(
    "/api/test-key",
    response_model=KeyTestResult,
    summary="API Key Test",
    responses={500: {"description": "Key missing or probe failed"}},
)
async def test_key(client: TroveClient = Depends(get_trove_client)) -> KeyTestResult | JSONResponse:
    """Check that the configured key returns results for a known query."""
    if not client.has_api_key:
        return JSONResponse(status_code=500, content={"error": "API key not found"})

    try:
        response = await client.probe(KEY_TEST_QUERY)
        if not response.is_success:
            return JSONResponse(
                status_code=response.status_code,
                content={"status": "API key test failed", "error": f"Status: {response.status_code}"},
            )
        structure = describe_structure(response.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.error("API key test failed: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    has_results = structure.has_articles or structure.has_works
    return KeyTestResult(
        status=f"API key is working with {API_VERSION}!" if has_results else "API key valid but no results",
        key_prefix=client.key_preview,
        has_results=has_results,
        response_structure=structure,
    )


@router.get(
    "/api/test-direct-trove",
    response_model=DirectTestResult,
    summary="Direct Trove Test",
    responses={500: {"description": "Key missing or probe failed"}},
)
async def test_direct_trove(
    q: str | None = Query(default=None, description="Probe query (default 'melbourne')"),
    client: TroveClient = Depends(get_trove_client),
) -> DirectTestResult | JSONResponse:
    """Run one search for ``q`` and report the raw response structure."""
    if not client.has_api_key:
        return JSONResponse(status_code=500, content={"success": False, "error": "API key not configured"})

    query = q or DIRECT_TEST_QUERY
    try:
        response = await client.probe(query)
        if not response.is_success:
            return JSONResponse(
                status_code=response.status_code,
                content={"success": False, "error": f"Status: {response.status_code}", "version": API_VERSION},
            )
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Direct Trove test failed: %s", e)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e), "version": API_VERSION})

    structure = describe_structure(data)
    return DirectTestResult(
        success=structure.has_articles or structure.has_works,
        status=response.status_code,
        query=query,
        results_found=current_total(data),
        response_structure=structure,
    )
