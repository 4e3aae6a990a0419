"""API router — search, diagnostics, assist and analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from troveproxy.api.endpoints.analytics import router as analytics_router
from troveproxy.api.endpoints.assist import router as assist_router
from troveproxy.api.endpoints.search import router as search_router
from troveproxy.api.endpoints.status import router as status_router

router = APIRouter()
router.include_router(status_router)
router.include_router(search_router, prefix="/api", tags=["search"])
router.include_router(assist_router, prefix="/api/ai", tags=["assist"])
router.include_router(analytics_router, prefix="/api", tags=["analytics"])
