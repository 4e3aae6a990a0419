"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from troveproxy import __version__
from troveproxy.api.deps import set_assist_service, set_trove_client
from troveproxy.api.router import router
from troveproxy.assist.service import AssistService
from troveproxy.config.settings import Settings
from troveproxy.observability.logging import setup_logging
from troveproxy.trove.client import TroveClient

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "trove-proxy-config.yaml"
CONFIG_ENV_VAR = "TROVEPROXY_CONFIG"


def create_app(
    settings: Settings | None = None,
    *,
    trove_client: TroveClient | None = None,
    assist_service: AssistService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        trove_client: Pre-built Trove client (tests inject one with a mock
            transport). Built from settings when omitted.
        assist_service: Pre-built assist service. Built from settings when omitted.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # TROVEPROXY_CONFIG (set by the CLI), else trove-proxy-config.yaml if present
        yaml_path = Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting trove-proxy v%s", __version__)

        client = trove_client or TroveClient(settings.trove, settings.trove_api_key)
        await client.initialize()
        service = assist_service or AssistService(settings.ai)

        set_trove_client(client)
        set_assist_service(service)

        app.state.settings = settings
        app.state.trove_client = client

        logger.info(
            "trove-proxy is ready on port %d (Trove key: %s, assist: %s)",
            settings.server.port,
            client.key_preview,
            "enabled" if service.enabled else "fallback only",
        )
        yield

        # Shutdown
        logger.info("Shutting down trove-proxy...")
        await client.shutdown()
        set_trove_client(None)
        set_assist_service(None)
        logger.info("trove-proxy shutdown complete")

    app = FastAPI(
        title="trove-proxy",
        description=(
            "Search proxy for the Trove digital archive — hides the API key, retries "
            "transient upstream failures and normalizes results into one flat shape."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return app
