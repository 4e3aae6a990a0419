"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from troveproxy.assist.service import AssistService
from troveproxy.trove.client import TroveClient

# Shared instances (set during application lifespan)
_trove_client: TroveClient | None = None
_assist_service: AssistService | None = None


def set_trove_client(client: TroveClient | None) -> None:
    """Set the shared Trove client (called during app lifespan)."""
    global _trove_client
    _trove_client = client


def get_trove_client() -> TroveClient:
    """Get the shared Trove client.

    Raises:
        RuntimeError: If the client is not initialized.
    """
    if _trove_client is None:
        raise RuntimeError("Trove client not initialized. Is the server running?")
    return _trove_client


def set_assist_service(service: AssistService | None) -> None:
    global _assist_service
    _assist_service = service


def get_assist_service() -> AssistService:
    if _assist_service is None:
        raise RuntimeError("Assist service not initialized. Is the server running?")
    return _assist_service
