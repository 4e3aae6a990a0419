"""Tests for the liveness and diagnostic endpoints."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from troveproxy import __version__
from troveproxy.api.app import create_app
from troveproxy.assist.service import AssistService
from troveproxy.config.settings import Settings
from troveproxy.trove.client import TroveClient

MakeClient = Callable[..., TroveClient]


@pytest.fixture
def serve(settings: Settings, make_trove_client: MakeClient) -> Iterator[Callable[..., TestClient]]:
    """Build a started TestClient around a stubbed Trove client."""
    opened: list[TestClient] = []

    def _serve(stub: Any, api_key: str = "test-key-12345678") -> TestClient:
        app = create_app(
            settings,
            trove_client=make_trove_client(stub, api_key=api_key),
            assist_service=AssistService(settings.ai),
        )
        client = TestClient(app)
        client.__enter__()
        opened.append(client)
        return client

    yield _serve
    for client in opened:
        client.__exit__(None, None, None)


class TestRoot:
    def test_with_key(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(200, json={}))).get("/")
        assert response.status_code == 200
        assert response.json() == {
            "message": "Trove API Backend is running! (v3)",
            "hasApiKey": True,
            "keyPreview": "test-key...",
            "version": __version__,
        }

    def test_without_key(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        data = serve(upstream(httpx.Response(200, json={})), api_key="").get("/").json()
        assert data["hasApiKey"] is False
        assert data["keyPreview"] == "Missing"


class TestCheckTroveStatus:
    def test_up(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(200, json={}))).get("/api/check-trove-status")
        assert response.status_code == 200
        data = response.json()
        assert data["isUp"] is True
        assert data["statusCode"] == 200
        assert data["version"] == "v3"
        assert data["message"] == "Trove API v3 is working normally"
        assert "timestamp" in data

    def test_unavailable_still_200(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(503))).get("/api/check-trove-status")
        assert response.status_code == 200
        assert response.json()["isUp"] is False
        assert response.json()["message"] == "Trove API v3 is temporarily unavailable (503)"

    def test_network_failure(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        data = serve(upstream(httpx.ConnectError("refused"))).get("/api/check-trove-status").json()
        assert data["isUp"] is False
        assert data["statusCode"] == "ERROR"


class TestKeyTest:
    def test_missing_key(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        stub = upstream(httpx.Response(200, json={}))
        response = serve(stub, api_key="").get("/api/test-key")
        assert response.status_code == 500
        assert response.json() == {"error": "API key not found"}
        assert stub.requests == []

    def test_working_key(
        self, serve: Callable[..., TestClient], upstream: Any, article_body: dict[str, Any]
    ) -> None:
        stub = upstream(httpx.Response(200, json=article_body))
        response = serve(stub).get("/api/test-key")
        assert response.status_code == 200
        assert response.json() == {
            "status": "API key is working with v3!",
            "keyPrefix": "test-key...",
            "hasResults": True,
            "responseStructure": {
                "hasCategory": True,
                "hasArticles": True,
                "hasWorks": False,
                "topLevelKeys": ["category"],
            },
        }
        assert stub.requests[0].url.params["q"] == "australia"

    def test_no_results(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        data = serve(upstream(httpx.Response(200, json={"category": []}))).get("/api/test-key").json()
        assert data["status"] == "API key valid but no results"
        assert data["hasResults"] is False

    def test_rejected_key(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(401))).get("/api/test-key")
        assert response.status_code == 401
        assert response.json() == {"status": "API key test failed", "error": "Status: 401"}

    def test_network_failure(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.ConnectError("refused"))).get("/api/test-key")
        assert response.status_code == 500
        assert response.json() == {"error": "refused"}


class TestDirectTroveTest:
    def test_missing_key(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(200, json={})), api_key="").get("/api/test-direct-trove")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "API key not configured"}

    def test_default_query(
        self, serve: Callable[..., TestClient], upstream: Any, article_body: dict[str, Any]
    ) -> None:
        stub = upstream(httpx.Response(200, json=article_body))
        response = serve(stub).get("/api/test-direct-trove")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == 200
        assert data["query"] == "melbourne"
        assert data["resultsFound"] == 12
        assert data["version"] == "v3"
        assert stub.requests[0].url.params["q"] == "melbourne"

    def test_custom_query(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        stub = upstream(httpx.Response(200, json={}))
        data = serve(stub).get("/api/test-direct-trove", params={"q": "hobart"}).json()
        assert data["query"] == "hobart"
        assert data["success"] is False
        assert data["resultsFound"] == 0

    def test_upstream_failure(self, serve: Callable[..., TestClient], upstream: Any) -> None:
        response = serve(upstream(httpx.Response(503))).get("/api/test-direct-trove")
        assert response.status_code == 503
        assert response.json() == {"success": False, "error": "Status: 503", "version": "v3"}
