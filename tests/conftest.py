"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from troveproxy.config.settings import Settings
from troveproxy.trove.client import TroveClient

TEST_KEY = "test-key-12345678"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with a Trove key and no LLM key."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        trove_api_key=TEST_KEY,
        observability={"log_format": "console"},
    )


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records the requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


class UpstreamStub:
    """Scripted upstream: answers each request with the next queued item.

    Items are ``httpx.Response`` objects, or exceptions raised as transport
    failures. The last item repeats once the queue is exhausted.
    """

    def __init__(self, *items: httpx.Response | Exception) -> None:
        self.items = list(items)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.items[min(len(self.requests), len(self.items)) - 1]
        if isinstance(item, Exception):
            raise item
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def make_trove_client(settings: Settings, sleeps: SleepRecorder) -> Callable[..., TroveClient]:
    """Factory for a TroveClient wired to an ``UpstreamStub``."""

    def _make(stub: UpstreamStub, api_key: str = TEST_KEY) -> TroveClient:
        return TroveClient(settings.trove, api_key, transport=stub.transport, sleep=sleeps)

    return _make


# ── Upstream bodies ──


@pytest.fixture
def article_body() -> dict[str, Any]:
    """A v3 newspaper response with one article."""
    return {
        "category": [
            {
                "records": {
                    "total": 12,
                    "article": [
                        {
                            "id": "1",
                            "heading": "Gold found",
                            "date": "1851-05-15",
                            "title": {"title": "The Argus"},
                            "troveUrl": "https://trove.nla.gov.au/newspaper/article/1",
                        }
                    ],
                }
            }
        ]
    }


@pytest.fixture
def legacy_body() -> dict[str, Any]:
    """A v2 response with one work and a string total."""
    return {
        "response": {
            "zone": [
                {
                    "records": {
                        "total": "3",
                        "work": [
                            {
                                "id": "w9",
                                "title": "Ballarat Diary",
                                "issued": "1854",
                                "contributor": "SLV",
                            }
                        ],
                    }
                }
            ]
        }
    }


@pytest.fixture
def upstream() -> type[UpstreamStub]:
    """The ``UpstreamStub`` class, for building scripted upstreams in tests."""
    return UpstreamStub
