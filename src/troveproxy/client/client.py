"""trove-proxy Python SDK — Async and sync clients for the proxy's REST API.

Usage::

    # Async
    async with AsyncTroveProxyClient("http://localhost:8080") as client:
        page = await client.search("federation 1901")

    # Sync (wraps async client internally)
    client = TroveProxyClient("http://localhost:8080")
    page = client.search("federation 1901")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

# Response types (plain dicts, mirroring the server's JSON)

SearchPage = dict[str, Any]
"""Search envelope dict: ``response`` (docs, numFound, start), ``query``, ``success``."""

StatusReport = dict[str, Any]
"""Diagnostic response dict."""


class TroveProxyAPIError(Exception):
    """Raised when the proxy answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the proxy.
        error: The ``error`` string from the response body (or the raw text).
        body: The decoded JSON body, when there was one.
    """

    def __init__(self, status_code: int, error: str, body: dict[str, Any] | None = None) -> None:
        super().__init__(f"HTTP {status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.body = body or {}


def _decode(resp: httpx.Response) -> dict[str, Any]:
    """Return the JSON body of a 2xx response, raising ``TroveProxyAPIError`` otherwise."""
    if resp.is_success:
        return cast(dict[str, Any], resp.json())

    body: dict[str, Any] | None = None
    try:
        decoded = resp.json()
        if isinstance(decoded, dict):
            body = decoded
    except ValueError:
        body = None
    error = str(body.get("error", "")) if body else ""
    logger.debug("trove-proxy returned %d: %s", resp.status_code, error or resp.text[:200])
    raise TroveProxyAPIError(resp.status_code, error or resp.text, body)


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncTroveProxyClient:
    """Async Python client for the trove-proxy API.

    Args:
        base_url: Proxy URL, e.g. ``"http://localhost:8080"``.
        timeout: Request timeout in seconds. Searches can take several
            seconds when the proxy is retrying Trove.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncTroveProxyClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Diagnostics ──

    async def info(self) -> StatusReport:
        """Liveness info: message, hasApiKey, keyPreview, version."""
        return _decode(await self._client.get("/"))

    async def check_status(self) -> StatusReport:
        """Upstream reachability (``isUp``, ``statusCode``, ``message``)."""
        return _decode(await self._client.get("/api/check-trove-status"))

    async def test_key(self) -> StatusReport:
        return _decode(await self._client.get("/api/test-key"))

    async def test_direct(self, query: str | None = None) -> StatusReport:
        params = {"q": query} if query else None
        return _decode(await self._client.get("/api/test-direct-trove", params=params))

    # ── Search ──

    async def search(self, query: str, *, n: int | None = None, s: int | None = None) -> SearchPage:
        """Search Trove through the proxy.

        Args:
            query: Search text.
            n: Results per page (the proxy clamps it to 1-100).
            s: Start offset.

        Returns:
            The search envelope as a dict.

        Raises:
            TroveProxyAPIError: On 400 (blank query), 5xx, or upstream failures.
        """
        params: dict[str, Any] = {"q": query}
        if n is not None:
            params["n"] = n
        if s is not None:
            params["s"] = s
        return _decode(await self._client.get("/api/trove", params=params))

    # ── Analytics ──

    async def analyze(self, docs: list[dict[str, Any]]) -> dict[str, Any]:
        """Aggregate statistics for a list of result records."""
        return _decode(await self._client.post("/api/analytics", json={"docs": docs}))

    async def arrange(
        self,
        docs: list[dict[str, Any]],
        *,
        sort_by: str = "relevance",
        types: list[str] | None = None,
        snippet_length: int | None = None,
    ) -> dict[str, Any]:
        """Filter, sort and decade-group a page of records.

        Raises:
            TroveProxyAPIError: 422 for an unknown ``sort_by``.
        """
        payload: dict[str, Any] = {"docs": docs, "sortBy": sort_by, "types": types or []}
        if snippet_length is not None:
            payload["snippetLength"] = snippet_length
        return _decode(await self._client.post("/api/results/arrange", json=payload))

    async def validate_query(self, query: str) -> dict[str, Any]:
        """``isValid`` plus either ``error`` or the trimmed ``query`` and ``troveUrl``."""
        return _decode(await self._client.get("/api/validate-query", params={"q": query}))


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncTroveProxyClient)
# ═══════════════════════════════════════════════════════════════════════════════


class TroveProxyClient:
    """Synchronous Python client for the trove-proxy API.

    Wraps :class:`AsyncTroveProxyClient` using ``asyncio.run``.

    Args:
        base_url: Proxy URL.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 60.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter), run in a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncTroveProxyClient:
        return AsyncTroveProxyClient(
            self._base_url,
            timeout=self._timeout,
            **self._httpx_kwargs,
        )

    def info(self) -> StatusReport:
        async def _call() -> StatusReport:
            async with self._make_client() as c:
                return await c.info()

        return self._run(_call())

    def check_status(self) -> StatusReport:
        async def _call() -> StatusReport:
            async with self._make_client() as c:
                return await c.check_status()

        return self._run(_call())

    def test_key(self) -> StatusReport:
        async def _call() -> StatusReport:
            async with self._make_client() as c:
                return await c.test_key()

        return self._run(_call())

    def test_direct(self, query: str | None = None) -> StatusReport:
        async def _call() -> StatusReport:
            async with self._make_client() as c:
                return await c.test_direct(query)

        return self._run(_call())

    def search(self, query: str, *, n: int | None = None, s: int | None = None) -> SearchPage:
        """Search Trove through the proxy."""

        async def _call() -> SearchPage:
            async with self._make_client() as c:
                return await c.search(query, n=n, s=s)

        return self._run(_call())

    def analyze(self, docs: list[dict[str, Any]]) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.analyze(docs)

        return self._run(_call())

    def arrange(
        self,
        docs: list[dict[str, Any]],
        *,
        sort_by: str = "relevance",
        types: list[str] | None = None,
        snippet_length: int | None = None,
    ) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.arrange(docs, sort_by=sort_by, types=types, snippet_length=snippet_length)

        return self._run(_call())

    def validate_query(self, query: str) -> dict[str, Any]:
        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.validate_query(query)

        return self._run(_call())
