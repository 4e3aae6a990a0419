"""Trove client — bounded-retry search against the Trove v3 ``/result`` endpoint.

API reference:
  GET https://api.trove.nla.gov.au/v3/result
    ?q=<query>
    &category=newspaper
    &key=<api key>
    &encoding=json
    &n=<page size, 1-100>
    [&s=<start offset>]
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from troveproxy.config.settings import TroveSettings
from troveproxy.models.search import (
    SearchRequest,
    SearchResultEnvelope,
    SearchResultPage,
)
from troveproxy.models.status import API_VERSION, TroveStatus
from troveproxy.trove.exceptions import (
    UNAVAILABLE_MESSAGE,
    ConfigurationError,
    UpstreamError,
    UpstreamPermanentError,
    UpstreamTransientError,
    ValidationError,
)
from troveproxy.trove.normalize import normalize_records
from troveproxy.trove.retry import (
    TRANSIENT_STATUS,
    AttemptOutcome,
    AttemptState,
    RetryPolicy,
    decide,
)
from troveproxy.trove.shapes import extract_result_page

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[Any]]

_ERROR_BODY_LIMIT = 500


class TroveClient:
    """Async client for the Trove result API.

    One instance is created at start-up and shared by all requests; it holds
    no per-request state. The API key is injected once and never re-read.

    Args:
        settings: Upstream configuration (base URL, timeout, retry policy).
        api_key: Trove API key. An empty key makes every search fail with
            ``ConfigurationError``.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        sleep: Awaitable used for back-off; defaults to ``asyncio.sleep``.
    """

    def __init__(
        self,
        settings: TroveSettings,
        api_key: str = "",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._api_key = api_key
        self._transport = transport
        self._sleep = sleep
        self._policy = RetryPolicy(max_attempts=settings.max_attempts, delay=settings.retry_delay)
        self._client: httpx.AsyncClient | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    @property
    def key_preview(self) -> str:
        """First 8 characters of the key, safe for logs and responses."""
        return self._api_key[:8] + "..." if self._api_key else "Missing"

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    @property
    def category(self) -> str:
        return self._settings.category

    async def initialize(self) -> None:
        """Create the shared HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url.rstrip("/"),
            headers={
                "User-Agent": self._settings.user_agent,
                "Accept": "application/json",
            },
            timeout=self._settings.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        if self._api_key:
            logger.info("Trove client initialized (base_url=%s, key=%s)", self._settings.base_url, self.key_preview)
        else:
            logger.warning("Trove client initialized WITHOUT an API key; searches will be rejected")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Request building ─────────────────────────────────────────────────

    def prepare_request(self, query: str | None, n: Any = None, s: Any = None) -> SearchRequest:
        """Check preconditions and build a ``SearchRequest``.

        Raises:
            ConfigurationError: If no API key is configured (checked first).
            ValidationError: If the query is missing or blank.
        """
        if not self._api_key:
            raise ConfigurationError()
        request = SearchRequest.from_raw(query, n, s, max_results=self._settings.max_results)
        if request is None:
            raise ValidationError()
        return request

    def build_params(self, request: SearchRequest) -> dict[str, Any]:
        """Query parameters for the upstream ``/result`` call."""
        params: dict[str, Any] = {
            "q": request.query,
            "category": self._settings.category,
            "key": self._api_key,
            "encoding": "json",
            "n": request.result_limit,
        }
        if request.start_offset > 0:
            params["s"] = request.start_offset
        return params

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, request: SearchRequest) -> SearchResultEnvelope:
        """Search Trove and return the normalized envelope.

        Args:
            request: A validated search request.

        Returns:
            The envelope with normalized docs, total count and start offset.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamError: If every attempt failed.
        """
        if not self._api_key:
            raise ConfigurationError()

        start = time.monotonic()
        response = await self.fetch_with_retry(self.build_params(request))
        data = response.json()

        page = extract_result_page(data)
        docs = normalize_records(page.records)
        took_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Trove search: query=%s, shape=%s, returned=%d, total=%d, took=%dms",
            request.query,
            page.shape,
            len(docs),
            page.total,
            took_ms,
        )

        return SearchResultEnvelope(
            response=SearchResultPage(docs=docs, num_found=page.total, start=request.start_offset),
            query=request.query,
            success=True,
        )

    async def fetch_with_retry(self, params: dict[str, Any]) -> httpx.Response:
        """GET ``/result`` with bounded retry.

        Returns:
            The first 2xx response.

        Raises:
            UpstreamTransientError: Trove kept answering 503 or the connection
                kept failing until attempts ran out.
            UpstreamPermanentError: Trove answered any other failure status.
        """
        client = self._require_client()
        policy = self._policy

        last_status: int | None = None
        last_error: str | None = None
        state = AttemptState.EXHAUSTED
        attempt = 0

        for attempt in range(1, policy.max_attempts + 1):
            logger.info("Trove attempt %d/%d", attempt, policy.max_attempts)
            try:
                response = await client.get("/result", params=params)
            except httpx.RequestError as e:
                outcome = AttemptOutcome.from_exception(e)
                last_error = outcome.error
                logger.warning("Trove attempt %d failed: %s", attempt, last_error)
                decision = decide(outcome, attempt, policy)
            else:
                last_status = response.status_code
                decision = decide(AttemptOutcome.from_status(response.status_code), attempt, policy)
                if decision.state is AttemptState.SUCCEEDED:
                    logger.info("Trove responded %d on attempt %d", response.status_code, attempt)
                    return response
                if decision.state is AttemptState.RETRY:
                    last_error = f"{response.status_code} Service Unavailable (attempt {attempt})"
                else:
                    last_error = f"{response.status_code}: {response.text[:_ERROR_BODY_LIMIT]}"

            state = decision.state
            if state is not AttemptState.RETRY:
                break

            logger.warning(
                "Trove attempt %d failed (%s). Retrying in %.0f seconds...",
                attempt,
                last_error,
                decision.wait,
            )
            await self._sleep(decision.wait)

        logger.error("All Trove attempts failed after %d attempt(s): %s", attempt, last_error)
        raise self._failure(state, attempt, last_status, last_error)

    @staticmethod
    def _failure(
        state: AttemptState,
        attempts: int,
        last_status: int | None,
        last_error: str | None,
    ) -> UpstreamError:
        if last_status == TRANSIENT_STATUS:
            return UpstreamTransientError(
                UNAVAILABLE_MESSAGE,
                attempts=attempts,
                last_status=last_status,
                last_error=last_error,
            )
        error_class = UpstreamPermanentError if state is AttemptState.FAILED_PERMANENT else UpstreamTransientError
        return error_class(
            f"Trove API error: {last_error}",
            attempts=attempts,
            last_status=last_status,
            last_error=last_error,
        )

    # ── Diagnostics ──────────────────────────────────────────────────────

    async def probe(self, query: str, *, n: int = 1) -> httpx.Response:
        """Issue a single, non-retried search.

        Raises:
            httpx.RequestError: On network failure.
        """
        client = self._require_client()
        return await client.get(
            "/result",
            params={
                "q": query,
                "category": self._settings.category,
                "key": self._api_key,
                "encoding": "json",
                "n": n,
            },
        )

    async def check_status(self) -> TroveStatus:
        """Report whether Trove answers a trivial query."""
        timestamp = datetime.now(UTC).isoformat()
        try:
            response = await self.probe("test")
        except httpx.RequestError as e:
            logger.error("Trove health check failed: %s", e)
            return TroveStatus(
                is_up=False,
                status_code="ERROR",
                timestamp=timestamp,
                message=f"Cannot connect to Trove API {API_VERSION}: {e}",
            )

        if response.is_success:
            message = f"Trove API {API_VERSION} is working normally"
        elif response.status_code == TRANSIENT_STATUS:
            message = f"Trove API {API_VERSION} is temporarily unavailable (503)"
        else:
            message = f"Trove API {API_VERSION} returned error: {response.status_code}"

        logger.info("Trove health check: status=%d", response.status_code)
        return TroveStatus(
            is_up=response.is_success,
            status_code=response.status_code,
            status_text=response.reason_phrase,
            timestamp=timestamp,
            message=message,
        )

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Trove client not initialized. Call initialize() first.")
        return self._client
