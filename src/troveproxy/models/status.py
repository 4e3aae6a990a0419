"""Diagnostic response models — root info, upstream status and key probes."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

API_VERSION = "v3"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RootInfo(_CamelModel):
    """Liveness payload served at ``GET /``."""

    message: str = Field(description="Liveness message")
    has_api_key: bool = Field(description="Whether a Trove API key is configured")
    key_preview: str = Field(description="First 8 characters of the key, or 'Missing'")
    version: str = Field(description="Proxy version")


class TroveStatus(_CamelModel):
    """Upstream reachability report. Always served with HTTP 200."""

    is_up: bool = Field(description="Whether the probe got a 2xx answer")
    status_code: int | str = Field(description="Upstream HTTP status, or 'ERROR' on network failure")
    status_text: str | None = Field(default=None, description="Upstream reason phrase")
    timestamp: str = Field(description="ISO-8601 UTC time of the probe")
    version: str = Field(default=API_VERSION, description="Trove API version probed")
    message: str = Field(description="Human-readable summary")


class ResponseStructure(_CamelModel):
    """Which known keys a probe body contained."""

    has_category: bool = False
    has_articles: bool = False
    has_works: bool = False
    top_level_keys: list[str] = Field(default_factory=list)


class KeyTestResult(_CamelModel):
    """Successful ``GET /api/test-key`` body."""

    status: str
    key_prefix: str
    has_results: bool
    response_structure: ResponseStructure


class DirectTestResult(_CamelModel):
    """Successful ``GET /api/test-direct-trove`` body."""

    success: bool
    status: int
    query: str
    results_found: int
    version: str = API_VERSION
    response_structure: ResponseStructure
