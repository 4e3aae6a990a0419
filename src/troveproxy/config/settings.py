"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified; its values are passed as init kwargs)
  2. Environment variables (TROVEPROXY_ prefix; the Trove key is TROVE_API_KEY)
  3. .env file
  4. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, v: Any) -> list[str]:
        """Parse origins from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(o) for o in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            return [o.strip() for o in v.split(",") if o.strip()]
        return list(v)


class TroveSettings(BaseModel):
    """Upstream Trove API configuration.

    The API key itself lives on the root ``Settings`` object so that it can be
    read from the conventional ``TROVE_API_KEY`` variable.
    """

    base_url: str = Field(
        default="https://api.trove.nla.gov.au/v3",
        description="Trove API base URL (the /result endpoint is appended)",
    )
    category: str = Field(default="newspaper", description="Trove category searched by the proxy")
    user_agent: str = Field(default="TroveSearchApp/1.0", description="User-Agent sent upstream")
    timeout: float = Field(default=15.0, gt=0, description="Per-attempt upstream timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, description="Maximum upstream attempts per search")
    retry_delay: float = Field(default=3.0, ge=0, description="Constant back-off between attempts in seconds")
    max_results: int = Field(default=100, ge=1, description="Upper bound for the per-page result count")


class AISettings(BaseModel):
    """LLM assist configuration.

    Any OpenAI-compatible chat-completion endpoint works; the defaults point
    at Groq, which the browser front end also talks to.
    """

    api_key: str = Field(default="", description="LLM API key (assist falls back to canned output when empty)")
    base_url: str = Field(default="https://api.groq.com/openai/v1", description="OpenAI-compatible API endpoint")
    model: str = Field(default="llama-3.1-70b-versatile", description="Chat model name")
    max_tokens: int = Field(default=1500, description="Maximum tokens per LLM call")
    temperature: float = Field(default=0.7, description="LLM temperature for generation")
    timeout: float = Field(default=30.0, gt=0, description="LLM request timeout in seconds")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the TROVEPROXY_ prefix.
    Nested settings use double underscores: TROVEPROXY_SERVER__PORT=9090

    Example:
        TROVE_API_KEY=abcd1234...
        TROVEPROXY_SERVER__PORT=9090
        TROVEPROXY_TROVE__RETRY_DELAY=5
        TROVEPROXY_AI__API_KEY=gsk_...
    """

    model_config = {
        "env_prefix": "TROVEPROXY_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    # Application metadata
    app_name: str = Field(default="trove-proxy", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    trove_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("trove_api_key", "TROVE_API_KEY"),
        description="Trove API key, read once at start-up",
    )

    # Component settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    trove: TroveSettings = Field(default_factory=TroveSettings)
    ai: AISettings = Field(default_factory=AISettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def has_trove_key(self) -> bool:
        return bool(self.trove_api_key)

    @property
    def key_preview(self) -> str:
        """First 8 characters of the Trove key, safe for logs and responses."""
        if not self.trove_api_key:
            return "Missing"
        return self.trove_api_key[:8] + "..."

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are passed as init values, so they override
        environment variables for the keys they set.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
