"""trove-proxy — Resilient search proxy for the Trove digital archive."""

__version__ = "0.1.0"
