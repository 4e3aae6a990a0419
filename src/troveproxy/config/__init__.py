"""Configuration — Pydantic settings loaded from env vars, .env and YAML."""
