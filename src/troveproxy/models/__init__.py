"""Pydantic models for requests, responses and diagnostics."""
