"""Trove upstream — client, retry policy, response shapes and normalization."""

from troveproxy.trove.client import TroveClient

__all__ = ["TroveClient"]
