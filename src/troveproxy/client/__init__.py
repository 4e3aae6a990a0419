"""trove-proxy Python SDK — Client library for the trove-proxy API.

Provides both async and sync clients.

Quick start::

    from troveproxy.client import TroveProxyClient

    client = TroveProxyClient("http://localhost:8080")
    page = client.search("eureka stockade", n=10)
    for doc in page["response"]["docs"]:
        print(doc["title"])
"""

from troveproxy.client.client import AsyncTroveProxyClient, TroveProxyAPIError, TroveProxyClient

__all__ = ["AsyncTroveProxyClient", "TroveProxyAPIError", "TroveProxyClient"]
