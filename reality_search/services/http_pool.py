"""
Shared HTTP Client Pool Service

One process-wide httpx.AsyncClient for every upstream search call, so
connections to the providers are reused across requests. Closed from the
application lifespan on shutdown.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)


class HTTPClientPool:
    """
    Singleton HTTP client pool for all upstream search calls.

    The per-call timeout is enforced by the providers; the pool-level
    timeout only bounds connection setup and pool waits.
    """

    _instance: Optional[HTTPClientPool] = None
    _client: Optional[httpx.AsyncClient] = None

    def __new__(cls) -> HTTPClientPool:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the HTTP client pool if not already done."""
        if self._client is None:
            self._initialize_client()

    @staticmethod
    def _initialize_client() -> None:
        """Create a shared AsyncClient with connection pooling."""
        upstream_timeout = get_settings().upstream_timeout_seconds

        limits = httpx.Limits(
            max_connections=100,
            max_keepalive_connections=20,
            keepalive_expiry=5.0,
        )

        timeout = httpx.Timeout(
            timeout=upstream_timeout,
            connect=min(5.0, upstream_timeout),
            pool=min(5.0, upstream_timeout),
        )

        HTTPClientPool._client = httpx.AsyncClient(
            limits=limits,
            timeout=timeout,
            verify=True,
            follow_redirects=True,
        )

        logger.info(
            f"HTTP Client Pool initialized: max_connections=100, "
            f"max_keepalive=20, timeout={upstream_timeout:g}s"
        )

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """Get the shared HTTP client instance."""
        cls()
        if HTTPClientPool._client is None or HTTPClientPool._client.is_closed:
            HTTPClientPool._initialize_client()
        return HTTPClientPool._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client pool."""
        if HTTPClientPool._client:
            await HTTPClientPool._client.aclose()
            HTTPClientPool._client = None
            logger.info("HTTP Client Pool closed")


def get_http_client() -> httpx.AsyncClient:
    """
    Get the shared HTTP client.

    Use this instead of creating new AsyncClient instances.
    """
    return HTTPClientPool.get_client()


async def close_http_pool() -> None:
    """Close the HTTP client pool (called on application shutdown)."""
    await HTTPClientPool.close()
