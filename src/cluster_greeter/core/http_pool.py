"""Shared outbound HTTP client for peer calls."""

from typing import Any

import httpx

DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE = 20
DEFAULT_KEEPALIVE_EXPIRY = 30.0
DEFAULT_TIMEOUT_SECONDS = 5.0


class HTTPConnectionPool:
    """Manages a process-wide pooled httpx client."""

    _httpx_client: httpx.AsyncClient | None = None
    # Clients replaced by configure(); closed on the next close()
    _retired_clients: list[httpx.AsyncClient] = []
    _pool_config: dict[str, Any] | None = None
    _timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def configure(
        cls,
        pool_config: dict[str, Any] | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Set pool configuration. The next client is built with it."""
        cls._pool_config = pool_config
        if timeout_seconds is not None:
            cls._timeout_seconds = timeout_seconds
        if cls._httpx_client is not None and not cls._httpx_client.is_closed:
            cls._retired_clients.append(cls._httpx_client)
        cls._httpx_client = None

    @classmethod
    def get_httpx_client(cls) -> httpx.AsyncClient:
        """Get or create the shared client."""
        if cls._httpx_client is None or cls._httpx_client.is_closed:
            config = cls._pool_config or {}

            limits = httpx.Limits(
                max_connections=config.get("max_connections", DEFAULT_MAX_CONNECTIONS),
                max_keepalive_connections=config.get(
                    "max_keepalive", DEFAULT_MAX_KEEPALIVE
                ),
                keepalive_expiry=config.get(
                    "keepalive_expiry", DEFAULT_KEEPALIVE_EXPIRY
                ),
            )

            # Connect and read are both bounded by the per-peer timeout
            timeout = httpx.Timeout(cls._timeout_seconds, pool=5.0)

            cls._httpx_client = httpx.AsyncClient(
                limits=limits,
                timeout=timeout,
                headers={"User-Agent": "cluster-greeter/1.0"},
            )

        return cls._httpx_client

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client and any client it replaced."""
        clients = [*cls._retired_clients, cls._httpx_client]
        cls._retired_clients = []
        cls._httpx_client = None
        for client in clients:
            if client is not None and not client.is_closed:
                await client.aclose()
