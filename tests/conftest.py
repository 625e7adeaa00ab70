"""Shared test fixtures and configuration."""

import asyncio
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from cluster_greeter.core.http_pool import DEFAULT_TIMEOUT_SECONDS, HTTPConnectionPool

# Behaviour of a stubbed peer, keyed by host. A str is returned as the
# text body, an int as a bare status, an Exception is raised, and a
# (delay, body) tuple answers after sleeping.
PeerBehaviour = str | int | Exception | tuple[float, str]


def make_peer_transport(
    peers: dict[str, PeerBehaviour],
    calls: list[str] | None = None,
) -> httpx.MockTransport:
    """Build a transport that answers /helloFromNode per host."""

    async def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        behaviour = peers.get(request.url.host)
        if behaviour is None:
            raise httpx.ConnectError("Connection refused", request=request)
        if isinstance(behaviour, Exception):
            raise behaviour
        if isinstance(behaviour, int):
            return httpx.Response(behaviour)
        if isinstance(behaviour, tuple):
            delay, body = behaviour
            await asyncio.sleep(delay)
            return httpx.Response(200, text=body)
        return httpx.Response(200, text=behaviour)

    return httpx.MockTransport(handler)


@pytest.fixture
def peer_client_factory() -> Callable[..., httpx.AsyncClient]:
    """Factory for AsyncClients backed by stubbed peers."""

    def factory(
        peers: dict[str, PeerBehaviour], calls: list[str] | None = None
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=make_peer_transport(peers, calls))

    return factory


@pytest.fixture(autouse=True)
def reset_http_pool() -> Any:
    """Reset the shared HTTP pool around each test."""
    HTTPConnectionPool._httpx_client = None
    HTTPConnectionPool._retired_clients = []
    HTTPConnectionPool._timeout_seconds = DEFAULT_TIMEOUT_SECONDS
    HTTPConnectionPool._pool_config = None
    yield
    HTTPConnectionPool._httpx_client = None
    HTTPConnectionPool._retired_clients = []
    HTTPConnectionPool._pool_config = None


@pytest_asyncio.fixture
async def peer_client(
    peer_client_factory: Callable[..., httpx.AsyncClient],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """AsyncClient with two healthy peers on hosts ``a`` and ``c``."""
    client = peer_client_factory(
        {"a": "Hello from 'node1'", "c": "Hello from 'node3'"}
    )
    yield client
    await client.aclose()
