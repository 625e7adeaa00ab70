"""Shared fixtures for web API tests."""

from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from cluster_greeter.config import NodeConfig
from cluster_greeter.web.server import create_app


@pytest.fixture
def node_config() -> NodeConfig:
    """Config for node1 with a healthy, an absent and a down peer."""
    return NodeConfig(
        node_name="node1",
        port=8081,
        peer_timeout_seconds=1.0,
        peers={
            "node1": "http://self:8081",
            "node2": "http://healthy:8082",
            "node3": None,
            "node4": "http://down:8084",
        },
    )


@pytest.fixture
def client(
    node_config: NodeConfig,
    peer_client_factory: Callable[..., httpx.AsyncClient],
) -> TestClient:
    """Create a TestClient for the web app with stubbed peers."""
    peers = peer_client_factory({"healthy": "Hello from 'node2'"})
    return TestClient(create_app(node_config, client=peers))
