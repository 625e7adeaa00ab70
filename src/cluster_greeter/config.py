"""Node configuration loading.

Configuration comes from an optional YAML file, overlaid with values
given on the command line::

    node_name: node1
    port: 8081
    peer_timeout_seconds: 2.5
    peers:
      node1: http://localhost:8081
      node2: http://localhost:8082
      node3:            # declared but absent
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from cluster_greeter.core.http_pool import (
    DEFAULT_KEEPALIVE_EXPIRY,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_MAX_KEEPALIVE,
    DEFAULT_TIMEOUT_SECONDS,
)
from cluster_greeter.core.identity import NodeIdentity
from cluster_greeter.core.peers import PeerResolver

DEFAULT_PORT = 8080


class ConnectionPoolConfig(BaseModel):
    """Limits for the shared outbound HTTP client."""

    model_config = ConfigDict(extra="forbid")

    max_connections: int = Field(default=DEFAULT_MAX_CONNECTIONS, gt=0)
    max_keepalive: int = Field(default=DEFAULT_MAX_KEEPALIVE, ge=0)
    keepalive_expiry: float = Field(default=DEFAULT_KEEPALIVE_EXPIRY, ge=0)


class NodeConfig(BaseModel):
    """Startup configuration of one cluster node."""

    model_config = ConfigDict(extra="forbid")

    node_name: str | None = None
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    peer_timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    peers: dict[str, str | None] = Field(default_factory=dict)
    connection_pool: ConnectionPoolConfig = Field(
        default_factory=ConnectionPoolConfig
    )

    @model_validator(mode="after")
    def default_node_name(self) -> "NodeConfig":
        """Name the node after its port when no name is given."""
        if not self.node_name:
            self.node_name = f"node{self.port}"
        return self

    @property
    def identity(self) -> NodeIdentity:
        return NodeIdentity(str(self.node_name))

    def peer_resolver(self) -> PeerResolver:
        return PeerResolver(self.peers, identity=self.identity)


def parse_peer_option(value: str) -> tuple[str, str | None]:
    """Parse a ``SLOT=URL`` peer option.

    An empty URL (``node2=``) declares the slot without an address.

    Raises:
        ValueError: If the value has no ``=`` or an empty slot name
    """
    slot, sep, url = value.partition("=")
    slot = slot.strip()
    if not sep or not slot:
        raise ValueError(f"Invalid peer {value!r}, expected SLOT=URL")
    url = url.strip()
    return slot, url or None


def load_config(path: str | Path | None = None, **overrides: Any) -> NodeConfig:
    """Load node configuration from YAML and apply overrides.

    Overrides whose value is None are ignored, so unset CLI options never
    mask file values. ``peers`` overrides are merged into the file's peers.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the configuration is invalid
    """
    data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
        data.update(loaded)

    peers = overrides.pop("peers", None)
    if peers:
        merged = dict(data.get("peers") or {})
        merged.update(peers)
        data["peers"] = merged

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return NodeConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
