"""API module for the cluster-greeter web server."""

from fastapi import Request

from cluster_greeter.core.aggregator import FanOutAggregator
from cluster_greeter.core.identity import NodeIdentity
from cluster_greeter.core.peers import PeerResolver


def get_identity(request: Request) -> NodeIdentity:
    """Get the identity of the node serving this app."""
    identity: NodeIdentity = request.app.state.identity
    return identity


def get_aggregator(request: Request) -> FanOutAggregator:
    """Get the app's shared fan-out aggregator."""
    aggregator: FanOutAggregator = request.app.state.aggregator
    return aggregator


def get_peer_resolver(request: Request) -> PeerResolver:
    """Get the app's peer resolver."""
    resolver: PeerResolver = request.app.state.peer_resolver
    return resolver
