"""Greeting endpoints.

``/helloFromNode`` is what sibling nodes call; every other path returns
the aggregated greeting of this node and its peers.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from cluster_greeter.core.aggregator import HELLO_FROM_NODE_PATH, FanOutAggregator
from cluster_greeter.core.identity import NodeIdentity, identify, local_greeting
from cluster_greeter.core.peers import PeerResolver
from cluster_greeter.web.api import get_aggregator, get_identity, get_peer_resolver

router = APIRouter(tags=["greetings"])


@router.get(HELLO_FROM_NODE_PATH, response_class=PlainTextResponse)
async def hello_from_node(
    identity: NodeIdentity = Depends(get_identity),
) -> str:
    """Identify this node to a caller."""
    return identify(identity)


@router.get("/{path:path}", response_class=PlainTextResponse)
async def hello_world(
    path: str,
    aggregator: FanOutAggregator = Depends(get_aggregator),
    resolver: PeerResolver = Depends(get_peer_resolver),
) -> str:
    """Greet from this node and every reachable peer."""
    return await aggregator.aggregate(local_greeting(), resolver.resolve())
