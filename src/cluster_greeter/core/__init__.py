"""Core fan-out aggregation for cluster-greeter."""

from cluster_greeter.core.aggregator import FanOutAggregator
from cluster_greeter.core.identity import NodeIdentity, identify, local_greeting
from cluster_greeter.core.peers import PeerAddress, PeerResolver
from cluster_greeter.core.result_types import GreetingResult, PeerResult

__all__ = [
    "FanOutAggregator",
    "GreetingResult",
    "NodeIdentity",
    "PeerAddress",
    "PeerResolver",
    "PeerResult",
    "identify",
    "local_greeting",
]
