"""Node identity and the self-identification responder."""

from dataclasses import dataclass

LOCAL_GREETING = "Hello World!"


@dataclass(frozen=True)
class NodeIdentity:
    """Logical name of the running node.

    Created once at startup and shared read-only by the aggregator and
    the identification endpoint.
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Node name must not be empty")

    def __str__(self) -> str:
        return self.name


def identify(identity: NodeIdentity) -> str:
    """Return the greeting peers receive from this node."""
    return f"Hello from '{identity.name}'"


def local_greeting() -> str:
    """Return this node's own contribution to an aggregated greeting."""
    return LOCAL_GREETING
