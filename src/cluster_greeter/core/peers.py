"""Peer addresses and per-request peer resolution."""

from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from cluster_greeter.core.identity import NodeIdentity


@dataclass(frozen=True)
class PeerAddress:
    """Base address of one sibling node, bound to a logical slot name."""

    slot: str
    base_url: str

    def endpoint(self, path: str) -> str:
        """Resolve ``path`` against the peer's base address.

        Raises:
            httpx.InvalidURL: If the base address cannot be parsed
        """
        base = httpx.URL(self.base_url)
        if not base.scheme or not base.host:
            raise httpx.InvalidURL(f"Peer address is not absolute: {self.base_url!r}")
        return str(base.join(path))

    def __str__(self) -> str:
        return f"{self.slot} ({self.base_url})"


class PeerResolver:
    """Resolves configured peer slots into optional addresses.

    Slots are returned in configuration order. A slot without an address,
    or one naming this node itself, resolves to ``None``.
    """

    def __init__(
        self,
        peers: Mapping[str, str | None],
        identity: NodeIdentity | None = None,
    ) -> None:
        self._peers = dict(peers)
        self._identity = identity

    @property
    def slots(self) -> list[str]:
        """Configured slot names in order."""
        return list(self._peers)

    def resolve(self) -> list[PeerAddress | None]:
        """Resolve all slots for one request."""
        return [self._resolve_slot(slot, url) for slot, url in self._peers.items()]

    def _resolve_slot(self, slot: str, url: str | None) -> PeerAddress | None:
        if not url:
            return None
        if self._identity is not None and slot == self._identity.name:
            return None
        return PeerAddress(slot=slot, base_url=url)
