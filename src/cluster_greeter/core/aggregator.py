"""Fan-out aggregation of greetings from sibling nodes."""

import asyncio
import logging
from collections.abc import Sequence

import httpx

from cluster_greeter.core.http_pool import DEFAULT_TIMEOUT_SECONDS, HTTPConnectionPool
from cluster_greeter.core.identity import NodeIdentity
from cluster_greeter.core.peers import PeerAddress
from cluster_greeter.core.result_types import GreetingResult, PeerResult

logger = logging.getLogger(__name__)

HELLO_FROM_NODE_PATH = "/helloFromNode"


class PeerResponseError(Exception):
    """Raised when a peer answers with something other than a text body."""


class FanOutAggregator:
    """Combines the local greeting with greetings fetched from peers.

    Peer calls run concurrently, one task per present peer. Results are
    placed by input position, so ordering never depends on which peer
    answers first. Peer failures are logged and dropped; they never
    propagate to the caller.
    """

    def __init__(
        self,
        identity: NodeIdentity,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        path: str = HELLO_FROM_NODE_PATH,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._identity = identity
        self._client = client
        self._timeout = timeout_seconds
        self._path = path

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return HTTPConnectionPool.get_httpx_client()

    async def aggregate(
        self, local: str, peers: Sequence[PeerAddress | None]
    ) -> str:
        """Return ``local`` followed by each reachable peer's greeting."""
        outcomes = await self.collect(peers)
        return GreetingResult.from_outcomes(local, outcomes).join()

    async def collect(
        self, peers: Sequence[PeerAddress | None]
    ) -> list[PeerResult | None]:
        """Call every present peer and return outcomes by input position.

        Absent peers yield ``None`` and are never called.
        """
        outcomes: list[PeerResult | None] = [None] * len(peers)
        present = [(i, peer) for i, peer in enumerate(peers) if peer is not None]
        if not present:
            return outcomes

        results = await asyncio.gather(
            *(self._call_peer(peer) for _, peer in present)
        )
        for (index, _), result in zip(present, results, strict=True):
            outcomes[index] = result
        return outcomes

    async def _call_peer(self, peer: PeerAddress) -> PeerResult:
        """Fetch one peer's greeting, reducing any failure to a PeerResult."""
        try:
            url = peer.endpoint(self._path)
            response = await asyncio.wait_for(
                self.client.get(url), timeout=self._timeout
            )
            response.raise_for_status()
            return PeerResult.success(peer.slot, self._read_text(response))
        except TimeoutError:
            return self._handle_failure(
                peer, f"timed out after {self._timeout} seconds"
            )
        except Exception as e:
            return self._handle_failure(peer, str(e) or type(e).__name__)

    @staticmethod
    def _read_text(response: httpx.Response) -> str:
        content_type = response.headers.get("content-type")
        if content_type is not None and not content_type.lower().startswith(
            "text/"
        ):
            raise PeerResponseError(f"Expected a text body, got {content_type!r}")
        return response.text

    def _handle_failure(self, peer: PeerAddress, error: str) -> PeerResult:
        logger.warning(
            "Node is not available or failed to process request: %s (peer %s: %s)",
            self._identity.name,
            peer,
            error,
        )
        return PeerResult.failure(peer.slot, error)
