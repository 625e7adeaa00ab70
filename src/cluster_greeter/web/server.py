"""FastAPI server for a cluster-greeter node."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from importlib.metadata import version

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse

from cluster_greeter.config import NodeConfig
from cluster_greeter.core.aggregator import FanOutAggregator
from cluster_greeter.core.http_pool import HTTPConnectionPool
from cluster_greeter.web.api import greetings

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Get the cluster-greeter package version."""
    try:
        return version("cluster-greeter")
    except Exception:
        return "0.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release pooled peer connections on shutdown."""
    yield
    await HTTPConnectionPool.close()


def create_app(
    config: NodeConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Node configuration, defaults to ``NodeConfig()``
        client: Outbound client for peer calls; the shared pool when None

    Returns:
        Configured FastAPI application instance.
    """
    config = config or NodeConfig()
    identity = config.identity

    if client is None:
        HTTPConnectionPool.configure(
            config.connection_pool.model_dump(),
            timeout_seconds=config.peer_timeout_seconds,
        )

    app = FastAPI(
        title="cluster-greeter",
        description=f"Cluster greeting node '{identity.name}'",
        version=get_version(),
        lifespan=lifespan,
    )

    app.state.identity = identity
    app.state.peer_resolver = config.peer_resolver()
    app.state.aggregator = FanOutAggregator(
        identity,
        client=client,
        timeout_seconds=config.peer_timeout_seconds,
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        """Return a consistent JSON body for HTTP errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch unhandled exceptions and return structured JSON."""
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "node": identity.name, "version": get_version()}

    # Registered last: the greetings router ends with a catch-all route
    app.include_router(greetings.router)

    return app
