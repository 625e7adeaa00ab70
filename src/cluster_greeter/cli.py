"""Command line interface for cluster-greeter."""

import asyncio
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from cluster_greeter.config import NodeConfig, load_config, parse_peer_option
from cluster_greeter.core.aggregator import FanOutAggregator
from cluster_greeter.core.http_pool import HTTPConnectionPool
from cluster_greeter.core.identity import NodeIdentity, identify, local_greeting
from cluster_greeter.core.result_types import GreetingResult, PeerResult

_PEER_HELP = "Peer slot as SLOT=URL; repeat for several peers, SLOT= marks it absent"


def _parse_peers(values: tuple[str, ...]) -> dict[str, str | None]:
    """Parse repeated --peer options, keeping their order."""
    peers: dict[str, str | None] = {}
    for value in values:
        try:
            slot, url = parse_peer_option(value)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--peer") from e
        peers[slot] = url
    return peers


def _build_config(config_path: str | None, **overrides: Any) -> NodeConfig:
    try:
        return load_config(config_path, **overrides)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def _describe(slot: str, outcome: PeerResult | None) -> str:
    """Render one peer outcome as rich markup."""
    if outcome is None:
        return f"  [dim]- {escape(slot)}: absent[/dim]"
    if outcome.ok:
        return f"  [green]✅ {escape(slot)}[/green]: {escape(outcome.response or '')}"
    return f"  [red]❌ {escape(slot)}[/red]: {escape(outcome.error or '')}"


@click.group()
@click.version_option(package_name="cluster-greeter")
def cli() -> None:
    """Cluster Greeter - greetings aggregated across sibling nodes."""
    pass


@cli.command()
@click.argument("port", type=int, required=False)
@click.argument("node_name", required=False)
@click.option("--host", default=None, help="Interface to bind (default 0.0.0.0)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML node configuration file",
)
@click.option("--peer", "peers", multiple=True, help=_PEER_HELP)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-peer call timeout in seconds",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
)
def serve(
    port: int | None,
    node_name: str | None,
    host: str | None,
    config_path: str | None,
    peers: tuple[str, ...],
    timeout: float | None,
    log_level: str,
) -> None:
    """Run a cluster node on PORT named NODE_NAME (default node<PORT>)."""
    import uvicorn

    from cluster_greeter.web.server import create_app

    config = _build_config(
        config_path,
        port=port,
        node_name=node_name,
        host=host,
        peer_timeout_seconds=timeout,
        peers=_parse_peers(peers),
    )
    click.echo(
        f"Starting node '{config.node_name}' on {config.host}:{config.port}"
        f" with {len(config.peers)} peer slot(s)"
    )
    uvicorn.run(
        create_app(config), host=config.host, port=config.port, log_level=log_level
    )


async def _run_greet(config: NodeConfig) -> tuple[str, list[PeerResult | None]]:
    HTTPConnectionPool.configure(
        config.connection_pool.model_dump(),
        timeout_seconds=config.peer_timeout_seconds,
    )
    aggregator = FanOutAggregator(
        config.identity, timeout_seconds=config.peer_timeout_seconds
    )
    try:
        outcomes = await aggregator.collect(config.peer_resolver().resolve())
    finally:
        await HTTPConnectionPool.close()
    return local_greeting(), outcomes


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML node configuration file",
)
@click.option("--peer", "peers", multiple=True, help=_PEER_HELP)
@click.option("--node-name", default=None, help="Name of the calling node")
@click.option("--timeout", type=float, default=None, help="Per-peer timeout")
@click.option("--verbose", "-v", is_flag=True, help="Show per-peer outcomes")
def greet(
    config_path: str | None,
    peers: tuple[str, ...],
    node_name: str | None,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Fetch and print one aggregated greeting without serving."""
    config = _build_config(
        config_path,
        node_name=node_name,
        peer_timeout_seconds=timeout,
        peers=_parse_peers(peers),
    )
    local, outcomes = asyncio.run(_run_greet(config))

    if verbose:
        console = Console(highlight=False)
        console.print(f"Peers of '{escape(str(config.node_name))}':")
        for slot, outcome in zip(config.peers, outcomes, strict=True):
            console.print(_describe(slot, outcome))

    click.echo(GreetingResult.from_outcomes(local, outcomes).join())


@cli.command("identify")
@click.argument("node_name")
def identify_command(node_name: str) -> None:
    """Print the greeting NODE_NAME gives its peers."""
    try:
        identity = NodeIdentity(node_name)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(identify(identity))


if __name__ == "__main__":
    cli()
