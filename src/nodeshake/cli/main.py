# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""
nodeshake command line

Commands:
- connect-rpc (crp): handshake over plain TCP, or TLS with --secure
- connect-rpc-with-websocket (cws): handshake over ws://, or wss:// with --secure
"""

import asyncio
import logging
import socket
import sys
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from nodeshake import __version__
from nodeshake.client import HandshakeClient
from nodeshake.config import HandshakeConfig
from nodeshake.exceptions import ConfigurationError, TransportError
from nodeshake.models import Endpoint, TransportKind, parse_version

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def resolve_target(target: str) -> Endpoint:
    """Resolve ``host:port`` text and return it as an Endpoint.

    The host name is kept (not replaced by the resolved IP) so that TLS
    can validate the node certificate against it.

    Raises:
        click.BadParameter: If the text is malformed or the name does not
            resolve.
    """
    if "://" in target:
        raise click.BadParameter(
            f"Supply the address without the scheme, got {target!r}"
        )
    try:
        endpoint = Endpoint.parse(target)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    try:
        addresses = socket.getaddrinfo(endpoint.host, endpoint.port, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise click.BadParameter(f"Could not find destination {target}") from exc
    if not addresses:
        raise click.BadParameter(f"Could not find destination {target}")
    logger.debug("Resolved %s to %s", target, addresses[0][4][0])
    return endpoint


def _address_callback(ctx: click.Context, param: click.Parameter, value: str) -> Endpoint:
    return resolve_target(value)


def _render_version(body: str) -> None:
    try:
        version = parse_version(body)
    except ValueError as exc:
        logger.debug("Response is not a version result: %s", exc)
        return
    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("solana-core", version.solana_core)
    table.add_row(
        "feature-set",
        str(version.feature_set) if version.feature_set is not None else "N/A",
    )
    console.print(table)


def _run(
    ctx: click.Context,
    endpoint: Endpoint,
    websocket: bool,
    secure: bool,
    timeout: Optional[float],
    raw: bool,
) -> None:
    config: HandshakeConfig = ctx.obj["config"]
    kind = TransportKind.from_flags(websocket=websocket, secure=secure)

    client = HandshakeClient(config)
    try:
        body = asyncio.run(client.perform(endpoint, kind, timeout))
    except TransportError as exc:
        err_console.print(f"[bold red]{exc.kind.value}[/bold red]: {escape(exc.cause)}")
        sys.exit(1)

    if raw:
        click.echo(body)
        return
    console.print(f"[bold]Handshake response from {escape(str(endpoint))}[/bold]")
    console.print(body, markup=False, highlight=False)
    _render_version(body)


_address_option = click.option(
    "--address", "-a",
    required=True,
    callback=_address_callback,
    help="Supply the address without the scheme, i.e. 'api.testnet.solana.com:443'. "
    "Use the '--secure' flag for secure connections.",
)
_secure_option = click.option(
    "--secure", "-s", is_flag=True, default=False,
    help="Indicates a secure connection is required.",
)
_timeout_option = click.option(
    "--timeout", "-t", type=click.FloatRange(min=0, min_open=True), default=None,
    help="Seconds allowed for the whole handshake.",
)
_json_option = click.option(
    "--json", "raw", is_flag=True, default=False,
    help="Print only the raw response body.",
)


@click.group()
@click.version_option(__version__, prog_name="nodeshake")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def app(ctx: click.Context, verbose: bool):
    """nodeshake - A simple RPC node handshake.

    Performs a getVersion handshake with an RPC node over TCP, TLS,
    WebSocket or secure WebSocket.
    """
    try:
        config = HandshakeConfig.from_env()
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc
    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@app.command("connect-rpc")
@_address_option
@_secure_option
@_timeout_option
@_json_option
@click.pass_context
def connect_rpc(
    ctx: click.Context, address: Endpoint, secure: bool, timeout: Optional[float], raw: bool
):
    """Handshake over a raw TCP socket (TLS with --secure)."""
    _run(ctx, address, websocket=False, secure=secure, timeout=timeout, raw=raw)


@app.command("connect-rpc-with-websocket")
@_address_option
@_secure_option
@_timeout_option
@_json_option
@click.pass_context
def connect_rpc_with_websocket(
    ctx: click.Context, address: Endpoint, secure: bool, timeout: Optional[float], raw: bool
):
    """Handshake over a WebSocket (wss:// with --secure)."""
    _run(ctx, address, websocket=True, secure=secure, timeout=timeout, raw=raw)


app.add_command(connect_rpc, name="crp")
app.add_command(connect_rpc_with_websocket, name="cws")


def main() -> None:
    """Console script entry point."""
    app(obj={})


if __name__ == "__main__":
    main()
