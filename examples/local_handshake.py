#!/usr/bin/env python3
"""
nodeshake - Local Handshake Demo

Starts an in-process node that answers getVersion over raw HTTP and over
WebSocket, then handshakes with it through both transports.

Run: python local_handshake.py
"""

import asyncio
import json

from rich import box
from rich.console import Console
from rich.table import Table
from websockets.asyncio.server import ServerConnection, serve

from nodeshake import Endpoint, HandshakeClient, TransportError, TransportKind, parse_version

console = Console()

VERSION_RESULT = {
    "jsonrpc": "2.0",
    "result": {"feature-set": 3469865029, "solana-core": "1.18.11"},
    "id": 1,
}


async def handle_http(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Answer one hand-framed POST and close."""
    await reader.readuntil(b"}\r\n")
    body = json.dumps(VERSION_RESULT).encode()
    writer.write(
        b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n\r\n".encode()
        + body
    )
    await writer.drain()
    writer.close()


async def handle_ws(ws: ServerConnection) -> None:
    """Answer one getVersion text frame."""
    request = json.loads(await ws.recv())
    await ws.send(json.dumps({**VERSION_RESULT, "id": request["id"]}))
    await ws.wait_closed()


async def main() -> None:
    http_server = await asyncio.start_server(handle_http, "127.0.0.1", 0)
    http_port = http_server.sockets[0].getsockname()[1]

    async with serve(handle_ws, "127.0.0.1", 0) as ws_server:
        ws_port = ws_server.sockets[0].getsockname()[1]
        client = HandshakeClient()

        table = Table(box=box.ROUNDED)
        table.add_column("Transport", style="cyan")
        table.add_column("Endpoint")
        table.add_column("solana-core")
        table.add_column("feature-set", justify="right")

        for kind, port in ((TransportKind.PLAIN, http_port), (TransportKind.WEBSOCKET, ws_port)):
            endpoint = Endpoint(host="127.0.0.1", port=port)
            try:
                body = await client.perform(endpoint, kind, timeout=5)
            except TransportError as exc:
                table.add_row(kind.value, str(endpoint), f"[red]{exc.kind.value}[/red]", exc.cause)
                continue
            version = parse_version(body)
            table.add_row(kind.value, str(endpoint), version.solana_core, str(version.feature_set))

        console.print(table)

    http_server.close()
    await http_server.wait_closed()


if __name__ == "__main__":
    asyncio.run(main())
