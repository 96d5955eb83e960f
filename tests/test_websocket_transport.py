"""Tests for the WebSocket transport implementation."""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from websockets.asyncio.server import ServerConnection, serve

from nodeshake.config import HandshakeConfig
from nodeshake.exceptions import ProtocolError, TransportConnectionError
from nodeshake.models import Endpoint, HandshakeRequest
from nodeshake.transport.base import Transport
from nodeshake.transport.websocket import WebSocketTransport, normalize_url


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@asynccontextmanager
async def ws_node(handler) -> AsyncIterator[Endpoint]:
    """Local WebSocket server running ``handler`` for each connection."""
    async with serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        yield Endpoint(host="127.0.0.1", port=port)


# ---------------------------------------------------------------------------
# Test: URL normalization
# ---------------------------------------------------------------------------


class TestNormalizeUrl:
    """Tests for normalize_url."""

    @pytest.mark.parametrize(
        "remote,secure,expected",
        [
            ("node.example:8900", False, "ws://node.example:8900"),
            ("node.example:8900", True, "wss://node.example:8900"),
            ("ws://node.example:8900", False, "ws://node.example:8900"),
            ("wss://node.example:8900", False, "wss://node.example:8900"),
            ("wss://node.example:8900", True, "wss://node.example:8900"),
        ],
    )
    def test_schemes(self, remote, secure, expected):
        assert normalize_url(remote, secure) == expected

    def test_insecure_scheme_is_coerced_when_secure(self, caplog):
        with caplog.at_level(logging.WARNING, logger="nodeshake.transport.websocket"):
            url = normalize_url("ws://node.example:8900", secure=True)
        assert url == "wss://node.example:8900"
        assert "coercing to wss://" in caplog.text

    @given(remote=st.text(min_size=1), secure=st.booleans())
    @settings(max_examples=200)
    def test_always_has_websocket_scheme(self, remote: str, secure: bool):
        url = normalize_url(remote, secure)
        assert url.startswith(("ws://", "wss://"))

    @given(remote=st.text(min_size=1), secure=st.booleans())
    @settings(max_examples=200)
    def test_idempotent(self, remote: str, secure: bool):
        once = normalize_url(remote, secure)
        assert normalize_url(once, secure) == once

    @given(rest=st.text())
    def test_secure_urls_are_fixed_points(self, rest: str):
        url = "wss://" + rest
        assert normalize_url(url, True) == url
        assert normalize_url(url, False) == url


# ---------------------------------------------------------------------------
# Test: WebSocketTransport
# ---------------------------------------------------------------------------


class TestWebSocketTransport:
    """Tests for WebSocketTransport against a local server."""

    def test_is_a_transport(self):
        transport = WebSocketTransport(Endpoint(host="node.example", port=8900), secure=True)
        assert isinstance(transport, Transport)
        assert transport.url == "wss://node.example:8900"

    @pytest.mark.asyncio
    async def test_sends_payload_as_text_frame(self) -> None:
        received: list = []

        async def handler(ws: ServerConnection) -> None:
            received.append(await ws.recv())
            await ws.send('{"jsonrpc":"2.0","result":{"solana-core":"1.18.11"},"id":1}')
            await ws.wait_closed()

        async with ws_node(handler) as endpoint:
            body = await WebSocketTransport(endpoint).exchange(HandshakeRequest())

        assert isinstance(received[0], str)
        assert json.loads(received[0]) == {"jsonrpc": "2.0", "id": 1, "method": "getVersion"}
        assert json.loads(body)["result"]["solana-core"] == "1.18.11"

    @pytest.mark.asyncio
    async def test_ping_before_text_is_ignored(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.ping()
            await ws.send("pong-then-data")
            await ws.wait_closed()

        async with ws_node(handler) as endpoint:
            body = await WebSocketTransport(endpoint).exchange(HandshakeRequest())

        assert body == "pong-then-data"

    @pytest.mark.asyncio
    async def test_binary_frame_is_decoded_lossily(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.send(b"ok \xff")
            await ws.wait_closed()

        async with ws_node(handler) as endpoint:
            body = await WebSocketTransport(endpoint).exchange(HandshakeRequest())

        assert body == "ok \ufffd"

    @pytest.mark.asyncio
    async def test_only_first_message_is_returned(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.send("first")
            await ws.send("second")
            await ws.wait_closed()

        async with ws_node(handler) as endpoint:
            body = await WebSocketTransport(endpoint).exchange(HandshakeRequest())

        assert body == "first"

    @pytest.mark.asyncio
    async def test_clean_close_before_data_returns_empty(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.close()

        async with ws_node(handler) as endpoint:
            body = await WebSocketTransport(endpoint).exchange(HandshakeRequest())

        assert body == ""

    @pytest.mark.asyncio
    async def test_abnormal_close_is_connection_error(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.close(code=1011, reason="node failure")

        async with ws_node(handler) as endpoint:
            with pytest.raises(TransportConnectionError):
                await WebSocketTransport(endpoint).exchange(HandshakeRequest())

    @pytest.mark.asyncio
    async def test_oversized_message_is_protocol_error(self) -> None:
        async def handler(ws: ServerConnection) -> None:
            await ws.recv()
            await ws.send("x" * 100)
            await ws.wait_closed()

        config = HandshakeConfig(max_message_size=16)
        async with ws_node(handler) as endpoint:
            with pytest.raises(ProtocolError):
                await WebSocketTransport(endpoint, config=config).exchange(HandshakeRequest())

    @pytest.mark.asyncio
    async def test_no_listener_is_connection_error(self, unused_tcp_port: int) -> None:
        endpoint = Endpoint(host="127.0.0.1", port=unused_tcp_port)
        with pytest.raises(TransportConnectionError):
            await WebSocketTransport(endpoint).exchange(HandshakeRequest())
