# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""WebSocket transport for node handshakes.

Sends the JSON-RPC payload as one text frame and returns the first data
message the node sends back. Later messages are not read.

Requires the ``websockets`` library::

    pip install websockets
"""

from __future__ import annotations

import logging
from typing import Optional

from websockets.asyncio.client import connect

from nodeshake.errors import map_connect_error, map_error
from nodeshake.exceptions import TransportError
from nodeshake.models import HandshakeRequest

from .base import Transport

logger = logging.getLogger(__name__)

WS_SCHEME = "ws://"
WSS_SCHEME = "wss://"


def normalize_url(remote: str, secure: bool) -> str:
    """Give ``remote`` the WebSocket scheme implied by ``secure``.

    A ``wss://`` URL is kept as is. A ``ws://`` URL is upgraded to
    ``wss://`` when ``secure`` is set. Anything else gets prefixed.
    """
    if remote.startswith(WSS_SCHEME):
        return remote
    if remote.startswith(WS_SCHEME):
        if not secure:
            return remote
        logger.warning(
            "Target URL starts with ws:// but secure flag is set - coercing to wss://"
        )
        return WSS_SCHEME + remote[len(WS_SCHEME):]
    return (WSS_SCHEME if secure else WS_SCHEME) + remote


class WebSocketTransport(Transport):
    """WebSocket transport, plain (``ws://``) or secure (``wss://``).

    ``timeout`` is accepted for interface compatibility but no deadline is
    applied to the connect or the message wait here; the handshake client
    enforces the overall deadline when one is given.
    """

    @property
    def url(self) -> str:
        """Normalized URL this transport connects to."""
        return normalize_url(self.remote, self.secure)

    async def exchange(
        self, payload: HandshakeRequest, timeout: Optional[float] = None
    ) -> str:
        url = self.url
        try:
            return await self._send(url, payload)
        except TransportError:
            raise
        except Exception as exc:
            raise map_error(exc) from exc

    async def _send(self, url: str, payload: HandshakeRequest) -> str:
        try:
            ws = await connect(
                url,
                open_timeout=None,
                ping_interval=None,
                proxy=None,
                max_size=self.config.max_message_size,
            )
        except Exception as exc:
            raise map_connect_error(exc) from exc

        async with ws:
            logger.info("Connected to remote websocket %s", url)
            message = payload.to_json()
            await ws.send(message)
            logger.info("Sent message payload %s", message)

            # Control frames are answered by the protocol layer and never
            # surface here; the first data message ends the exchange.
            async for received in ws:
                if isinstance(received, str):
                    logger.info("Received text message %s", received)
                    return received
                if isinstance(received, (bytes, bytearray, memoryview)):
                    text = bytes(received).decode("utf-8", errors="replace")
                    logger.info("Received binary message %s", text)
                    return text

        logger.info("Connection to %s closed before any data message", url)
        return ""


__all__ = [
    "WebSocketTransport",
    "normalize_url",
    "WS_SCHEME",
    "WSS_SCHEME",
]
